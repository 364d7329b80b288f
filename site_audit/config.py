"""Command-line resolution and settings for an audit run."""

import argparse
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from site_audit.errors import RunDirectoryError
from site_audit.models.base import Model

DEFAULT_URL = "https://dropsites.biz/"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

REQUIRED_HEADERS = (
    "strict-transport-security",
    "content-security-policy",
    "x-frame-options",
    "x-content-type-options",
    "referrer-policy",
    "permissions-policy",
)


class AuditSettings(BaseSettings):
    """Defaults that apply to every run, read from ``SITE_AUDIT_*`` variables."""

    model_config = SettingsConfigDict(env_prefix="SITE_AUDIT_", case_sensitive=False)

    default_url: str = DEFAULT_URL
    reports_dir: Path = Path("reports")
    tools_dir: Path = Path(".")
    node_packages: tuple[str, ...] = Field(
        default=("lighthouse", "pa11y", "broken-link-checker"),
        description="Packages installed with npm on first run",
    )
    required_headers: tuple[str, ...] = REQUIRED_HEADERS
    zap_image: str = "ghcr.io/zaproxy/zaproxy:stable"
    verbose: bool = False


class RunConfig(Model):
    """Resolved options of a single invocation."""

    url: str
    summary: bool = False
    security: bool = False


@dataclass(frozen=True, kw_only=True)
class HelpRequest:
    """Parse result when help was asked for anywhere on the command line."""

    usage: str


HELP_FLAGS = frozenset({"-h", "--help"})


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser describing the ``site-audit`` command."""
    parser = argparse.ArgumentParser(
        prog="site-audit",
        description="Run Lighthouse, pa11y, broken link and smoke checks on a URL",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "url",
        nargs="?",
        help="Target URL; any other token is taken as the URL, the last one wins",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a compact summary (scores + issue counts)",
    )
    parser.add_argument(
        "--security",
        action="store_true",
        help="Run extra security checks (headers, TLS, optional ZAP)",
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show help")
    return parser


def parse_args(
    argv: Sequence[str], settings: AuditSettings | None = None
) -> HelpRequest | RunConfig:
    """Resolve command-line tokens into a run configuration.

    Only ``--summary``, ``--security`` and ``-h``/``--help`` are options,
    matched exactly. Every other token, dash-prefixed or not, overrides the
    URL, so the last one wins; without any the default URL is used. Help
    takes precedence over everything else.
    """
    settings = settings or AuditSettings()
    if HELP_FLAGS.intersection(argv):
        return HelpRequest(usage=build_parser().format_help())

    url = settings.default_url
    summary = security = False
    for token in argv:
        if token == "--summary":
            summary = True
        elif token == "--security":
            security = True
        else:
            url = token

    return RunConfig(url=url, summary=summary, security=security)


def make_run_dir(reports_dir: Path, now: datetime | None = None) -> Path:
    """Create the timestamped directory for this run and return its path.

    Two runs started within the same second get ``-1``, ``-2``... suffixes
    instead of sharing a directory.
    """
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    candidate = reports_dir / timestamp
    suffix = 0

    while True:
        try:
            candidate.mkdir(parents=True)
        except FileExistsError:
            suffix += 1
            candidate = reports_dir / f"{timestamp}-{suffix}"
            continue
        except OSError as exc:
            raise RunDirectoryError(candidate, exc.strerror or str(exc)) from exc
        return candidate.resolve()
