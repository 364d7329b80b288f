"""Invocation of the headless browser smoke check as a subprocess."""

import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from site_audit.checks.base import CommandCheck, SmokeRunner
from site_audit.layout import RunLayout


@dataclass(frozen=True, kw_only=True)
class PlaywrightSmoke(CommandCheck, SmokeRunner):
    """Runs ``site_audit.smoke_check`` in a separate interpreter."""

    name = "smoke"
    title = "Playwright smoke"
    notice = "Smoke test found issues. See {path}"

    python: str = sys.executable

    def command(self, url: str, layout: RunLayout) -> Sequence[str]:
        return [self.python, "-m", "site_audit.smoke_check", url, str(layout.root)]

    def output_path(self, layout: RunLayout) -> Path | None:
        return layout.smoke
