"""Models for the condensed view of a finished run."""

from collections.abc import Sequence
from pathlib import Path
from typing import Literal, TypeAlias

from site_audit.models.base import Model

UNKNOWN = "unknown"

Verdict: TypeAlias = Literal["PASS", "ISSUES"]


def _score(value: int | None) -> str:
    return UNKNOWN if value is None else str(value)


class LighthouseScores(Model):
    """Lighthouse category scores as integer percentages."""

    performance: int | None = None
    accessibility: int | None = None
    best_practices: int | None = None
    seo: int | None = None

    def format(self) -> str:
        """Render as ``perf=.. a11y=.. best_practices=.. seo=..``."""
        return (
            f"perf={_score(self.performance)} "
            f"a11y={_score(self.accessibility)} "
            f"best_practices={_score(self.best_practices)} "
            f"seo={_score(self.seo)}"
        )


class SecurityFields(Model):
    """Values scraped from the ``key: value`` lines of security.txt."""

    missing_headers: str = UNKNOWN
    cert_days_left: str = UNKNOWN
    zap: str = UNKNOWN

    def format(self) -> str:
        return (
            f"missing_headers={self.missing_headers} "
            f"cert_days_left={self.cert_days_left} "
            f"zap={self.zap}"
        )


class Summary(Model):
    """Everything printed by the summary formatter."""

    url: str
    run_dir: Path
    lighthouse: LighthouseScores
    pa11y: Verdict
    broken_links: int
    smoke: Verdict
    security: SecurityFields | None = None

    def lines(self) -> Sequence[str]:
        """Fixed single-line rendering of each field."""
        lines = [
            "Summary",
            f"URL: {self.url}",
            f"Run: {self.run_dir}",
            f"Lighthouse: {self.lighthouse.format()}",
            f"Pa11y: {self.pa11y}",
            f"Broken links: {self.broken_links}",
            f"Smoke: {self.smoke}",
        ]
        if self.security is not None:
            lines.append(f"Security: {self.security.format()}")
        return lines
