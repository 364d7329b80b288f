"""Lighthouse performance audit."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from site_audit.checks.base import CommandCheck, PerformanceAuditor
from site_audit.layout import RunLayout
from site_audit.models.result import CheckResult

CATEGORIES = ("performance", "accessibility", "best-practices", "seo")


@dataclass(frozen=True, kw_only=True)
class Lighthouse(CommandCheck, PerformanceAuditor):
    """Runs ``npx lighthouse`` and writes HTML and JSON reports."""

    name = "lighthouse"
    title = "Lighthouse"

    def command(self, url: str, layout: RunLayout) -> Sequence[str]:
        return [
            "npx",
            "lighthouse",
            url,
            f"--only-categories={','.join(CATEGORIES)}",
            "--output=html",
            "--output=json",
            f"--output-path={layout.lighthouse_prefix}",
            "--chrome-flags=--headless",
        ]

    def report_path(self, layout: RunLayout) -> Path | None:
        return layout.lighthouse_html

    async def run(self, url: str, layout: RunLayout) -> CheckResult:
        layout.lighthouse_dir.mkdir(parents=True, exist_ok=True)
        return await super().run(url, layout)
