"""pa11y accessibility linting."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from site_audit.checks.base import AccessibilityLinter, CommandCheck
from site_audit.layout import RunLayout


@dataclass(frozen=True, kw_only=True)
class Pa11y(CommandCheck, AccessibilityLinter):
    """Runs ``npx pa11y`` against the WCAG 2 AA standard."""

    name = "pa11y"
    title = "Accessibility (pa11y)"
    notice = "pa11y found issues. See {path}"

    standard: str = "WCAG2AA"

    def command(self, url: str, layout: RunLayout) -> Sequence[str]:
        return ["npx", "pa11y", url, "--reporter", "cli", "--standard", self.standard]

    def output_path(self, layout: RunLayout) -> Path | None:
        return layout.pa11y
