"""broken-link-checker scan of the target site."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from site_audit.checks.base import CommandCheck, LinkChecker
from site_audit.layout import RunLayout


@dataclass(frozen=True, kw_only=True)
class BrokenLinkChecker(CommandCheck, LinkChecker):
    """Runs ``npx blc`` recursively, excluding external links."""

    name = "broken-links"
    title = "Broken links"
    notice = "Broken link checker reported issues. See {path}"

    def command(self, url: str, layout: RunLayout) -> Sequence[str]:
        return ["npx", "blc", url, "-ro"]

    def output_path(self, layout: RunLayout) -> Path | None:
        return layout.broken_links
