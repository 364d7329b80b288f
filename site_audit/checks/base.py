"""Abstract base classes for the external checks run against a URL."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from site_audit.layout import RunLayout
from site_audit.models.result import CheckResult
from site_audit.process import run_command

log = logging.getLogger(__name__)


class Check(ABC):
    """A single external tool run against the target URL."""

    name: ClassVar[str]
    title: ClassVar[str]
    notice: ClassVar[str | None] = None

    @abstractmethod
    async def run(self, url: str, layout: RunLayout) -> CheckResult:
        """Run the check and write its raw output inside the run directory.

        Args:
            url: Target URL
            layout: Paths of the current run directory

        Returns:
            Result of the check. Findings are reported as ``degraded``.

        """

    def report_path(self, layout: RunLayout) -> Path | None:
        """File a reader should look at for details."""
        return None


class PerformanceAuditor(Check):
    """Performance, accessibility, best-practices and SEO scoring."""


class AccessibilityLinter(Check):
    """WCAG rule evaluation."""


class LinkChecker(Check):
    """Broken link scanning."""


class SmokeRunner(Check):
    """Headless browser load of the page."""


@dataclass(frozen=True, kw_only=True)
class CommandCheck(Check):
    """Check implemented by running a command and capturing its output.

    Subclasses provide the command line and the file the output goes to.
    The exit code decides between ``ok`` and ``degraded``.
    """

    cwd: Path | None = None

    @abstractmethod
    def command(self, url: str, layout: RunLayout) -> Sequence[str]:
        """Build the command line for the target URL."""

    def output_path(self, layout: RunLayout) -> Path | None:
        """File receiving the command output, or None to discard stdout."""
        return None

    def report_path(self, layout: RunLayout) -> Path | None:
        """File a reader should look at for details."""
        return self.output_path(layout)

    async def run(self, url: str, layout: RunLayout) -> CheckResult:
        """Run the command, never raising for tool failures."""
        loop = asyncio.get_running_loop()
        start = loop.time()
        try:
            returncode = await run_command(
                self.command(url, layout),
                output=self.output_path(layout),
                cwd=self.cwd,
            )
        except OSError as exc:
            log.error("Cannot start %s: %s", self.name, exc)
            return CheckResult(
                name=self.name,
                status="degraded",
                duration=loop.time() - start,
                reason=f"cannot start: {exc}",
                output=self.report_path(layout),
            )

        return CheckResult.from_exit_code(
            self.name,
            returncode,
            duration=loop.time() - start,
            output=self.report_path(layout),
        )
