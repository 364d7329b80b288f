"""Sequential execution of the checks for one run."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from site_audit.checks.base import Check
from site_audit.config import RunConfig
from site_audit.layout import RunLayout
from site_audit.models.result import CheckResult, RunReport
from site_audit.toolchain import Toolchain

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class AuditOrchestrator:
    """Runs every enabled check, one after another.

    A check that finds problems or fails never stops the ones after it.
    """

    toolchain: Toolchain

    @property
    def checks(self) -> Sequence[Check]:
        return (
            self.toolchain.auditor,
            self.toolchain.linter,
            self.toolchain.links,
            self.toolchain.smoke,
        )

    async def run(self, config: RunConfig, layout: RunLayout) -> RunReport:
        """Run the base checks, then the security checks when enabled.

        Args:
            config: Resolved options of this invocation
            layout: Paths inside the run directory

        Returns:
            Report with one result per check in execution order

        """
        results: list[CheckResult] = []
        checks = self.checks

        for index, check in enumerate(checks, start=1):
            log.info("[%d/%d] %s", index, len(checks), check.title)
            result = await self._run_check(check, config.url, layout)
            if (
                result.status != "ok"
                and check.notice is not None
                and result.output is not None
            ):
                print(check.notice.format(path=result.output))
            results.append(result)

        if config.security:
            step = len(checks) + 1
            log.info("[%d/%d] Security checks", step, step)
            results.extend(await self.toolchain.security.run(config.url, layout))

        for result in results:
            log.debug(
                "Check completed: name=%s status=%s duration=%.1fs",
                result.name,
                result.status,
                result.duration,
            )

        return RunReport(config=config, layout=layout, results=results)

    async def _run_check(
        self, check: Check, url: str, layout: RunLayout
    ) -> CheckResult:
        try:
            return await check.run(url, layout)
        except Exception as exc:
            log.error("Check %s failed: %s", check.name, exc, exc_info=exc)
            return CheckResult(
                name=check.name,
                status="degraded",
                reason=str(exc),
                output=check.report_path(layout),
            )
