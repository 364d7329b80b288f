"""CLI entry point for the site audit."""

import asyncio
import logging
import sys
from collections.abc import Sequence
from datetime import datetime

from site_audit.bootstrap import ensure_tools
from site_audit.config import (
    AuditSettings,
    HelpRequest,
    RunConfig,
    make_run_dir,
    parse_args,
)
from site_audit.errors import SiteAuditError
from site_audit.layout import RunLayout
from site_audit.models.result import RunReport
from site_audit.orchestrator import AuditOrchestrator
from site_audit.summary import build_summary, print_summary
from site_audit.toolchain import Toolchain

STATUS_SYMBOLS = {
    "ok": "✓",
    "degraded": "✗",
    "unavailable": "-",
}


def log_results_summary(log: logging.Logger, report: RunReport) -> None:
    """Log the status of every check of the run."""
    for result in report.results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s: %s (%.2fs)", symbol, result.name, result.status, result.duration
        )
        if result.reason:
            log.info("  Reason: %s", result.reason)

    if report.has_findings:
        log.info("Some checks reported issues, see the reports below")
    else:
        log.info("All checks passed")


def format_pointers(report: RunReport) -> Sequence[str]:
    """Lines telling the user where each report was written."""
    layout = report.layout
    lines = [
        "Audit complete.",
        f"- Lighthouse HTML: {layout.lighthouse_html}",
        f"- Lighthouse JSON: {layout.lighthouse_json}",
        f"- Pa11y report:    {layout.pa11y}",
        f"- Broken links:    {layout.broken_links}",
        f"- Smoke report:    {layout.smoke}",
        f"- Screenshot:      {layout.screenshot}",
    ]
    if report.config.security:
        lines.append(f"- Security report: {layout.security}")
        if layout.zap_output.is_file():
            lines.append(f"- ZAP output:      {layout.zap_output}")
    return lines


async def run(
    config: RunConfig,
    settings: AuditSettings,
    now: datetime | None = None,
) -> int:
    """Run the audit and return the exit code.

    Findings of individual checks do not change the exit code; only the
    errors raised by the setup steps do, and those propagate to the caller.
    """
    log = logging.getLogger("site_audit")

    layout = RunLayout(make_run_dir(settings.reports_dir, now))
    await ensure_tools(settings)

    log.info("Running website audit for: %s", config.url)
    log.info("Report directory: %s", layout.root)

    async with Toolchain.from_settings(settings) as toolchain:
        orchestrator = AuditOrchestrator(toolchain=toolchain)
        report = await orchestrator.run(config, layout)

    log_results_summary(log, report)

    print()
    for line in format_pointers(report):
        print(line)

    if config.summary:
        print_summary(build_summary(config.url, layout, security=config.security))

    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    settings = AuditSettings()
    parsed = parse_args(sys.argv[1:] if argv is None else argv, settings)

    if isinstance(parsed, HelpRequest):
        print(parsed.usage, end="")
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if settings.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        exit_code = asyncio.run(run(parsed, settings))
    except SiteAuditError as exc:
        logging.getLogger("site_audit").error("%s", exc)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
