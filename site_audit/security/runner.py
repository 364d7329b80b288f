"""Security sub-runner writing the sectioned security.txt report."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from urllib.parse import urlsplit

from site_audit.layout import RunLayout
from site_audit.models.result import CheckResult
from site_audit.parsing import cert_days_left, find_missing_headers, parse_not_after
from site_audit.security.base import (
    CertInspector,
    HeaderInspector,
    InspectionError,
    VulnerabilityScanner,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Section:
    """Lines appended to security.txt plus the matching check result."""

    lines: Sequence[str]
    result: CheckResult


async def headers_section(
    inspector: HeaderInspector,
    url: str,
    layout: RunLayout,
    required: Sequence[str],
) -> Section:
    """Report which of the required security headers are missing."""
    lines = "[headers]"

    if (reason := inspector.unavailable_reason()) is not None:
        lines += [f"SKIPPED: {reason}", "missing_headers: unknown"]
        return Section(
            lines=lines,
            result=CheckResult(name="headers", status="unavailable", reason=reason),
        )

    try:
        dump = await inspector.fetch_headers(url)
    except InspectionError as exc:
        log.warning("Header check failed: %s", exc)
        lines += [f"FAILED: {exc}", "missing_headers: unknown"]
        return Section(
            lines=lines,
            result=CheckResult(name="headers", status="degraded", reason=str(exc)),
        )

    layout.security_headers.write_text(dump)
    missing = find_missing_headers(dump, required)
    lines += [f"MISSING: {name}" for name in missing]
    lines.append(f"missing_headers: {len(missing)}")

    return Section(
        lines=lines,
        result=CheckResult(
            name="headers",
            status="degraded" if missing else "ok",
            reason=f"{len(missing)} missing header(s)" if missing else None,
            output=layout.security_headers,
        ),
    )


async def tls_section(
    inspector: CertInspector,
    url: str,
    layout: RunLayout,
    now: datetime | None = None,
) -> Section:
    """Report the certificate fields and the days left until it expires."""
    lines = "[tls]"
    host = urlsplit(url).hostname or ""

    if (reason := inspector.unavailable_reason()) is not None:
        lines.append(f"SKIPPED: {reason}")
        return Section(
            lines=lines,
            result=CheckResult(name="tls", status="unavailable", reason=reason),
        )

    try:
        certificate = await inspector.fetch_certificate(host)
    except InspectionError as exc:
        log.warning("TLS check failed: %s", exc)
        lines.append(f"FAILED: TLS certificate fetch failed for {host}:443")
        return Section(
            lines=lines,
            result=CheckResult(name="tls", status="degraded", reason=str(exc)),
        )

    cert_text = certificate.to_text()
    layout.tls_cert.write_text(cert_text)
    lines += cert_text.splitlines()

    if (not_after := parse_not_after(cert_text)) is not None:
        days = cert_days_left(not_after, now or datetime.now(UTC))
        lines.append(f"cert_days_left: {days}")

    return Section(
        lines=lines, result=CheckResult(name="tls", status="ok", output=layout.tls_cert)
    )


async def zap_section(
    scanner: VulnerabilityScanner, url: str, layout: RunLayout
) -> Section:
    """Run the vulnerability baseline scan and record its status."""
    outcome = await scanner.scan(url, layout)

    if not outcome.ran:
        result = CheckResult(name="zap", status="unavailable", reason=outcome.status)
    elif outcome.clean:
        result = CheckResult(name="zap", status="ok", output=layout.zap_output)
    else:
        result = CheckResult(
            name="zap",
            status="degraded",
            reason=outcome.status,
            output=layout.zap_output,
        )

    return Section(lines=["[zap_baseline]", f"status: {outcome.status}"], result=result)


@dataclass(frozen=True, kw_only=True)
class SecurityRunner:
    """Runs the header, TLS and ZAP sections in order.

    Each section is appended to security.txt as soon as it finishes, so a
    later failure never loses an earlier section. A section that raises is
    recorded as failed and the next one still runs.
    """

    headers: HeaderInspector
    certificates: CertInspector
    scanner: VulnerabilityScanner
    required_headers: Sequence[str]

    async def run(self, url: str, layout: RunLayout) -> Sequence[CheckResult]:
        """Write security.txt and return one result per section."""
        loop = asyncio.get_running_loop()
        layout.security.write_text(f"Security checks for {url}\n\n")

        results: list[CheckResult] = []
        sections = (
            (
                "headers",
                ["[headers]"],
                ["missing_headers: unknown"],
                lambda: headers_section(
                    self.headers, url, layout, self.required_headers
                ),
            ),
            (
                "tls",
                ["[tls]"],
                [],
                lambda: tls_section(self.certificates, url, layout),
            ),
            (
                "zap",
                "[zap_baseline]",
                ["status: unknown"],
                lambda: zap_section(self.scanner, url, layout),
            ),
        )
        for index, (name, heading, unknown, make_section) in enumerate(sections):
            start = loop.time()
            try:
                section = await make_section()
            except Exception as exc:
                log.error("Security check %s failed: %s", name, exc, exc_info=exc)
                section = Section(
                    lines=[heading, f"FAILED: {exc}", *unknown],
                    result=CheckResult(name=name, status="degraded", reason=str(exc)),
                )
            self._append(layout, section.lines, leading_blank=index > 0)
            results.append(replace(section.result, duration=loop.time() - start))

        return results

    @staticmethod
    def _append(
        layout: RunLayout, lines: Sequence[str], *, leading_blank: bool
    ) -> None:
        with layout.security.open("a") as report:
            if leading_blank:
                report.write("\n")
            report.writelines(f"{line}\n" for line in lines)
