"""Tests for the security sub-runner."""

from datetime import UTC, datetime, timedelta
from unittest.mock import Mock

import pytest

from site_audit.config import REQUIRED_HEADERS
from site_audit.layout import RunLayout
from site_audit.security.base import (
    CertificateInfo,
    CertInspector,
    HeaderInspector,
    InspectionError,
    ScanOutcome,
    VulnerabilityScanner,
)
from site_audit.security.runner import (
    SecurityRunner,
    headers_section,
    tls_section,
    zap_section,
)

URL = "https://example.com/path?q=1"
NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)

HEADERS = """\
HTTP/1.1 200 OK
Strict-Transport-Security: max-age=31536000
X-Frame-Options: SAMEORIGIN
X-Content-Type-Options: nosniff
Referrer-Policy: strict-origin
"""

NOT_BEFORE = datetime(2024, 1, 1, tzinfo=UTC)


def certificate(not_after: datetime) -> CertificateInfo:
    return CertificateInfo(
        issuer="CN=Test CA,O=Test",
        subject="CN=example.com",
        not_before=NOT_BEFORE,
        not_after=not_after,
    )


@pytest.fixture
def header_inspector() -> Mock:
    """Header inspector returning a dump without two required headers."""
    inspector = Mock(spec=HeaderInspector)
    inspector.unavailable_reason.return_value = None
    inspector.fetch_headers.return_value = HEADERS
    return inspector


@pytest.fixture
def cert_inspector() -> Mock:
    """Certificate inspector returning a certificate valid for 10 days."""
    inspector = Mock(spec=CertInspector)
    inspector.unavailable_reason.return_value = None
    inspector.fetch_certificate.return_value = certificate(NOW + timedelta(days=10))
    return inspector


@pytest.fixture
def scanner() -> Mock:
    """Scanner completing cleanly."""
    scanner = Mock(spec=VulnerabilityScanner)
    scanner.scan.return_value = ScanOutcome(
        mode="container", status="completed", clean=True
    )
    return scanner


class TestHeadersSection:
    """Tests for headers_section."""

    async def test_reports_missing_headers(
        self, header_inspector: Mock, layout: RunLayout
    ) -> None:
        """Emits one MISSING line per absent header and the count."""
        section = await headers_section(
            header_inspector, URL, layout, REQUIRED_HEADERS
        )

        assert section.lines == [
            "[headers]",
            "MISSING: content-security-policy",
            "MISSING: permissions-policy",
            "missing_headers: 2",
        ]
        assert section.result.status == "degraded"
        assert layout.security_headers.read_text() == HEADERS
        header_inspector.fetch_headers.assert_called_once_with(URL)

    async def test_all_headers_present(
        self, header_inspector: Mock, layout: RunLayout
    ) -> None:
        """Reports zero missing headers as ok."""
        header_inspector.fetch_headers.return_value = "\n".join(
            f"{name}: x" for name in REQUIRED_HEADERS
        )

        section = await headers_section(
            header_inspector, URL, layout, REQUIRED_HEADERS
        )

        assert section.lines == ["[headers]", "missing_headers: 0"]
        assert section.result.status == "ok"

    async def test_unavailable(self, header_inspector: Mock, layout: RunLayout) -> None:
        """Records the skip with an unknown count."""
        header_inspector.unavailable_reason.return_value = "no HTTP client"

        section = await headers_section(
            header_inspector, URL, layout, REQUIRED_HEADERS
        )

        assert section.lines == [
            "[headers]",
            "SKIPPED: no HTTP client",
            "missing_headers: unknown",
        ]
        assert section.result.status == "unavailable"
        header_inspector.fetch_headers.assert_not_called()

    async def test_request_failure(
        self, header_inspector: Mock, layout: RunLayout
    ) -> None:
        """A failed request leaves the count unknown."""
        header_inspector.fetch_headers.side_effect = InspectionError("refused")

        section = await headers_section(
            header_inspector, URL, layout, REQUIRED_HEADERS
        )

        assert section.lines == [
            "[headers]",
            "FAILED: refused",
            "missing_headers: unknown",
        ]
        assert section.result.status == "degraded"


class TestTlsSection:
    """Tests for tls_section."""

    async def test_days_left(self, cert_inspector: Mock, layout: RunLayout) -> None:
        """Appends the certificate fields and days until expiry."""
        section = await tls_section(cert_inspector, URL, layout, now=NOW)

        assert section.lines == [
            "[tls]",
            "notBefore=Jan  1 00:00:00 2024 GMT",
            "notAfter=Jun 11 12:00:00 2024 GMT",
            "issuer=CN=Test CA,O=Test",
            "subject=CN=example.com",
            "cert_days_left: 10",
        ]
        assert layout.tls_cert.read_text().startswith("notBefore=")
        cert_inspector.fetch_certificate.assert_called_once_with("example.com")

    async def test_expired_certificate(
        self, cert_inspector: Mock, layout: RunLayout
    ) -> None:
        """An expired certificate gives a negative day count."""
        cert_inspector.fetch_certificate.return_value = certificate(
            NOW - timedelta(days=5)
        )

        section = await tls_section(cert_inspector, URL, layout, now=NOW)

        assert section.lines[-1] == "cert_days_left: -5"
        assert section.result.status == "ok"

    async def test_fetch_failure(self, cert_inspector: Mock, layout: RunLayout) -> None:
        """A failed handshake is recorded without a day count."""
        cert_inspector.fetch_certificate.side_effect = InspectionError("reset")

        section = await tls_section(cert_inspector, URL, layout, now=NOW)

        assert section.lines == [
            "[tls]",
            "FAILED: TLS certificate fetch failed for example.com:443",
        ]
        assert section.result.status == "degraded"
        assert not layout.tls_cert.exists()

    async def test_unavailable(self, cert_inspector: Mock, layout: RunLayout) -> None:
        """Records the skip."""
        cert_inspector.unavailable_reason.return_value = "no TLS support"

        section = await tls_section(cert_inspector, URL, layout, now=NOW)

        assert section.lines == ["[tls]", "SKIPPED: no TLS support"]
        assert section.result.status == "unavailable"


class TestZapSection:
    """Tests for zap_section."""

    @pytest.mark.parametrize(
        ("outcome", "status"),
        [
            (ScanOutcome(mode="container", status="completed", clean=True), "ok"),
            (
                ScanOutcome(
                    mode="container",
                    status="completed_with_findings (see zap.txt)",
                ),
                "degraded",
            ),
            (
                ScanOutcome(
                    mode="local", status="issues_or_errors_local (see zap.txt)"
                ),
                "degraded",
            ),
            (ScanOutcome(mode="skipped", status="skipped (nothing)"), "unavailable"),
        ],
    )
    async def test_records_status(
        self,
        scanner: Mock,
        layout: RunLayout,
        outcome: ScanOutcome,
        status: str,
    ) -> None:
        """Writes the scan status line and maps it to a result."""
        scanner.scan.return_value = outcome

        section = await zap_section(scanner, URL, layout)

        assert section.lines == ["[zap_baseline]", f"status: {outcome.status}"]
        assert section.result.status == status


class TestSecurityRunner:
    """Tests for SecurityRunner.run."""

    async def test_writes_sectioned_report(
        self,
        header_inspector: Mock,
        cert_inspector: Mock,
        scanner: Mock,
        layout: RunLayout,
    ) -> None:
        """Writes all three sections in order separated by blank lines."""
        cert_inspector.fetch_certificate.return_value = certificate(
            datetime.now(UTC) + timedelta(days=30, hours=1)
        )
        runner = SecurityRunner(
            headers=header_inspector,
            certificates=cert_inspector,
            scanner=scanner,
            required_headers=REQUIRED_HEADERS,
        )

        results = await runner.run(URL, layout)

        report = layout.security.read_text()
        assert report.startswith(f"Security checks for {URL}\n\n[headers]\n")
        assert "missing_headers: 2\n\n[tls]\n" in report
        assert "cert_days_left: 30\n\n[zap_baseline]\n" in report
        assert report.endswith("status: completed\n")
        assert [r.name for r in results] == ["headers", "tls", "zap"]
        assert [r.status for r in results] == ["degraded", "ok", "ok"]

    async def test_sections_are_independent(
        self,
        header_inspector: Mock,
        cert_inspector: Mock,
        scanner: Mock,
        layout: RunLayout,
    ) -> None:
        """A failing section does not stop the ones after it."""
        header_inspector.fetch_headers.side_effect = InspectionError("refused")
        cert_inspector.fetch_certificate.side_effect = InspectionError("reset")
        runner = SecurityRunner(
            headers=header_inspector,
            certificates=cert_inspector,
            scanner=scanner,
            required_headers=REQUIRED_HEADERS,
        )

        results = await runner.run(URL, layout)

        report = layout.security.read_text()
        assert "FAILED: refused" in report
        assert "FAILED: TLS certificate fetch failed" in report
        assert "status: completed" in report
        scanner.scan.assert_called_once_with(URL, layout)
        assert [r.status for r in results] == ["degraded", "degraded", "ok"]

    async def test_unexpected_error_does_not_stop_later_sections(
        self,
        header_inspector: Mock,
        cert_inspector: Mock,
        scanner: Mock,
        layout: RunLayout,
    ) -> None:
        """Any exception in a section is recorded and the run goes on."""
        header_inspector.fetch_headers.side_effect = RuntimeError("bad label")
        scanner.scan.side_effect = RuntimeError("docker exploded")
        runner = SecurityRunner(
            headers=header_inspector,
            certificates=cert_inspector,
            scanner=scanner,
            required_headers=REQUIRED_HEADERS,
        )

        results = await runner.run(URL, layout)

        report = layout.security.read_text()
        assert (
            "[headers]\nFAILED: bad label\nmissing_headers: unknown\n\n[tls]\n"
            in report
        )
        assert "notAfter=" in report
        assert report.endswith(
            "[zap_baseline]\nFAILED: docker exploded\nstatus: unknown\n"
        )
        cert_inspector.fetch_certificate.assert_called_once_with("example.com")
        assert [r.name for r in results] == ["headers", "tls", "zap"]
        assert [r.status for r in results] == ["degraded", "ok", "degraded"]
        assert results[0].reason == "bad label"
