"""The set of checks used for a run and their shared resources."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import aiohttp

from site_audit.checks.base import (
    AccessibilityLinter,
    LinkChecker,
    PerformanceAuditor,
    SmokeRunner,
)
from site_audit.checks.broken_links import BrokenLinkChecker
from site_audit.checks.lighthouse import Lighthouse
from site_audit.checks.pa11y import Pa11y
from site_audit.checks.smoke import PlaywrightSmoke
from site_audit.config import AuditSettings
from site_audit.security.base import (
    CertInspector,
    HeaderInspector,
    VulnerabilityScanner,
)
from site_audit.security.headers import AiohttpHeaderInspector
from site_audit.security.runner import SecurityRunner
from site_audit.security.tls import SslCertInspector
from site_audit.security.zap import ZapScanner

USER_AGENT = "site-audit"


@dataclass(frozen=True, kw_only=True)
class Toolchain:
    """One implementation of every check capability."""

    auditor: PerformanceAuditor
    linter: AccessibilityLinter
    links: LinkChecker
    smoke: SmokeRunner
    headers: HeaderInspector
    certificates: CertInspector
    scanner: VulnerabilityScanner
    settings: AuditSettings

    @classmethod
    @asynccontextmanager
    async def from_settings(
        cls, settings: AuditSettings
    ) -> AsyncGenerator["Toolchain", None]:
        """Create the default toolchain with a managed HTTP session."""
        cwd = settings.tools_dir
        async with aiohttp.ClientSession(
            headers={"User-Agent": USER_AGENT}
        ) as session:
            yield cls(
                auditor=Lighthouse(cwd=cwd),
                linter=Pa11y(cwd=cwd),
                links=BrokenLinkChecker(cwd=cwd),
                smoke=PlaywrightSmoke(cwd=cwd),
                headers=AiohttpHeaderInspector(session=session),
                certificates=SslCertInspector(),
                scanner=ZapScanner(image=settings.zap_image),
                settings=settings,
            )

    @property
    def security(self) -> SecurityRunner:
        return SecurityRunner(
            headers=self.headers,
            certificates=self.certificates,
            scanner=self.scanner,
            required_headers=self.settings.required_headers,
        )
