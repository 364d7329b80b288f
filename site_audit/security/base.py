"""Abstract base classes for the security inspections."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from site_audit.layout import RunLayout
from site_audit.parsing import OPENSSL_DATE_FORMAT


class InspectionError(Exception):
    """Raised when an inspection could not reach the target."""


def _openssl_date(value: datetime) -> str:
    # openssl pads the day of month with a space, e.g. "Jan  5"
    return value.strftime(OPENSSL_DATE_FORMAT.replace("%d", f"{value.day:2d}"))


@dataclass(frozen=True, kw_only=True)
class CertificateInfo:
    """Fields of a server certificate."""

    issuer: str
    subject: str
    not_before: datetime
    not_after: datetime

    def to_text(self) -> str:
        """Render like ``openssl x509 -noout -dates -issuer -subject``."""
        return (
            f"notBefore={_openssl_date(self.not_before)}\n"
            f"notAfter={_openssl_date(self.not_after)}\n"
            f"issuer={self.issuer}\n"
            f"subject={self.subject}\n"
        )


@dataclass(frozen=True, kw_only=True)
class ScanOutcome:
    """Status line of a vulnerability baseline scan."""

    mode: Literal["container", "local", "skipped"]
    status: str
    clean: bool = False

    @property
    def ran(self) -> bool:
        return self.mode != "skipped"


class HeaderInspector(ABC):
    """Fetches the response headers of a URL."""

    def unavailable_reason(self) -> str | None:
        """Why the inspector cannot run, or None when it can."""
        return None

    @abstractmethod
    async def fetch_headers(self, url: str) -> str:
        """Return the status line and headers of every response.

        Redirects are followed and each hop is included, separated by a
        blank line.

        Raises:
            InspectionError: If the request fails

        """


class CertInspector(ABC):
    """Fetches the TLS certificate presented by a host."""

    def unavailable_reason(self) -> str | None:
        """Why the inspector cannot run, or None when it can."""
        return None

    @abstractmethod
    async def fetch_certificate(self, host: str, port: int = 443) -> CertificateInfo:
        """Connect to ``host:port`` and return its certificate fields.

        Raises:
            InspectionError: If the handshake or certificate fetch fails

        """


class VulnerabilityScanner(ABC):
    """Runs a vulnerability baseline scan."""

    @abstractmethod
    async def scan(self, url: str, layout: RunLayout) -> ScanOutcome:
        """Scan the URL, writing raw output inside the run directory."""
