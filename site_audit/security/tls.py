"""TLS certificate inspection."""

import asyncio
import logging
import ssl
from dataclasses import dataclass

from cryptography import x509

from site_audit.security.base import CertificateInfo, CertInspector, InspectionError

log = logging.getLogger(__name__)


def _unverified_context() -> ssl.SSLContext:
    # Expired or self-signed certificates must still be readable.
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def certificate_from_der(der: bytes) -> CertificateInfo:
    """Extract issuer, subject and validity dates from a DER certificate."""
    cert = x509.load_der_x509_certificate(der)
    return CertificateInfo(
        issuer=cert.issuer.rfc4514_string(),
        subject=cert.subject.rfc4514_string(),
        not_before=cert.not_valid_before_utc,
        not_after=cert.not_valid_after_utc,
    )


@dataclass(frozen=True, kw_only=True)
class SslCertInspector(CertInspector):
    """Reads the peer certificate with the standard library ssl module."""

    async def fetch_certificate(self, host: str, port: int = 443) -> CertificateInfo:
        """Perform a TLS handshake with SNI and parse the peer certificate."""
        try:
            _, writer = await asyncio.open_connection(
                host, port, ssl=_unverified_context(), server_hostname=host
            )
        except (OSError, ssl.SSLError) as exc:
            raise InspectionError(f"TLS handshake with {host}:{port} failed") from exc

        try:
            ssl_object = writer.get_extra_info("ssl_object")
            der = ssl_object.getpeercert(binary_form=True) if ssl_object else None
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (OSError, ssl.SSLError):
                log.debug("Ignoring error while closing connection to %s", host)

        if not der:
            raise InspectionError(f"No certificate presented by {host}:{port}")

        try:
            return certificate_from_der(der)
        except ValueError as exc:
            raise InspectionError(f"Cannot parse certificate of {host}") from exc
