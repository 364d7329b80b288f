"""Response header inspection over HTTP."""

import logging
from dataclasses import dataclass, field

import aiohttp

from site_audit.security.base import HeaderInspector, InspectionError

log = logging.getLogger(__name__)


def format_response_headers(response: aiohttp.ClientResponse) -> str:
    """Render a response like ``curl -I``: a status line, then the headers."""
    version = response.version
    status_line = (
        f"HTTP/{version.major}.{version.minor} {response.status}"
        if version is not None
        else f"HTTP {response.status}"
    )
    if response.reason:
        status_line = f"{status_line} {response.reason}"

    lines = [status_line]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return "\n".join(lines) + "\n"


@dataclass(frozen=True, kw_only=True)
class AiohttpHeaderInspector(HeaderInspector):
    """Issues a HEAD request with aiohttp, following redirects."""

    session: aiohttp.ClientSession = field(repr=False)

    async def fetch_headers(self, url: str) -> str:
        """Return the headers of every hop, separated by blank lines."""
        try:
            async with self.session.head(url, allow_redirects=True) as response:
                hops = [*response.history, response]
                log.debug(
                    "HEAD %s -> %d after %d hop(s)", url, response.status, len(hops)
                )
                return "\n".join(format_response_headers(hop) for hop in hops)
        except (aiohttp.ClientError, TimeoutError, ValueError) as exc:
            raise InspectionError(f"HEAD request to {url} failed: {exc}") from exc
