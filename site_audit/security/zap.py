"""OWASP ZAP baseline scan, in a container or with a local install."""

import logging
import shlex
from collections.abc import Sequence
from dataclasses import dataclass

from site_audit.layout import RunLayout
from site_audit.parsing import ScanStatus, classify_scan
from site_audit.process import has_command, run_command
from site_audit.security.base import ScanOutcome, VulnerabilityScanner

log = logging.getLogger(__name__)

DEFAULT_IMAGE = "ghcr.io/zaproxy/zaproxy:stable"

LOCAL_STATUS: dict[ScanStatus, str] = {
    "completed": "completed_local_quick_scan",
    "completed_with_findings": "completed_local_with_findings",
    "issues_or_errors": "issues_or_errors_local",
}


@dataclass(frozen=True, kw_only=True)
class ZapScanner(VulnerabilityScanner):
    """Runs ``zap-baseline.py`` through Docker, else ``zap.sh`` quick scan."""

    image: str = DEFAULT_IMAGE

    async def scan(self, url: str, layout: RunLayout) -> ScanOutcome:
        """Scan with the first available runtime, or report the scan skipped."""
        if has_command("docker"):
            return await self._container_scan(url, layout)
        if has_command("zap.sh"):
            return await self._local_scan(url, layout)
        return ScanOutcome(
            mode="skipped", status="skipped (docker and local zap.sh not installed)"
        )

    def baseline_command(self, url: str, layout: RunLayout) -> Sequence[str]:
        return [
            "docker",
            "run",
            "--rm",
            "-v",
            f"{layout.zap_dir}:/zap/wrk",
            self.image,
            "zap-baseline.py",
            "-t",
            url,
            "-J",
            "zap.json",
            "-r",
            "zap.html",
            "-m",
            "2",
        ]

    async def docker_prefix(self) -> Sequence[str]:
        """Command prefix giving access to the Docker daemon.

        Users not yet logged into the ``docker`` group can still reach the
        daemon through ``sg docker -c``.
        """
        if await run_command(["docker", "info"], quiet=True) == 0:
            return []
        if has_command("sg"):
            return ["sg", "docker", "-c"]
        return []

    async def _container_scan(self, url: str, layout: RunLayout) -> ScanOutcome:
        layout.zap_dir.mkdir(parents=True, exist_ok=True)
        command = self.baseline_command(url, layout)
        if prefix := await self.docker_prefix():
            command = [*prefix, shlex.join(command)]

        log.info("Running ZAP baseline scan in a container")
        status = await self._run(command, layout)
        return ScanOutcome(
            mode="container",
            status=self._describe(status, layout),
            clean=status == "completed",
        )

    async def _local_scan(self, url: str, layout: RunLayout) -> ScanOutcome:
        command = [
            "zap.sh",
            "-cmd",
            "-silent",
            "-quickurl",
            url,
            "-quickprogress",
            "-quickout",
            str(layout.zap_quick_report),
        ]
        log.info("Running local ZAP quick scan")
        status = await self._run(command, layout)
        local_status = LOCAL_STATUS[status]
        if status == "completed":
            return ScanOutcome(mode="local", status=local_status, clean=True)
        return ScanOutcome(
            mode="local", status=f"{local_status} (see {layout.zap_output})"
        )

    async def _run(self, command: Sequence[str], layout: RunLayout) -> ScanStatus:
        try:
            returncode = await run_command(command, output=layout.zap_output)
        except OSError as exc:
            log.error("Cannot start ZAP: %s", exc)
            layout.zap_output.write_text(f"{exc}\n")
            return "issues_or_errors"
        output = layout.zap_output.read_text(errors="replace")
        return classify_scan(returncode, output)

    def _describe(self, status: ScanStatus, layout: RunLayout) -> str:
        if status == "completed":
            return status
        return f"{status} (see {layout.zap_output})"
