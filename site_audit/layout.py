"""Fixed locations of the artifacts inside a run directory."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RunLayout:
    """Paths of every file a run may produce, relative to its directory.

    Both the checks and the summary rely on these names, so no index or
    manifest is written.
    """

    root: Path

    @property
    def lighthouse_dir(self) -> Path:
        return self.root / "lighthouse"

    @property
    def lighthouse_prefix(self) -> Path:
        """Output path handed to Lighthouse, which appends ``.report.<ext>``."""
        return self.lighthouse_dir / "report"

    @property
    def lighthouse_html(self) -> Path:
        return self.lighthouse_dir / "report.report.html"

    @property
    def lighthouse_json(self) -> Path:
        return self.lighthouse_dir / "report.report.json"

    @property
    def pa11y(self) -> Path:
        return self.root / "pa11y.txt"

    @property
    def broken_links(self) -> Path:
        return self.root / "broken-links.txt"

    @property
    def smoke(self) -> Path:
        return self.root / "smoke.txt"

    @property
    def screenshot(self) -> Path:
        return self.root / "homepage.png"

    @property
    def security(self) -> Path:
        return self.root / "security.txt"

    @property
    def security_headers(self) -> Path:
        return self.root / "security-headers.txt"

    @property
    def tls_cert(self) -> Path:
        return self.root / "tls-cert.txt"

    @property
    def zap_output(self) -> Path:
        return self.root / "zap.txt"

    @property
    def zap_dir(self) -> Path:
        return self.root / "zap"

    @property
    def zap_quick_report(self) -> Path:
        return self.root / "zap-quick.html"
