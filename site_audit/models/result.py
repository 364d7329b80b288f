"""Models for check execution results."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, TypeAlias

from site_audit.config import RunConfig
from site_audit.layout import RunLayout

CheckStatus: TypeAlias = Literal["ok", "degraded", "unavailable"]


@dataclass(frozen=True, kw_only=True)
class CheckResult:
    """Outcome of a single check.

    A non-zero exit of an external tool is a finding, not an error, so it is
    reported as ``degraded`` with the file holding the details.
    """

    name: str
    status: CheckStatus
    duration: float = 0.0
    reason: str | None = None
    output: Path | None = None

    @classmethod
    def from_exit_code(
        cls, name: str, returncode: int, *, duration: float, output: Path | None
    ) -> "CheckResult":
        """Build a result from an external tool's exit code."""
        if returncode == 0:
            return cls(name=name, status="ok", duration=duration, output=output)
        return cls(
            name=name,
            status="degraded",
            duration=duration,
            reason=f"exit code {returncode}",
            output=output,
        )


@dataclass(frozen=True, kw_only=True)
class RunReport:
    """All check results of one invocation, in execution order."""

    config: RunConfig
    layout: RunLayout
    results: Sequence[CheckResult] = field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        """Whether any check did not finish cleanly."""
        return any(result.status != "ok" for result in self.results)
