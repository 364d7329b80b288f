"""Fatal errors that abort an audit run."""


class SiteAuditError(Exception):
    """Base class for errors that stop the whole run."""


class MissingCommandError(SiteAuditError):
    """Raised when a required external command is not on PATH."""

    def __init__(self, command: str) -> None:
        super().__init__(f"Missing required command: {command}")
        self.command = command


class RunDirectoryError(SiteAuditError):
    """Raised when the run directory cannot be created."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Cannot create run directory {path}: {reason}")
        self.path = path


class BootstrapError(SiteAuditError):
    """Raised when installing the audit dependencies fails."""

    def __init__(self, command: str, returncode: int) -> None:
        super().__init__(f"Command failed with exit code {returncode}: {command}")
        self.command = command
        self.returncode = returncode
