"""Make sure the Node tooling and browser used by the checks are installed."""

import logging
import shlex
import sys
from collections.abc import Sequence

from site_audit.config import AuditSettings
from site_audit.errors import BootstrapError, MissingCommandError
from site_audit.process import has_command, run_command

log = logging.getLogger(__name__)

REQUIRED_COMMANDS = ("npm", "npx")


def require_commands(commands: Sequence[str] = REQUIRED_COMMANDS) -> None:
    """Raise MissingCommandError for the first command not on PATH."""
    for command in commands:
        if not has_command(command):
            raise MissingCommandError(command)


async def ensure_tools(settings: AuditSettings) -> None:
    """Install the audit dependencies into the tools directory if needed.

    The install runs once; later runs find ``node_modules`` and skip it.
    """
    require_commands()

    tools_dir = settings.tools_dir
    if not (tools_dir / "package.json").is_file():
        log.debug("Initializing package.json in %s", tools_dir)
        await _checked(["npm", "init", "-y"], settings, quiet=True)

    if (tools_dir / "node_modules").is_dir():
        return

    log.info("Installing audit dependencies...")
    await _checked(["npm", "i", "-D", *settings.node_packages], settings)
    await _checked(
        [sys.executable, "-m", "playwright", "install", "chromium"], settings
    )


async def _checked(
    args: Sequence[str], settings: AuditSettings, *, quiet: bool = False
) -> None:
    returncode = await run_command(args, cwd=settings.tools_dir, quiet=quiet)
    if returncode != 0:
        raise BootstrapError(shlex.join(args), returncode)
