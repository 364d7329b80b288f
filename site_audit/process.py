"""Helpers for running external commands."""

import asyncio
import logging
import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path

log = logging.getLogger(__name__)


def has_command(name: str) -> bool:
    """Check if an executable is available on PATH."""
    return shutil.which(name) is not None


async def run_command(
    args: Sequence[str],
    *,
    output: Path | None = None,
    cwd: Path | None = None,
    quiet: bool = False,
) -> int:
    """Run a command to completion and return its exit code.

    Args:
        args: Program and arguments
        output: File receiving combined stdout and stderr. When omitted,
            stdout is discarded and stderr goes to the terminal.
        cwd: Working directory for the command
        quiet: Also discard stderr when no output file is given

    Returns:
        The process exit code

    Raises:
        OSError: If the program cannot be started

    """
    log.debug("Running: %s", shlex.join(args))

    if output is None:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL if quiet else None,
        )
        return await process.wait()

    with output.open("wb") as sink:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=sink,
            stderr=asyncio.subprocess.STDOUT,
        )
        return await process.wait()
