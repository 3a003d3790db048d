"""
Subprocess helpers shared by the package manager, install and VCS steps.

Every external command goes through these functions so that logging and
error reporting stay consistent, and so that tests can replace a single
seam. Commands always receive an explicit cwd; softserve never changes
the working directory of its own process.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .errors import CommandError

LOG = logging.getLogger(__name__)

PathLike = Union[str, Path]


def format_command(args: Sequence[str]) -> str:
    return " ".join(args)


def run_command(
    args: Sequence[str],
    cwd: Optional[PathLike] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Run a command with captured output and return the completed process.

    Raises CommandError when the command cannot be spawned or exits with
    a non-zero status.
    """

    cmd: List[str] = list(args)
    LOG.debug("Running command: %s (cwd=%s)", format_command(cmd), cwd)
    try:
        completed = subprocess.run(
            cmd,
            cwd=None if cwd is None else str(cwd),
            check=False,
            text=True,
            capture_output=True,
        )
    except OSError as exc:
        raise CommandError(format_command(cmd), detail=str(exc)) from exc

    if completed.returncode != 0:
        LOG.debug("command stderr: %s", completed.stderr)
        raise CommandError(
            format_command(cmd),
            returncode=completed.returncode,
            detail=completed.stderr.strip(),
        )

    return completed


def run_inherited(args: Sequence[str], cwd: Optional[PathLike] = None) -> None:
    """
    Run a command attached to our own stdin/stdout/stderr and wait for it.

    Used for long running installs and builds so the user sees their
    output as it happens.
    """

    cmd: List[str] = list(args)
    LOG.debug("Running command with inherited stdio: %s (cwd=%s)", format_command(cmd), cwd)
    try:
        completed = subprocess.run(cmd, cwd=None if cwd is None else str(cwd), check=False)
    except OSError as exc:
        raise CommandError(format_command(cmd), detail=str(exc)) from exc

    if completed.returncode != 0:
        raise CommandError(format_command(cmd), returncode=completed.returncode)


def command_output(args: Sequence[str], cwd: Optional[PathLike] = None) -> Optional[str]:
    """Return the stripped stdout of a command, or None if it failed."""

    try:
        return run_command(args, cwd=cwd).stdout.strip()
    except CommandError as exc:
        LOG.debug("%s", exc)
        return None


def command_works(args: Sequence[str], cwd: Optional[PathLike] = None) -> bool:
    """Return True if the command can be spawned and exits with status 0."""

    return command_output(args, cwd=cwd) is not None
