"""
Version control integration for softserve.

A freshly generated theme gets its own git repository with a single
initial commit, unless it already lives inside a git or mercurial work
tree (for example a versioned WordPress install).
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

from .commands import PathLike, command_works, run_command
from .errors import CommandError

LOG = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit from softserve-cli"


def _run_git(args: List[str], cwd: PathLike):
    return run_command(["git", *args], cwd=cwd)


def git_available(cwd: PathLike) -> bool:
    return command_works(["git", "--version"], cwd=cwd)


def is_inside_git_repository(cwd: PathLike) -> bool:
    return command_works(["git", "rev-parse", "--is-inside-work-tree"], cwd=cwd)


def is_inside_mercurial_repository(cwd: PathLike) -> bool:
    return command_works(["hg", "--cwd", ".", "root"], cwd=cwd)


def try_git_init(root: Path) -> bool:
    """
    Initialize a git repository in root and commit everything in it.

    Returns True when a repository was created. Failures are logged and
    leave no partial .git directory behind.
    """

    if not git_available(root):
        LOG.info("git is not available; skipping repository initialization")
        return False

    if is_inside_git_repository(root) or is_inside_mercurial_repository(root):
        LOG.info("%s is already inside a repository; skipping git init", root)
        return False

    try:
        _run_git(["init"], cwd=root)
    except CommandError as exc:
        LOG.warning("Could not initialize a git repository: %s", exc)
        return False

    try:
        _run_git(["add", "-A"], cwd=root)
        _run_git(["commit", "-m", INITIAL_COMMIT_MESSAGE], cwd=root)
    except CommandError as exc:
        LOG.warning("Git commit not created: %s", exc)
        LOG.warning("Removing .git directory...")
        shutil.rmtree(root / ".git", ignore_errors=True)
        return False

    return True
