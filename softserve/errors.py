"""
Custom exception types used across softserve.

Defining explicit error classes makes it easier for the CLI and the
pipeline runner to distinguish between user-facing failures and
unexpected bugs.
"""

from __future__ import annotations

from typing import Optional


class SoftserveError(Exception):
    """Base class for all softserve specific errors."""


class NameValidationError(SoftserveError):
    """Raised when a theme name cannot be used for a new package."""


class DirectoryError(SoftserveError):
    """Raised when the generator runs in the wrong location."""


class DirectoryConflictError(DirectoryError):
    """Raised when the install directory holds files we could clobber."""


class EnvironmentCheckError(SoftserveError):
    """Raised when node, npm or yarn are not usable for the install."""


class CommandError(SoftserveError):
    """
    Raised when an external command exits with a non-zero status.

    The command attribute holds the exact command line that failed so
    that it can be echoed back to the user.
    """

    def __init__(self, command: str, returncode: Optional[int] = None, detail: str = ""):
        message = f"{command} has failed"
        if returncode is not None:
            message += f" (exit code {returncode})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode


class InitializationError(SoftserveError):
    """Raised when the installed generator package cannot set up the theme."""
