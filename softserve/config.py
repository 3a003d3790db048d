"""
Configuration model for softserve.

The CLI constructs a Config instance and passes it through every stage
of the theme pipeline so behavior can be adjusted without relying on
global state. In particular the process working directory is never
changed; original_directory and root are passed to subprocesses as an
explicit cwd.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .initializer import InitSummary


@dataclass
class Config:
    """
    Top-level configuration for a softserve run.

    Stages fill in root, use_yarn and is_online as the pipeline moves
    forward; the initializer leaves its summary behind on success.
    """

    theme_name: str
    original_directory: Path
    root: Optional[Path] = None
    use_yarn: bool = True
    is_online: bool = True
    package_to_install: str = "softserve-scripts"
    version: Optional[str] = None
    here: bool = False
    use_root: bool = False
    verbosity: int = 0
    root_prepared: bool = False
    summary: Optional["InitSummary"] = None

    @property
    def verbose(self) -> bool:
        return self.verbosity > 0

    @property
    def package_name(self) -> str:
        """The generator package name without any pinned version."""

        name, sep, _ = self.package_to_install.rpartition("@")
        if sep and name:
            return name
        return self.package_to_install
