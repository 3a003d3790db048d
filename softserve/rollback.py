"""
Cleanup of a failed theme install.

Only files the pipeline itself could have produced are removed, so any
user content already living in the install directory survives.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

LOG = logging.getLogger(__name__)

KNOWN_GENERATED_FILES = ("package.json", "node_modules")
# Matched as prefixes to catch rotated logs such as npm-debug.log.1234.
KNOWN_GENERATED_LOGS = ("npm-debug.log", "yarn-error.log", "yarn-debug.log")


def _is_generated(name: str) -> bool:
    return name in KNOWN_GENERATED_FILES or name.startswith(KNOWN_GENERATED_LOGS)


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def rollback(root: Path, theme_name: str) -> List[str]:
    """
    Delete generated artifacts from root, and root itself if nothing is left.

    Returns the names of the deleted entries.
    """

    if not root.is_dir():
        return []

    deleted: List[str] = []
    for entry in sorted(root.iterdir()):
        if not _is_generated(entry.name):
            continue
        print(f"Deleting generated file... {entry.name}")
        _remove(entry)
        deleted.append(entry.name)

    if not any(root.iterdir()):
        print(f"Deleting {theme_name}/ from {root.parent}")
        root.rmdir()

    print("Done.")
    return deleted
