"""
Install directory planning for a new theme.

Resolution is pure: resolve_install_root only inspects the original
directory and never creates anything. prepare_root is the first step
of the pipeline that touches the filesystem, and it only runs after
the name and the target directory have both been accepted.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

from .config import Config
from .errors import DirectoryConflictError, DirectoryError

LOG = logging.getLogger(__name__)

PROJECT_ROOT_MARKER = "wp-content"
TARGET_DIRECTORY = "themes"

# Files that may already live in the install directory without
# conflicting with anything the generator writes.
VALID_FILES = frozenset(
    [
        ".DS_Store",
        "Thumbs.db",
        ".git",
        ".gitignore",
        ".idea",
        "README.md",
        "LICENSE",
        "web.iml",
        ".hg",
        ".hgignore",
        ".hgcheck",
        ".npmignore",
        "mkdocs.yml",
        "docs",
        ".travis.yml",
        ".gitlab-ci.yml",
        ".gitattributes",
    ]
)


def is_project_root(directory: Path) -> bool:
    """Return True if directory holds a WordPress wp-content directory."""

    return (directory / PROJECT_ROOT_MARKER).is_dir()


def resolve_install_root(config: Config) -> Path:
    """
    Compute the absolute directory the theme will be generated in.

    --root installs below wp-content/themes of a WordPress project root,
    --here requires the user to already be inside a themes directory,
    and the default installs next to the current directory's contents.
    """

    cwd = config.original_directory.resolve()

    if config.use_root:
        if not is_project_root(cwd):
            raise DirectoryError(
                "You are running the generator in the wrong location.\n\n"
                f"The directory that you are in does not contain a {PROJECT_ROOT_MARKER} "
                "directory.\n\n"
                "Just change directories to the root of your Wordpress project (where the "
                f"{PROJECT_ROOT_MARKER} directory and wp-config.php file is located) and run "
                "the generator again."
            )
        return cwd / PROJECT_ROOT_MARKER / TARGET_DIRECTORY / config.theme_name

    if config.here and cwd.name != TARGET_DIRECTORY:
        raise DirectoryError(
            "You are running the generator in the wrong location.\n\n"
            f"The directory that you need to be in is: {TARGET_DIRECTORY}\n"
            f"However, the directory you are in is: {cwd.name}\n\n"
            "Just change directories to the correct location and run the generator again.\n"
            "If you would like to install below a WordPress project root instead, use "
            "the --root flag."
        )

    return cwd / config.theme_name


def find_conflicts(root: Path) -> List[str]:
    """List entries of an existing root that the generator could overwrite."""

    if not root.exists():
        return []
    if not root.is_dir():
        return [root.name]
    return sorted(entry.name for entry in root.iterdir() if entry.name not in VALID_FILES)


def ensure_safe_to_create_theme_in(root: Path, theme_name: str) -> None:
    conflicts = find_conflicts(root)
    if not conflicts:
        return

    listing = "\n".join(f"  {name}" for name in conflicts)
    raise DirectoryConflictError(
        f"The directory {theme_name} contains files that could conflict:\n\n"
        f"{listing}\n\n"
        "Either try using a new directory name, or remove the files listed above."
    )


def plan_directory(config: Config) -> Config:
    """Resolve config.root and refuse to continue into a conflicting directory."""

    root = resolve_install_root(config)
    ensure_safe_to_create_theme_in(root, config.theme_name)
    config.root = root
    LOG.info("Planned install directory %s", root)
    return config


def prepare_root(config: Config) -> Config:
    """
    Create the install directory and write the initial package.json.

    Must only be called once plan_directory has accepted config.root.
    """

    if config.root is None:
        raise DirectoryError("install directory has not been planned")

    config.root.mkdir(parents=True, exist_ok=True)
    config.root_prepared = True

    print(f"Creating a new Wordpress Theme in {config.root}.")
    print()

    package_json = {
        "name": config.theme_name,
        "version": "0.1.0",
        "private": True,
    }
    (config.root / "package.json").write_text(json.dumps(package_json, indent=2) + "\n")
    return config
