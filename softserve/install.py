"""
Installation of the generator package into the new theme directory.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from . import semver
from .commands import format_command, run_inherited
from .config import Config
from .errors import CommandError, InitializationError

LOG = logging.getLogger(__name__)

GENERATOR_PACKAGE = "softserve-scripts"


def get_install_package(version: Optional[str]) -> str:
    """Return the generator package spec, pinned when version is valid semver."""

    package = GENERATOR_PACKAGE
    pinned = semver.valid(version)
    if pinned:
        package += f"@{pinned}"
    elif version:
        LOG.warning("Ignoring invalid scripts version %r", version)
    return package


def build_install_command(config: Config) -> List[str]:
    """
    Build the argv that installs config.package_to_install into config.root.

    yarn is given the target directory through --cwd to work around
    default install locations; npm relies on the process cwd instead.
    """

    if config.use_yarn:
        args = ["yarnpkg", "add", config.package_to_install, "--exact"]
        if not config.is_online:
            args.append("--offline")
        args.extend(["--cwd", str(config.root)])
    else:
        args = [
            "npm",
            "install",
            "--save",
            "--save-exact",
            "--loglevel",
            "error",
            config.package_to_install,
        ]

    if config.verbose:
        args.append("--verbose")
    return args


def run_install(config: Config) -> Config:
    """
    Install the generator package and wait for the package manager to exit.

    Raises CommandError carrying the failing command line on a non-zero
    exit status.
    """

    if config.root is None:
        raise InitializationError("install directory has not been planned")

    print("Installing packages. This might take a couple of minutes.")
    if config.use_yarn and not config.is_online:
        print("You appear to be offline.")
        print("Falling back to the local Yarn cache.")
        print()

    print(f"Installing {config.package_to_install}...")
    print()

    args = build_install_command(config)
    run_inherited(args, cwd=config.root)

    installed = config.root / "node_modules" / config.package_name
    if not installed.is_dir():
        raise CommandError(
            format_command(args),
            detail=f"{config.package_name} was not installed into {installed.parent}",
        )
    return config
