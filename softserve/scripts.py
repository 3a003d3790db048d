"""
The `softserve-scripts` command run from inside a generated theme.

`start` bundles in development mode and watches for changes, `build`
bundles for production. Both hand the theme over to webpack with the
configuration shipped in the installed generator package.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .commands import run_inherited
from .errors import CommandError
from .install import GENERATOR_PACKAGE
from .logging_utils import configure_logging

LOG = logging.getLogger(__name__)

SCRIPTS = ("build", "start")
ISSUES_URL = "https://github.com/wking-io/softserve-cli"


def own_path(theme_path: Path) -> Path:
    return theme_path / "node_modules" / GENERATOR_PACKAGE


def webpack_binary(theme_path: Path) -> str:
    local = theme_path / "node_modules" / ".bin" / "webpack"
    return str(local) if local.exists() else "webpack"


def build_webpack_command(script: str, theme_path: Path) -> List[str]:
    config_dir = own_path(theme_path) / "config"
    if script == "build":
        return [
            webpack_binary(theme_path),
            "--mode",
            "production",
            "--config",
            str(config_dir / "webpack.config.prod"),
        ]
    if script == "start":
        return [
            webpack_binary(theme_path),
            "--mode",
            "development",
            "--watch",
            "--config",
            str(config_dir / "webpack.config.dev"),
        ]
    raise ValueError(f"unknown script {script!r}")


def select_script(args: List[str]) -> Optional[str]:
    """Pick the first recognized script name, else the first argument."""

    for arg in args:
        if arg in SCRIPTS:
            return arg
    return args[0] if args else None


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="softserve-scripts",
        description="Bundle a softserve theme with webpack.",
    )
    parser.add_argument("script", nargs="*", help="build or start")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    args = parser.parse_args(argv)
    configure_logging(verbosity=args.verbose)

    script = select_script(args.script)
    theme_path = Path.cwd()

    if script not in SCRIPTS:
        print()
        if script is None:
            print(f"Please specify a script: {' or '.join(SCRIPTS)}.")
        else:
            print(f'Unknown script "{script}".')
        print(f"Perhaps you need to update {GENERATOR_PACKAGE}?")
        print(f"See: {ISSUES_URL}")
        return 1

    print()
    if script == "build":
        print("Bundling files for production!")
    else:
        print("Bundling files! Also, watching for changes.")
    print()

    try:
        run_inherited(build_webpack_command(script, theme_path), cwd=theme_path)
    except KeyboardInterrupt:
        return 130
    except CommandError as exc:
        LOG.error("%s", exc)
        return exc.returncode or 1
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
