"""
Command-line interface for softserve.

This module is responsible for argument parsing and delegating to the
theme pipeline in the pipeline module.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import Config
from .info import print_environment_info
from .install import get_install_package
from .logging_utils import configure_logging
from .pipeline import create_theme

PROG = "softserve"
ISSUES_URL = "https://github.com/wking-io/softserve-cli"


def build_arg_parser() -> argparse.ArgumentParser:
    # -h belongs to --here, so help is only available as --help.
    parser = argparse.ArgumentParser(
        prog=PROG,
        usage=f"{PROG} <theme-name> [options]",
        description="Generator for modern WordPress theme development.",
        epilog=(
            "Only <theme-name> is required.\n\n"
            "If you have any problems, do not hesitate to file an issue:\n"
            f"  {ISSUES_URL}"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )

    parser.add_argument(
        "theme_name",
        nargs="?",
        metavar="theme-name",
        help="Name of the theme to generate; also used as its package name.",
    )
    parser.add_argument(
        "--help",
        action="help",
        help="Show this message and exit.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--verbose",
        action="count",
        default=0,
        help="Print additional logs (can be specified multiple times).",
    )
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print environment debug info.",
    )
    parser.add_argument(
        "--use-npm",
        action="store_true",
        help="Install with npm even when yarn is available.",
    )
    parser.add_argument(
        "--scripts-version",
        help="Install a specific version of softserve-scripts.",
    )

    location = parser.add_mutually_exclusive_group()
    location.add_argument(
        "-r",
        "--root",
        dest="use_root",
        action="store_true",
        help=(
            "Run from the WordPress project root (where wp-content and wp-config.php "
            "live); the theme is generated in wp-content/themes."
        ),
    )
    location.add_argument(
        "-h",
        "--here",
        action="store_true",
        help="Generate the theme in the current directory, which must be a themes directory.",
    )

    return parser


def _print_missing_name() -> None:
    print("Please specify the theme directory:", file=sys.stderr)
    print(f"  {PROG} <theme-name>")
    print()
    print("For example:")
    print(f"  {PROG} my-theme")
    print()
    print(f"Run {PROG} --help to see all options.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    configure_logging(verbosity=args.verbose)

    if args.info:
        print_environment_info()
        return 0

    if args.theme_name is None:
        _print_missing_name()
        return 1

    original_directory = Path.cwd()
    config = Config(
        theme_name=args.theme_name,
        original_directory=original_directory,
        use_yarn=not args.use_npm,
        package_to_install=get_install_package(args.scripts_version),
        version=args.scripts_version,
        here=args.here,
        use_root=args.use_root,
        verbosity=args.verbose,
    )

    try:
        return create_theme(config)
    except KeyboardInterrupt:
        # Graceful shutdown on Ctrl+C
        return 130


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
