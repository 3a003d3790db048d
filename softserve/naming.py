"""
Theme name validation and naming variants.

A theme name doubles as the npm package name written into the theme's
package.json, so it has to satisfy npm's naming rules in addition to
not clashing with the generator package or an existing directory.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List
from urllib.parse import quote

from .errors import NameValidationError

LOG = logging.getLogger(__name__)

RESERVED_DEPENDENCIES = sorted(["softserve-scripts"])

MAX_NAME_LENGTH = 214

_BLACKLIST = ("node_modules", "favicon.ico")

_NODE_BUILTINS = frozenset(
    [
        "assert", "async_hooks", "buffer", "child_process", "cluster",
        "console", "constants", "crypto", "dgram", "dns", "domain",
        "events", "fs", "http", "http2", "https", "inspector", "module",
        "net", "os", "path", "perf_hooks", "process", "punycode",
        "querystring", "readline", "repl", "stream", "string_decoder",
        "sys", "timers", "tls", "trace_events", "tty", "url", "util",
        "v8", "vm", "worker_threads", "zlib",
    ]
)

_SCOPED_NAME = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")
_SPECIAL_CHARACTERS = re.compile(r"[~'!()*]")


@dataclass
class NameValidation:
    """Outcome of checking a name against npm's package naming rules."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid_for_new_packages(self) -> bool:
        return not self.errors and not self.warnings


def _url_safe(value: str) -> bool:
    try:
        return quote(value, safe="-_.!~*'()") == value
    except UnicodeEncodeError:
        # argv bytes that are not UTF-8 arrive as lone surrogates.
        return False


def validate_package_name(name: str) -> NameValidation:
    """
    Check name against the rules npm enforces for newly published packages.

    Errors describe names npm has never accepted; warnings describe names
    that older packages may still carry but new ones cannot use.
    """

    result = NameValidation()

    if not name:
        result.errors.append("name length must be greater than zero")
        return result

    if name.startswith("."):
        result.errors.append("name cannot start with a period")
    if name.startswith("_"):
        result.errors.append("name cannot start with an underscore")
    if name.strip() != name:
        result.errors.append("name cannot contain leading or trailing spaces")

    for blacklisted in _BLACKLIST:
        if name.lower() == blacklisted:
            result.errors.append(f"{blacklisted} is a blacklisted name")

    if name.lower() in _NODE_BUILTINS:
        result.warnings.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        result.warnings.append(
            f"name can no longer contain more than {MAX_NAME_LENGTH} characters"
        )
    if name.lower() != name:
        result.warnings.append("name can no longer contain capital letters")
    if _SPECIAL_CHARACTERS.search(name.split("/")[-1]):
        result.warnings.append("name can no longer contain special characters (\"~'!()*\")")

    if not _url_safe(name):
        match = _SCOPED_NAME.match(name)
        if not (match and _url_safe(match.group(1) or "") and _url_safe(match.group(2))):
            result.errors.append("name can only contain URL-friendly characters")

    return result


def list_directories(source: Path) -> List[str]:
    """Return the names of the directories directly inside source."""

    return sorted(entry.name for entry in source.iterdir() if entry.is_dir())


def check_valid_npm_name(theme_name: str) -> None:
    validation = validate_package_name(theme_name)
    if validation.valid_for_new_packages:
        return

    lines = [
        f'Could not create a project called "{theme_name}" because of npm naming restrictions:'
    ]
    lines.extend(f"  *  {problem}" for problem in validation.errors + validation.warnings)
    raise NameValidationError("\n".join(lines))


def check_not_dependency(theme_name: str) -> None:
    if theme_name not in RESERVED_DEPENDENCIES:
        return

    listing = "\n".join(f"  {name}" for name in RESERVED_DEPENDENCIES)
    raise NameValidationError(
        f"We cannot create a project called {theme_name} because a dependency "
        "with the same name exists.\n"
        "Due to the way npm works, the following names are not allowed:\n\n"
        f"{listing}\n\n"
        "Please choose a different project name."
    )


def check_valid_directory(theme_name: str, source: Path) -> None:
    directories = list_directories(source)
    if theme_name not in directories:
        return

    listing = "\n".join(f"  {name}" for name in directories)
    raise NameValidationError(
        f"We cannot create a project called {theme_name} because a directory "
        "with the same name exists.\n\n"
        f"{listing}\n\n"
        "Please choose a different project name."
    )


def check_theme_name(theme_name: str, original_directory: Path) -> None:
    """
    Run every name check, failing on the first rule group that is violated.

    Order matters: the npm rules are checked first so that the user sees
    all naming problems at once before any directory is inspected.
    """

    LOG.debug("Validating theme name %r in %s", theme_name, original_directory)
    check_valid_npm_name(theme_name)
    check_not_dependency(theme_name)
    check_valid_directory(theme_name, original_directory)


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def generate_names(theme_name: str) -> Dict[str, str]:
    """
    Derive the naming variants substituted into template files.

    For "my-theme": dash "my-theme", underscore "my_theme", title
    "My Theme", title_underscore "My_Theme", constant "MY_THEME".
    """

    parts = [part for part in theme_name.split("-") if part]
    underscore = theme_name.replace("-", "_")
    return {
        "dash": theme_name,
        "underscore": underscore,
        "title": " ".join(_capitalize(part) for part in parts),
        "title_underscore": "_".join(_capitalize(part) for part in parts),
        "constant": underscore.upper(),
    }
