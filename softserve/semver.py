"""
npm-style semantic version helpers.

npm ranges (carets, tildes, x-ranges, hyphen ranges) are desugared into
plain comparator sets and evaluated with packaging's Version ordering.
Prerelease tags that packaging cannot parse sort as a development
release of the same version, which keeps them below the final release.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from packaging.version import InvalidVersion, Version

_FULL = re.compile(
    r"^\s*[=v]*\s*(\d+)\.(\d+)\.(\d+)"
    r"(?:-([0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?\s*$"
)
_PARTIAL = re.compile(
    r"^[=v]*(\d+|[xX*])?(?:\.(\d+|[xX*]))?(?:\.(\d+|[xX*]))?"
    r"(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$"
)
_COMPARATOR = re.compile(r"^(<=|>=|<|>|=|\^|~>|~)?(.*)$")
_HYPHEN = re.compile(r"^\s*(\S+)\s+-\s+(\S+)\s*$")

Partial = Tuple[Optional[int], Optional[int], Optional[int], Optional[str]]
Comparator = Tuple[str, Version]


def valid(version: Optional[str]) -> Optional[str]:
    """Return the normalized form of a full semver string, or None."""

    if not version:
        return None
    match = _FULL.match(version)
    if not match:
        return None
    major, minor, patch, pre = match.groups()
    normalized = f"{int(major)}.{int(minor)}.{int(patch)}"
    if pre:
        normalized += f"-{pre}"
    return normalized


def _to_version(major: int, minor: int, patch: int, pre: Optional[str] = None) -> Version:
    release = f"{major}.{minor}.{patch}"
    if not pre:
        return Version(release)
    try:
        parsed = Version(f"{release}-{pre}")
    except InvalidVersion:
        parsed = None
    # Numeric tags like "1.0.0-1" read as post-releases to packaging.
    if parsed is None or not parsed.is_prerelease:
        parsed = Version(f"{release}.dev0")
    return parsed


def parse(version: str) -> Version:
    """Parse a full semver string such as "v14.17.0" into a Version."""

    normalized = valid(version)
    if normalized is None:
        raise ValueError(f"invalid semantic version: {version!r}")
    release, _, pre = normalized.partition("-")
    major, minor, patch = (int(part) for part in release.split("."))
    return _to_version(major, minor, patch, pre or None)


def gte(a: str, b: str) -> bool:
    return parse(a) >= parse(b)


def _parse_partial(text: str) -> Partial:
    match = _PARTIAL.match(text)
    if not match:
        raise ValueError(f"invalid version in range: {text!r}")

    parts: List[Optional[int]] = []
    for raw in match.groups()[:3]:
        if raw is None or raw in ("x", "X", "*"):
            parts.append(None)
        else:
            parts.append(int(raw))
    # Anything after a wildcard is a wildcard too: 1.x.3 means 1.x.x.
    for index in range(1, 3):
        if parts[index - 1] is None:
            parts[index] = None
    return parts[0], parts[1], parts[2], match.group(4)


def _caret(major: Optional[int], minor: Optional[int], patch: Optional[int], pre) -> List[Comparator]:
    if major is None:
        return []
    low = _to_version(major, minor or 0, patch or 0, pre)
    if major > 0 or minor is None:
        return [(">=", low), ("<", _to_version(major + 1, 0, 0))]
    if minor > 0 or patch is None:
        return [(">=", low), ("<", _to_version(0, minor + 1, 0))]
    return [(">=", low), ("<", _to_version(0, 0, patch + 1))]


def _tilde(major: Optional[int], minor: Optional[int], patch: Optional[int], pre) -> List[Comparator]:
    if major is None:
        return []
    low = _to_version(major, minor or 0, patch or 0, pre)
    if minor is None:
        return [(">=", low), ("<", _to_version(major + 1, 0, 0))]
    return [(">=", low), ("<", _to_version(major, minor + 1, 0))]


def _x_range(op: str, major, minor, patch, pre) -> List[Comparator]:
    if major is None:
        # "*", ">=*" and friends match everything; "<*" and ">*" nothing.
        if op in ("<", ">"):
            return [("!", Version("0"))]
        return []

    if minor is not None and patch is not None:
        return [(op or "=", _to_version(major, minor, patch, pre))]

    # Partial version: compute the bounds of the wildcard block.
    if minor is None:
        low = _to_version(major, 0, 0)
        high = _to_version(major + 1, 0, 0)
    else:
        low = _to_version(major, minor, 0)
        high = _to_version(major, minor + 1, 0)

    if op in ("", "="):
        return [(">=", low), ("<", high)]
    if op == ">":
        return [(">=", high)]
    if op == ">=":
        return [(">=", low)]
    if op == "<":
        return [("<", low)]
    return [("<", high)]


def _desugar(comparator: str) -> List[Comparator]:
    match = _COMPARATOR.match(comparator)
    op, rest = match.group(1) or "", match.group(2)
    major, minor, patch, pre = _parse_partial(rest)

    if op == "^":
        return _caret(major, minor, patch, pre)
    if op in ("~", "~>"):
        return _tilde(major, minor, patch, pre)
    return _x_range(op, major, minor, patch, pre)


def _hyphen(low_text: str, high_text: str) -> List[Comparator]:
    low = _x_range(">=", *_parse_partial(low_text))
    high = _x_range("<=", *_parse_partial(high_text))
    return low + high


def parse_range(range_text: str) -> List[List[Comparator]]:
    """Split an npm range into alternative comparator sets."""

    comparator_sets: List[List[Comparator]] = []
    for alternative in range_text.split("||"):
        alternative = re.sub(r"(<=|>=|<|>|=|\^|~>|~)\s+", r"\1", alternative.strip())
        hyphen = _HYPHEN.match(alternative)
        if hyphen:
            comparator_sets.append(_hyphen(hyphen.group(1), hyphen.group(2)))
            continue
        comparators: List[Comparator] = []
        for token in alternative.split():
            comparators.extend(_desugar(token))
        comparator_sets.append(comparators)
    return comparator_sets


def _test(version: Version, comparator: Comparator) -> bool:
    op, bound = comparator
    if op == "<":
        return version < bound
    if op == "<=":
        return version <= bound
    if op == ">":
        return version > bound
    if op == ">=":
        return version >= bound
    if op == "!":
        return False
    return version == bound


def satisfies(version: str, range_text: str) -> bool:
    """
    Return True if version lies within the npm range.

    Unparseable versions or ranges never satisfy anything.
    """

    try:
        parsed = parse(version)
        comparator_sets = parse_range(range_text)
    except ValueError:
        return False
    return any(all(_test(parsed, c) for c in comparators) for comparators in comparator_sets)
