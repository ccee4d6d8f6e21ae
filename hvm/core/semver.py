"""
Semantic version helpers for ``v``-prefixed release tags.

Accepts ``vMAJOR``, ``vMAJOR.MINOR`` and ``vMAJOR.MINOR.PATCH`` with optional
``-prerelease`` and ``+build`` suffixes on the full form. Shorthand forms
are completed with zeros: ``v1`` is ``v1.0.0`` and ``v1.2`` is ``v1.2.0``.
"""

import functools
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from packaging.version import Version


_IDENT = r"[0-9A-Za-z-]+"
_SEMVER_RE = re.compile(
    r"v(?P<major>0|[1-9][0-9]*)"
    r"(?:\.(?P<minor>0|[1-9][0-9]*)"
    r"(?:\.(?P<patch>0|[1-9][0-9]*)"
    rf"(?:-(?P<prerelease>{_IDENT}(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<build>{_IDENT}(?:\.{_IDENT})*))?"
    r")?)?"
)


@dataclass(frozen=True)
class ParsedVersion:
    """Components of a valid version string."""

    major: int
    minor: int
    patch: int
    prerelease: str = ""
    build: str = ""

    @property
    def canonical(self) -> str:
        text = f"v{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        return text


def parse(version: str) -> Optional[ParsedVersion]:
    """
    Parse a version string.

    Args:
        version: Candidate string such as ``v1.2.3``

    Returns:
        ParsedVersion, or None when the string is not valid semver
    """
    match = _SEMVER_RE.fullmatch(version or "")
    if match is None:
        return None

    prerelease = match.group("prerelease") or ""
    for ident in prerelease.split(".") if prerelease else ():
        if ident.isdigit() and len(ident) > 1 and ident.startswith("0"):
            return None

    return ParsedVersion(
        major=int(match.group("major")),
        minor=int(match.group("minor") or 0),
        patch=int(match.group("patch") or 0),
        prerelease=prerelease,
        build=match.group("build") or "",
    )


def is_valid(version: str) -> bool:
    """Report whether ``version`` is a valid semantic version."""
    return parse(version) is not None


def canonical(version: str) -> str:
    """
    Return the canonical ``vX.Y.Z[-pre]`` form, dropping build metadata.

    Returns an empty string for invalid input.
    """
    parsed = parse(version)
    return parsed.canonical if parsed else ""


def major(version: str) -> str:
    """Return the ``vX`` prefix, or an empty string for invalid input."""
    parsed = parse(version)
    return f"v{parsed.major}" if parsed else ""


def major_minor(version: str) -> str:
    """Return the ``vX.Y`` prefix, or an empty string for invalid input."""
    parsed = parse(version)
    return f"v{parsed.major}.{parsed.minor}" if parsed else ""


def release(parsed: ParsedVersion) -> Version:
    """Release component of a parsed version, prerelease and build dropped."""
    return Version(f"{parsed.major}.{parsed.minor}.{parsed.patch}")


# Prerelease identifiers follow semver precedence, not PEP 440
def _compare_prerelease(x: str, y: str) -> int:
    # A version without prerelease ranks above one with it
    if x == y:
        return 0
    if not x:
        return 1
    if not y:
        return -1

    xs, ys = x.split("."), y.split(".")
    for a, b in zip(xs, ys):
        if a == b:
            continue
        a_num, b_num = a.isdigit(), b.isdigit()
        if a_num and b_num:
            return -1 if int(a) < int(b) else 1
        if a_num != b_num:
            return -1 if a_num else 1
        return -1 if a < b else 1

    if len(xs) == len(ys):
        return 0
    return -1 if len(xs) < len(ys) else 1


def compare(v: str, w: str) -> int:
    """
    Compare two versions.

    An invalid version is considered less than every valid one, and two
    invalid versions compare equal.

    Returns:
        -1, 0 or 1
    """
    pv, pw = parse(v), parse(w)
    if pv is None and pw is None:
        return 0
    if pv is None:
        return -1
    if pw is None:
        return 1

    left, right = release(pv), release(pw)
    if left != right:
        return -1 if left < right else 1
    return _compare_prerelease(pv.prerelease, pw.prerelease)


def _compare_for_sort(v: str, w: str) -> int:
    result = compare(v, w)
    if result != 0:
        return result
    return (v > w) - (v < w)


sort_key = functools.cmp_to_key(_compare_for_sort)


def sorted_versions(versions: Iterable[str], descending: bool = False) -> List[str]:
    """
    Return a new list of versions ordered by semantic precedence.

    Args:
        versions: Version strings
        descending: Highest version first when True

    Returns:
        Sorted copy
    """
    return sorted(versions, key=sort_key, reverse=descending)


__all__ = [
    "ParsedVersion",
    "parse",
    "is_valid",
    "canonical",
    "major",
    "major_minor",
    "release",
    "compare",
    "sort_key",
    "sorted_versions",
]
