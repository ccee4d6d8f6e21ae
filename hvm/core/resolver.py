"""
Resolution of user supplied version specifiers against repository tags,
plus the pure helpers behind the interactive version picker.

Nothing in this module performs I/O.
"""

import re
from typing import Callable, List, Optional, Sequence, Union

from . import semver
from ..models import (
    Latest, Exact, MajorOnly, MajorMinor, LatestMajorMinor, LatestMajorPatch,
    Specifier, Selected, Cancelled, Invalid, Selection
)
from ..infrastructure.error_handler import InvalidSpecifierError, TagNotFoundError


_NUMBER = r"(?:0|[1-9][0-9]*)"
_LATEST_MAJOR_RE = re.compile(rf"v\.(?P<minor>{_NUMBER})(?:\.(?P<patch>{_NUMBER}))?")

LATEST_ALIASES = frozenset({"latest", "v", "v."})
SPECIFIER_HINT = 'use a version such as "v0.54.0", "0.54", "0", ".54" or "latest"'


####
##      SPECIFIER PARSING
#####
def parse_specifier(text: str) -> Specifier:
    """
    Parse a version specifier into its variant.

    Args:
        text: Raw specifier, e.g. ``latest``, ``v0.54.0``, ``0.54``, ``.54.1``

    Returns:
        One of the Specifier variants

    Raises:
        InvalidSpecifierError: If the text is not a recognised specifier
    """
    if text in LATEST_ALIASES:
        return Latest()
    if not text:
        raise InvalidSpecifierError(f"invalid tag: {text}: {SPECIFIER_HINT}")

    version = text if text.startswith("v") else f"v{text}"

    if version.startswith("v."):
        match = _LATEST_MAJOR_RE.fullmatch(version)
        if match is None:
            raise InvalidSpecifierError(f"invalid tag: {text}: {SPECIFIER_HINT}")
        minor = int(match.group("minor"))
        if match.group("patch") is None:
            return LatestMajorMinor(minor=minor)
        return LatestMajorPatch(minor=minor, patch=int(match.group("patch")))

    parsed = semver.parse(version)
    if parsed is None or parsed.build:
        raise InvalidSpecifierError(f"invalid tag: {text}: {SPECIFIER_HINT}")

    if version == parsed.canonical:
        return Exact(tag=version)
    if version == semver.major(version):
        return MajorOnly(major=parsed.major)
    if version == semver.major_minor(version):
        return MajorMinor(major=parsed.major, minor=parsed.minor)

    raise InvalidSpecifierError(f"invalid tag: {text}: {SPECIFIER_HINT}")


####
##      RESOLUTION
#####
def resolve(
    specifier: Union[str, Specifier],
    tags: Sequence[str],
    latest_tag: str,
    sort_ascending: bool = False
) -> str:
    """
    Resolve a specifier to a single tag.

    Args:
        specifier: Raw text or an already parsed Specifier
        tags: Available tags; never modified
        latest_tag: Latest repository tag
        sort_ascending: Ordering preference of the tag list

    Returns:
        The resolved tag

    Raises:
        InvalidSpecifierError: If a raw specifier cannot be parsed
        TagNotFoundError: If no tag satisfies the specifier
    """
    if isinstance(specifier, str):
        specifier = parse_specifier(specifier)

    if isinstance(specifier, Latest):
        if not latest_tag:
            raise TagNotFoundError("no latest release found")
        return latest_tag

    if isinstance(specifier, Exact):
        return _require(specifier.tag, tags)

    if isinstance(specifier, LatestMajorPatch):
        latest = semver.parse(latest_tag)
        if latest is None:
            raise TagNotFoundError("no latest release found")
        tag = f"v{latest.major}.{specifier.minor}.{specifier.patch}"
        return _require(tag, tags)

    if isinstance(specifier, LatestMajorMinor):
        latest = semver.parse(latest_tag)
        if latest is None:
            raise TagNotFoundError("no latest release found")
        specifier = MajorMinor(major=latest.major, minor=specifier.minor)

    if isinstance(specifier, MajorOnly):
        wanted = specifier.major
        matches: Callable[[semver.ParsedVersion], bool] = lambda v: v.major <= wanted
        label = f"v{wanted}"
    elif isinstance(specifier, MajorMinor):
        wanted_major, wanted_minor = specifier.major, specifier.minor
        matches = lambda v: v.major == wanted_major and v.minor <= wanted_minor
        label = f"v{wanted_major}.{wanted_minor}"
    else:
        raise InvalidSpecifierError(f"unsupported specifier: {specifier!r}")

    for tag in _scan_order(tags, sort_ascending):
        parsed = semver.parse(tag)
        if parsed is not None and matches(parsed):
            return tag

    raise TagNotFoundError(f"tag not found: {label}")


def _require(tag: str, tags: Sequence[str]) -> str:
    if tag not in tags:
        raise TagNotFoundError(f'tag "{tag}" not found in repository')
    return tag


def _scan_order(tags: Sequence[str], sort_ascending: bool) -> List[str]:
    """Snapshot of ``tags`` ordered so the highest version comes first."""

    snapshot = list(tags)
    if sort_ascending:
        snapshot.sort(key=semver.sort_key)
        return snapshot[::-1]
    snapshot.sort(key=semver.sort_key, reverse=True)
    return snapshot


####
##      INTERACTIVE SELECTION HELPERS
#####
def display_tags(
    tags: Sequence[str],
    sort_ascending: bool,
    num_tags_to_display: int
) -> List[str]:
    """
    Build the list of tags offered in the picker.

    A negative count shows every tag. Otherwise the newest ``count`` tags are
    kept, in the configured order.
    """
    display = semver.sorted_versions(tags, descending=not sort_ascending)

    n = num_tags_to_display if num_tags_to_display >= 0 else len(display)
    if n <= len(display):
        display = display[len(display) - n:] if sort_ascending else display[:n]
    return display


def parse_selection(display: Sequence[str], raw: Optional[str]) -> Selection:
    """
    Interpret one answer typed at the picker prompt.

    Args:
        display: Tags as numbered on screen, starting at 1
        raw: The line entered by the user

    Returns:
        Selected, Cancelled or Invalid
    """
    answer = (raw or "").strip()
    if not answer:
        return Cancelled()

    message = f"Please enter a number between 1 and {len(display)}, or press Enter to cancel"
    try:
        choice = int(answer)
    except ValueError:
        return Invalid(message=message)

    if choice < 1 or choice > len(display):
        return Invalid(message=message)
    return Selected(tag=display[choice - 1])


def render_tag_table(
    display: Sequence[str],
    is_cached: Optional[Callable[[str], bool]] = None,
    columns: int = 3
) -> str:
    """Render the numbered picker table, flagging tags already in the cache."""

    lines: List[str] = []
    row = ""
    for i, tag in enumerate(display):
        flag = "[cached]" if is_cached is not None and is_cached(tag) else ""
        row += f"{i + 1:3d}) {tag} {flag}".ljust(25)
        if (i + 1) % columns == 0 or i == len(display) - 1:
            lines.append(row)
            row = ""
    return "\n".join(lines)


__all__ = [
    "LATEST_ALIASES",
    "parse_specifier",
    "resolve",
    "display_tags",
    "parse_selection",
    "render_tag_table",
]
