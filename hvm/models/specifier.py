"""
Version specifier and interactive selection models.

A specifier is parsed once from user input into one of the variants below
and then dispatched on by the resolver.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Latest:
    """The most recent tag of the repository."""


@dataclass(frozen=True)
class Exact:
    """A canonical tag that must exist verbatim."""

    tag: str


@dataclass(frozen=True)
class MajorOnly:
    """Newest tag whose major version is not above ``major``."""

    major: int


@dataclass(frozen=True)
class MajorMinor:
    """Newest tag with this major version and a minor not above ``minor``."""

    major: int
    minor: int


@dataclass(frozen=True)
class LatestMajorMinor:
    """Like :class:`MajorMinor` with the major taken from the latest tag."""

    minor: int


@dataclass(frozen=True)
class LatestMajorPatch:
    """Tag ``v<latest major>.<minor>.<patch>``, taken literally."""

    minor: int
    patch: int


Specifier = Union[Latest, Exact, MajorOnly, MajorMinor, LatestMajorMinor, LatestMajorPatch]


@dataclass(frozen=True)
class Selected:
    """The user picked a tag from the displayed list."""

    tag: str


@dataclass(frozen=True)
class Cancelled:
    """The user submitted an empty answer."""


@dataclass(frozen=True)
class Invalid:
    """The answer was not a valid choice; prompt again with ``message``."""

    message: str


Selection = Union[Selected, Cancelled, Invalid]


__all__ = [
    "Latest",
    "Exact",
    "MajorOnly",
    "MajorMinor",
    "LatestMajorMinor",
    "LatestMajorPatch",
    "Specifier",
    "Selected",
    "Cancelled",
    "Invalid",
    "Selection",
]
