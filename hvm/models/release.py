"""
Release domain models for hvm.

This module contains the data classes and enums describing GitHub release
assets and the archives they are published in.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class ArchiveKind(Enum):
    """Archive formats published for Hugo releases."""

    TAR_GZ = "tar.gz"       # gzip-compressed tar stream
    ZIP = "zip"             # zip container
    PKG = "pkg"             # macOS installer package

    @property
    def extension(self) -> str:
        return f".{self.value}"

    @classmethod
    def from_name(cls, name: str) -> Optional["ArchiveKind"]:
        """Return the kind matching the suffix of a file name or URL."""

        lowered = name.lower()
        for kind in cls:
            if lowered.endswith(kind.extension):
                return kind
        return None


@dataclass
class Asset:
    """A platform and architecture specific archive for one release tag."""

    exec_name: str
    tag: str = ""
    archive_url: Optional[str] = None
    archive_kind: Optional[ArchiveKind] = None
    archive_dir_path: Optional[Path] = None
    archive_file_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if not self.exec_name:
            raise ValueError("Executable name is required")

    @property
    def version(self) -> str:
        """Tag without its leading ``v``."""
        return self.tag[1:] if self.tag.startswith("v") else self.tag

    def exec_path(self, cache_dir: Path) -> Path:
        return Path(cache_dir) / self.tag / self.exec_name


__all__ = [
    "ArchiveKind",
    "Asset",
]
