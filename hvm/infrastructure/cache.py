"""
Filesystem cache of extracted releases, one directory per tag.

Layout::

    <cache_dir>/<tag>/<exec_name>        one entry per cached release
    <cache_dir>/default/<exec_name>      copy made by "install"

A tag counts as cached when its executable exists. No manifest or checksum
is kept, so an interrupted copy is indistinguishable from a complete one.
"""

import shutil
from pathlib import Path
from typing import List, Optional, Union

from ..core import semver
from ..models.config import DEFAULT_DIR_NAME
from .logger import logger


class CacheStore:
    """Map from release tag to its extracted directory under ``cache_dir``."""

    def __init__(
        self,
        cache_dir: Union[str, Path],
        exec_name: str,
        default_dir_name: str = DEFAULT_DIR_NAME
    ):
        self.cache_dir = Path(cache_dir)
        self.exec_name = exec_name
        self.default_dir_name = default_dir_name

    @property
    def default_dir(self) -> Path:
        return self.cache_dir / self.default_dir_name

    @property
    def default_exec_path(self) -> Path:
        return self.default_dir / self.exec_name

    def ensure_root(self) -> Path:
        """Create the cache directory when missing."""

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        return self.cache_dir

    def tag_dir(self, tag: str) -> Path:
        return self.cache_dir / tag

    def exec_path(self, tag: str) -> Path:
        return self.tag_dir(tag) / self.exec_name

    def is_cached(self, tag: str) -> bool:
        """Report whether the executable for ``tag`` is present."""

        return bool(tag) and self.exec_path(tag).is_file()

    def materialize(self, tag: str, source_dir: Union[str, Path]) -> Path:
        """
        Copy an extracted release tree into the cache under ``tag``.

        Parent directories are created and files left by an earlier,
        partial copy are overwritten.

        Args:
            tag: Release tag naming the cache entry
            source_dir: Directory holding the extracted release

        Returns:
            Path of the cache entry
        """
        source = Path(source_dir)
        if not source.is_dir():
            raise NotADirectoryError(f"{source} is not a directory")

        target = self.tag_dir(tag)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, target, dirs_exist_ok=True)

        logger.debug(f"Cached {tag} in {target}")
        return target

    def size(self, exclude_dir_name: Optional[str] = None) -> int:
        """
        Total size in bytes of cached files.

        Files whose cache-relative path starts with ``exclude_dir_name``
        (the default-copy directory unless given) are not counted.
        """
        exclude = self.default_dir_name if exclude_dir_name is None else exclude_dir_name
        if not self.cache_dir.is_dir():
            return 0

        total = 0
        for path in self.cache_dir.rglob("*"):
            if path.is_dir():
                continue
            relative = path.relative_to(self.cache_dir).as_posix()
            if exclude and relative.startswith(exclude):
                continue
            total += path.lstat().st_size
        return total

    def cached_tags(self, sort_ascending: bool = False) -> List[str]:
        """Tags with a cache directory, default directory excluded."""

        if not self.cache_dir.is_dir():
            return []

        tags = [
            entry.name
            for entry in self.cache_dir.iterdir()
            if entry.is_dir() and entry.name != self.default_dir_name
        ]
        return semver.sorted_versions(tags, descending=not sort_ascending)

    def clean(self) -> int:
        """
        Remove every cache entry except the default directory.

        Returns:
            Number of bytes freed
        """
        freed = self.size()
        if not self.cache_dir.is_dir():
            return 0

        for entry in self.cache_dir.iterdir():
            if entry.name == self.default_dir_name:
                continue
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()

        logger.info(f"Cache cleaned, {freed} bytes freed")
        return freed

    def install_default(self, tag: str) -> Path:
        """Copy the cached executable for ``tag`` into the default directory."""

        source = self.exec_path(tag)
        if not source.is_file():
            raise FileNotFoundError(f"{source} is not cached")

        self.default_dir.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, self.default_exec_path)

        logger.debug(f"Installed {tag} as default at {self.default_exec_path}")
        return self.default_exec_path

    def remove_default(self) -> bool:
        """Delete the default directory. Returns False when there was none."""

        if not self.default_dir.exists():
            return False
        shutil.rmtree(self.default_dir)
        return True


__all__ = [
    "CacheStore",
]
