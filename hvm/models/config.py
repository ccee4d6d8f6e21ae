"""
Configuration models for hvm.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


APP_NAME = "hvm"
DOT_FILE_NAME = ".hvm"
DEFAULT_DIR_NAME = "default"
REPOSITORY_OWNER = "gohugoio"
REPOSITORY_NAME = "hugo"


@dataclass
class HvmConfig:
    """
    User configuration consumed by the core.

    Built once at startup by the config loader and passed to each component
    that needs it.
    """

    # GitHub settings
    github_token: Optional[str] = None

    # Tag display settings
    num_tags_to_display: int = 30
    sort_ascending: bool = False

    # Download settings
    chunk_size: int = 8192
    timeout: Optional[float] = None  # None blocks indefinitely

    verbose: bool = False

    def __post_init__(self) -> None:
        if self.github_token is not None and not isinstance(self.github_token, str):
            raise ValueError("github_token must be a string")
        if isinstance(self.num_tags_to_display, bool) or not isinstance(self.num_tags_to_display, int):
            raise ValueError("num_tags_to_display must be a non-zero integer")
        if self.num_tags_to_display == 0:
            raise ValueError("num_tags_to_display must be a non-zero integer")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")


@dataclass(frozen=True)
class AppPaths:
    """Filesystem locations used by hvm."""

    cache_dir: Path
    working_dir: Path
    config_file: Optional[Path] = None
    dot_file_name: str = DOT_FILE_NAME
    default_dir_name: str = DEFAULT_DIR_NAME

    @property
    def default_dir(self) -> Path:
        return Path(self.cache_dir) / self.default_dir_name

    @property
    def dot_file_path(self) -> Path:
        return Path(self.working_dir) / self.dot_file_name


__all__ = [
    "APP_NAME",
    "DOT_FILE_NAME",
    "DEFAULT_DIR_NAME",
    "REPOSITORY_OWNER",
    "REPOSITORY_NAME",
    "HvmConfig",
    "AppPaths",
]
