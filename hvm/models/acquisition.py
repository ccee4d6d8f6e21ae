"""
Acquisition and status models for hvm.

This module contains the data classes and enums describing one pass of the
acquisition pipeline and the cache status report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional


class AcquisitionState(Enum):
    """States of a single acquisition."""

    RESOLVING = "resolving"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    MATERIALIZING = "materializing"
    READY = "ready"
    FAILED = "failed"


@dataclass
class AcquisitionResult:
    """Outcome of a successful acquisition."""

    tag: str
    exec_path: Path
    cache_hit: bool
    state: AcquisitionState = AcquisitionState.READY
    bytes_downloaded: int = 0
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()


@dataclass
class StatusReport:
    """Snapshot of the pin file and cache for one working directory."""

    version: str
    exec_path: Optional[Path]
    exec_cached: bool
    cached_tags: List[str] = field(default_factory=list)
    cache_size: int = 0
    cache_dir: Optional[Path] = None

    @property
    def is_managed(self) -> bool:
        """True when the working directory pins a version."""
        return bool(self.version)

    @property
    def cache_size_mb(self) -> int:
        return self.cache_size // 1_000_000


__all__ = [
    "AcquisitionState",
    "AcquisitionResult",
    "StatusReport",
]
