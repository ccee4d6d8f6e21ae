"""
Core data models API surface for hvm.

This file re-exports model classes from domain-specific modules so that
imports like `from hvm.models import X` keep working.
"""

from .release import (
    ArchiveKind,
    Asset,
)
from .platform import Platform
from .specifier import (
    Latest,
    Exact,
    MajorOnly,
    MajorMinor,
    LatestMajorMinor,
    LatestMajorPatch,
    Specifier,
    Selected,
    Cancelled,
    Invalid,
    Selection,
)
from .acquisition import (
    AcquisitionState,
    AcquisitionResult,
    StatusReport,
)
from .config import AppPaths, HvmConfig

__all__ = [
    # Release models
    "ArchiveKind",
    "Asset",
    "Platform",
    # Specifier models
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
    # Acquisition models
    "AcquisitionState",
    "AcquisitionResult",
    "StatusReport",
    # Config models
    "AppPaths",
    "HvmConfig",
]
