"""
hvm - Hugo Version Manager.

Resolves, downloads and caches releases of the extended edition of Hugo,
and pins a version per working directory.
"""

__version__ = "0.1.0"

from .interfaces.api import HugoVersionManager
from .models import AppPaths, HvmConfig

__all__ = [
    "HugoVersionManager",
    "AppPaths",
    "HvmConfig",
    "__version__",
]
