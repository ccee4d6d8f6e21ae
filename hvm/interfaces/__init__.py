"""
Public interfaces for hvm.
"""

from .api import HugoVersionManager

__all__ = [
    "HugoVersionManager",
]
