"""
Remote services used by hvm: the GitHub release repository and the
archive download service.
"""

from .github_api import ReleaseRepository, asset_pattern, create_client
from .download import DownloadService

__all__ = [
    "ReleaseRepository",
    "DownloadService",
    "asset_pattern",
    "create_client",
]
