"""
Release repository backed by the GitHub REST API (PyGithub).
"""

import math
import re
from typing import List, Optional

from github import Auth, Github

from ..core import semver
from ..models import ArchiveKind, Asset, Platform
from ..models.config import REPOSITORY_NAME, REPOSITORY_OWNER
from ..infrastructure.error_handler import (
    AssetNotFoundError, NoTagsError, TagNotFoundError,
    UnsupportedFormatError, UnsupportedPlatformError, handle_api_error
)
from ..infrastructure.logger import logger


TAGS_PER_PAGE = 100

# Releases prior to v0.54.0 were not semantically versioned
MIN_SEMVER_TAG = "v0.54.0"
# Archive file names changed with v0.103.0
NAMING_SCHEME_TAG = "v0.103.0"
# macOS archives became installer packages with v0.153.0
DARWIN_PKG_TAG = "v0.153.0"


def create_client(token: Optional[str] = None, timeout: Optional[float] = None) -> Github:
    """
    Create a PyGithub client, authenticated when a token is given.

    Args:
        token: GitHub personal access token
        timeout: Request timeout in seconds, rounded up; PyGithub's default (15s) when None

    Returns:
        Github client paging 100 items at a time
    """
    kwargs = {"per_page": TAGS_PER_PAGE}
    if timeout is not None:
        # PyGithub only takes whole seconds
        kwargs["timeout"] = math.ceil(timeout)
    if token:
        return Github(auth=Auth.Token(token), **kwargs)
    return Github(**kwargs)


def asset_pattern(tag: str, platform: Platform) -> str:
    """
    Return the archive file name published for ``tag`` on ``platform``.

    Raises:
        UnsupportedPlatformError: If nothing is published for the OS
    """
    version = tag[1:] if tag.startswith("v") else tag

    if semver.compare(tag, NAMING_SCHEME_TAG) < 0:
        if platform.os == "darwin":
            return f"hugo_extended_{version}_macOS-64bit.tar.gz"
        if platform.os == "windows":
            return f"hugo_extended_{version}_Windows-64bit.zip"
        if platform.os == "linux":
            if platform.arch == "arm64":
                return f"hugo_extended_{version}_Linux-ARM64.deb"
            return f"hugo_extended_{version}_Linux-64bit.tar.gz"
        raise UnsupportedPlatformError("unsupported operating system")

    if platform.os == "darwin":
        if semver.compare(tag, DARWIN_PKG_TAG) < 0:
            return f"hugo_extended_{version}_darwin-universal.tar.gz"
        return f"hugo_extended_{version}_darwin-universal.pkg"
    if platform.os == "windows":
        return f"hugo_extended_{version}_windows-{platform.arch}.zip"
    if platform.os == "linux":
        return f"hugo_extended_{version}_linux-{platform.arch}.tar.gz"
    raise UnsupportedPlatformError("unsupported operating system")


####
##      RELEASE REPOSITORY
#####
class ReleaseRepository:
    """
    Tags and release assets of one GitHub repository.

    The full tag list is fetched once, on construction, and kept in
    descending semver order. The latest tag is the first of that list.
    """

    def __init__(
        self,
        owner: str = REPOSITORY_OWNER,
        name: str = REPOSITORY_NAME,
        client: Optional[Github] = None,
        token: Optional[str] = None,
        fetch: bool = True
    ):
        if not owner or not name:
            raise ValueError("Repository owner and name are required")

        self.owner = owner
        self.name = name
        self.client = client if client is not None else create_client(token)
        self._repo = None
        self._tags: List[str] = []
        self._latest_tag = ""

        if fetch:
            self.fetch_tags()

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def tags(self) -> List[str]:
        return list(self._tags)

    @property
    def latest_tag(self) -> str:
        return self._latest_tag

    def _get_repo(self):
        if self._repo is None:
            self._repo = self.client.get_repo(self.full_name, lazy=True)
        return self._repo

    @handle_api_error
    def fetch_tags(self) -> List[str]:
        """
        Fetch every tag, following pagination until exhausted.

        Returns:
            Qualifying tags, newest first

        Raises:
            NoTagsError: If the repository has no qualifying tags
            NetworkError: If the API cannot be reached
        """
        logger.debug(f"Fetching tags for {self.full_name}")
        names = [tag.name for tag in self._get_repo().get_tags()]
        if not names:
            raise NoTagsError("this repository has no tags")

        qualifying = [
            name for name in names
            if semver.is_valid(name) and semver.compare(name, MIN_SEMVER_TAG) >= 0
        ]
        if not qualifying:
            raise NoTagsError(f"this repository has no tags at or above {MIN_SEMVER_TAG}")

        self._tags = semver.sorted_versions(qualifying, descending=True)
        self._latest_tag = self._tags[0]

        logger.debug(f"Fetched {len(names)} tags, {len(self._tags)} usable, latest {self._latest_tag}")
        return self.tags

    def require_latest_tag(self) -> str:
        if not self._latest_tag:
            raise TagNotFoundError("no latest release found")
        return self._latest_tag

    @handle_api_error
    def fetch_latest_release_tag(self) -> str:
        """Tag name of the release GitHub marks as latest."""

        release = self._get_repo().get_latest_release()
        if not release.tag_name:
            raise TagNotFoundError("release found, but tag name is empty")
        return release.tag_name

    @handle_api_error
    def fetch_download_url(self, asset: Asset, platform: Platform) -> str:
        """
        Find the download URL of ``asset.tag`` for ``platform``.

        Sets ``asset.archive_url`` and ``asset.archive_kind``.

        Raises:
            UnsupportedPlatformError: If the OS has no published assets
            UnsupportedFormatError: If the matched file is not a supported archive
            AssetNotFoundError: If no release asset matches
            NetworkError: If the API cannot be reached
        """
        pattern = re.compile(re.escape(asset_pattern(asset.tag, platform)))

        release = self._get_repo().get_release(asset.tag)
        for release_asset in release.get_assets():
            url = release_asset.browser_download_url
            if not pattern.search(url):
                continue

            kind = ArchiveKind.from_name(url)
            if kind is None:
                raise UnsupportedFormatError("unable to determine archive extension")

            asset.archive_url = url
            asset.archive_kind = kind
            logger.debug(f"Resolved {asset.tag} for {platform} to {url}")
            return url

        raise AssetNotFoundError(f"unable to find download for {asset.tag} {platform}")

    def set_tags_for_testing(self, tags: List[str], latest_tag: str) -> None:
        self._tags = list(tags)
        self._latest_tag = latest_tag


__all__ = [
    "TAGS_PER_PAGE",
    "MIN_SEMVER_TAG",
    "NAMING_SCHEME_TAG",
    "DARWIN_PKG_TAG",
    "create_client",
    "asset_pattern",
    "ReleaseRepository",
]
