"""
Orchestrator for acquiring a release: cache lookup, download,
extraction and caching.
"""

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from ..models import AcquisitionResult, AcquisitionState, Asset, Platform
from ..services import DownloadService, ReleaseRepository
from ..infrastructure import archive
from ..infrastructure.cache import CacheStore
from ..infrastructure.error_handler import ArchiveError

from hvm.infrastructure.logger import logger


Extractor = Callable[..., int]


####
##      ACQUISITION ORCHESTRATOR
#####
class AcquisitionOrchestrator:
    """
    Ensures a release tag is present in the cache.

    One call to :meth:`acquire` moves through
    ``RESOLVING -> READY`` on a cache hit, or
    ``RESOLVING -> DOWNLOADING -> EXTRACTING -> MATERIALIZING -> READY``
    on a miss. Any failure moves to ``FAILED`` and the original error is
    re-raised unchanged.
    """

    def __init__(
        self,
        repository: ReleaseRepository,
        download_service: DownloadService,
        cache: CacheStore,
        platform: Optional[Platform] = None,
        extractor: Extractor = archive.extract
    ):
        self.repository = repository
        self.download_service = download_service
        self.cache = cache
        self.platform = platform if platform is not None else Platform.current()
        self.extractor = extractor

        self.state = AcquisitionState.RESOLVING
        self.failure: Optional[Exception] = None

    def acquire(self, tag: str) -> AcquisitionResult:
        """
        Make ``tag`` available in the cache.

        Args:
            tag: Resolved release tag

        Returns:
            AcquisitionResult describing the cached executable
        """
        self.state = AcquisitionState.RESOLVING
        self.failure = None
        started_at = datetime.now()

        if self.cache.is_cached(tag):
            logger.info(f"Using {tag} from cache.")
            self.state = AcquisitionState.READY
            return AcquisitionResult(
                tag=tag,
                exec_path=self.cache.exec_path(tag),
                cache_hit=True,
                started_at=started_at,
                completed_at=datetime.now()
            )

        asset = Asset(exec_name=self.cache.exec_name, tag=tag)
        try:
            with tempfile.TemporaryDirectory(prefix="hvm-") as temp_dir:
                asset.archive_dir_path = Path(temp_dir)
                bytes_downloaded = self._download(asset)
                extracted = self._extract(asset)
                self._materialize(asset, extracted)

        except Exception as e:
            self.state = AcquisitionState.FAILED
            self.failure = e
            logger.error(f"Acquisition of {tag} failed: {e}")
            raise

        self.state = AcquisitionState.READY
        logger.debug(f"{tag} ready at {self.cache.exec_path(tag)}")

        return AcquisitionResult(
            tag=tag,
            exec_path=self.cache.exec_path(tag),
            cache_hit=False,
            bytes_downloaded=bytes_downloaded,
            started_at=started_at,
            completed_at=datetime.now()
        )

    def _download(self, asset: Asset) -> int:
        self.state = AcquisitionState.DOWNLOADING
        url = self.repository.fetch_download_url(asset, self.platform)

        asset.archive_file_path = asset.archive_dir_path / f"hugo{asset.archive_kind.extension}"
        logger.info(f"Downloading {asset.tag}...")
        written = self.download_service.download(url, asset.archive_file_path)
        logger.info(f"Downloaded {asset.tag} ({written} bytes).")
        return written

    def _extract(self, asset: Asset) -> Path:
        self.state = AcquisitionState.EXTRACTING
        target = asset.archive_dir_path / "release"
        self.extractor(asset.archive_file_path, target, asset.archive_kind, remove_archive=True)

        if not (target / asset.exec_name).is_file():
            raise ArchiveError(f"the {asset.tag} archive does not contain {asset.exec_name}")
        return target

    def _materialize(self, asset: Asset, extracted: Path) -> None:
        self.state = AcquisitionState.MATERIALIZING
        self.cache.materialize(asset.tag, extracted)


__all__ = [
    "AcquisitionOrchestrator",
]
