"""
Python API for hvm.

HugoVersionManager wires every component from one configuration value and
exposes the version management operations as plain methods. A command line
front end calls these methods and handles prompting and exit codes itself.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import List, Mapping, Optional

from ..core import resolver
from ..core.orchestrator import AcquisitionOrchestrator
from ..models import AcquisitionResult, AppPaths, HvmConfig, Platform, Selection, StatusReport
from ..services import DownloadService, ReleaseRepository, create_client
from ..infrastructure.cache import CacheStore
from ..infrastructure.config_loader import default_app_paths, load_config
from ..infrastructure.dotfile import DotFile
from ..infrastructure.error_handler import DotFileMissingError, TagNotFoundError
from ..infrastructure.logger import logger


class HugoVersionManager:
    """
    Facade over the resolution and acquisition pipeline.

    Example:
        >>> manager = HugoVersionManager.from_environment()
        >>> result = manager.use("0.128")
        >>> print(result.exec_path)
    """

    def __init__(
        self,
        config: Optional[HvmConfig] = None,
        paths: Optional[AppPaths] = None,
        repository: Optional[ReleaseRepository] = None,
        download_service: Optional[DownloadService] = None,
        platform: Optional[Platform] = None
    ):
        """
        Args:
            config: User configuration; defaults when omitted
            paths: Cache and working directory locations
            repository: Pre-built release repository, fetched lazily otherwise
            download_service: Pre-built download service
            platform: Target platform; the host platform when omitted
        """
        self.config = config if config is not None else HvmConfig()
        self.paths = paths if paths is not None else default_app_paths()
        self.platform = platform if platform is not None else Platform.current()

        self.cache = CacheStore(
            self.paths.cache_dir,
            self.platform.exec_name,
            self.paths.default_dir_name
        )
        self.dot_file = DotFile(self.paths.dot_file_path)
        self.download_service = download_service if download_service is not None else DownloadService(
            chunk_size=self.config.chunk_size,
            timeout=self.config.timeout
        )

        self._repository = repository
        self._orchestrator: Optional[AcquisitionOrchestrator] = None

        self.verbose = self.config.verbose
        self.set_verbose(self.verbose)

    @classmethod
    def from_environment(
        cls,
        working_dir: Optional[Path] = None,
        config_file: Optional[Path] = None,
        verbose: bool = False
    ) -> "HugoVersionManager":
        """Build a manager from the user config file, environment and directories."""

        paths = default_app_paths(working_dir)
        config = load_config(config_file or paths.config_file, verbose=verbose)
        return cls(config=config, paths=paths)

    def set_verbose(self, verbose: bool) -> None:
        """Toggle debug logging."""

        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    @property
    def repository(self) -> ReleaseRepository:
        """Release repository, fetching the tag list on first access."""

        if self._repository is None:
            client = create_client(self.config.github_token, self.config.timeout)
            self._repository = ReleaseRepository(client=client)
        return self._repository

    @property
    def orchestrator(self) -> AcquisitionOrchestrator:
        if self._orchestrator is None:
            self._orchestrator = AcquisitionOrchestrator(
                repository=self.repository,
                download_service=self.download_service,
                cache=self.cache,
                platform=self.platform
            )
        return self._orchestrator

    ####
    ##      RESOLUTION AND SELECTION
    #####
    def resolve(self, specifier: Optional[str] = None) -> str:
        """Resolve a specifier, ``latest`` when None, to a repository tag."""

        return resolver.resolve(
            "latest" if specifier is None else specifier,
            self.repository.tags,
            self.repository.latest_tag,
            self.config.sort_ascending
        )

    def selectable_tags(self) -> List[str]:
        """Tags to number in the picker, per the display settings."""

        return resolver.display_tags(
            self.repository.tags,
            self.config.sort_ascending,
            self.config.num_tags_to_display
        )

    def render_choices(self, display: List[str]) -> str:
        return resolver.render_tag_table(display, self.cache.is_cached)

    def choose(self, display: List[str], raw: Optional[str]) -> Selection:
        return resolver.parse_selection(display, raw)

    ####
    ##      VERSION MANAGEMENT
    #####
    def use(self, specifier: Optional[str] = None, use_dot_file: bool = False) -> AcquisitionResult:
        """
        Acquire a version and pin it in the working directory.

        Args:
            specifier: Version specifier; ``latest`` when None
            use_dot_file: Acquire the version already pinned instead

        Returns:
            AcquisitionResult for the pinned version

        Raises:
            DotFileMissingError: If use_dot_file is set and there is no pin
            TagNotFoundError: If the pinned or requested version does not exist
        """
        if use_dot_file:
            tag = self.dot_file.read()
            if not tag:
                raise DotFileMissingError(
                    f"the current directory does not contain an {self.dot_file.file_name} file"
                )
            if tag not in self.repository.tags:
                raise TagNotFoundError(
                    f"the version specified in the {self.dot_file.file_name} file ({tag}) "
                    f"is not available in the repository: {self.dot_file.fix_hint}"
                )
        else:
            tag = self.resolve(specifier)

        self.cache.ensure_root()
        result = self.orchestrator.acquire(tag)
        self.dot_file.write(tag)

        logger.debug(f"Pinned {tag} in {self.dot_file.path}")
        return result

    def install(self, specifier: Optional[str] = None) -> AcquisitionResult:
        """Acquire a version and copy it to the default directory."""

        tag = self.resolve(specifier)
        self.cache.ensure_root()
        result = self.orchestrator.acquire(tag)
        self.cache.install_default(tag)

        logger.info(f"Installation of {tag} complete.")
        if not self.default_dir_on_path():
            logger.info(f"Please add {self.cache.default_dir} to the PATH environment variable.")
        return result

    def default_dir_on_path(self, environ: Optional[Mapping[str, str]] = None) -> bool:
        env = os.environ if environ is None else environ
        entries = env.get("PATH", "").split(os.pathsep)
        return str(self.cache.default_dir) in entries

    def remove(self) -> bool:
        """Remove the default version. Returns False when none was installed."""

        return self.cache.remove_default()

    def disable(self) -> bool:
        """Disable version management in the working directory."""

        return self.dot_file.remove()

    def clean(self) -> int:
        """Empty the cache, keeping the default version. Returns bytes freed."""

        return self.cache.clean()

    def reset(self) -> None:
        """
        Disable version management in the working directory, then remove
        the configuration and cache directories, default version included.
        """
        self.disable()

        directories = [self.cache.cache_dir]
        if self.paths.config_file is not None:
            directories.insert(0, Path(self.paths.config_file).parent)

        for directory in directories:
            if directory.is_dir():
                shutil.rmtree(directory)
                logger.debug(f"Removed {directory}")

    ####
    ##      STATUS
    #####
    def exec_path(self) -> Optional[Path]:
        """Executable path for the pinned version, whether cached or not."""

        version = self.dot_file.read()
        if not version:
            return None
        return self.cache.exec_path(version)

    def exec_path_cached(self) -> Optional[Path]:
        """Executable path for the pinned version, only when cached."""

        version = self.dot_file.read()
        if not version or not self.cache.is_cached(version):
            return None
        return self.cache.exec_path(version)

    def status(self) -> StatusReport:
        version = self.dot_file.read()
        return StatusReport(
            version=version,
            exec_path=self.cache.exec_path(version) if version else None,
            exec_cached=self.cache.is_cached(version),
            cached_tags=self.cache.cached_tags(self.config.sort_ascending),
            cache_size=self.cache.size(),
            cache_dir=self.cache.cache_dir
        )

    def close(self) -> None:
        self.download_service.close()


__all__ = [
    "HugoVersionManager",
]
