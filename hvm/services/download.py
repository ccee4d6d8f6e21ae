"""
Streaming download of release archives over HTTP (httpx).
"""

from pathlib import Path
from typing import Optional, Union

import httpx

from ..infrastructure.error_handler import NetworkError, handle_api_error
from ..infrastructure.logger import logger


class DownloadService:
    """Stream HTTP responses straight to disk."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        chunk_size: int = 8192,
        timeout: Optional[float] = None
    ):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        self.chunk_size = chunk_size
        self._owns_client = client is None
        self.client = client if client is not None else httpx.Client(
            follow_redirects=True,
            timeout=httpx.Timeout(timeout),
        )

    def ensure_directory(self, path: Union[str, Path]) -> Path:
        directory = Path(path)
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    @handle_api_error
    def download(self, url: str, target: Union[str, Path]) -> int:
        """
        Download ``url`` into ``target``.

        Args:
            url: Archive URL
            target: File to create or overwrite

        Returns:
            Number of bytes written

        Raises:
            NetworkError: On transport failure or a non-2xx response
        """
        target_path = Path(target)
        logger.debug(f"Downloading {url}")

        with self.client.stream("GET", url) as response:
            if not response.is_success:
                raise NetworkError(
                    f"bad status: {response.status_code} {response.reason_phrase} for {url}"
                )

            self.ensure_directory(target_path.parent)
            written = 0
            with target_path.open("wb") as destination:
                for chunk in response.iter_bytes(self.chunk_size):
                    destination.write(chunk)
                    written += len(chunk)

        logger.debug(f"Downloaded {written} bytes to {target_path}")
        return written

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "DownloadService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = [
    "DownloadService",
]
