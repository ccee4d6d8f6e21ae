"""
Error taxonomy for hvm and translation of third-party API failures.

Leaf components raise these errors and every caller up to the facade
lets them propagate unchanged. Nothing is retried.
"""

import functools
from typing import Any, Callable, Optional, TypeVar

import httpx
from github import GithubException
from requests.exceptions import RequestException

from .logger import logger


F = TypeVar("F", bound=Callable[..., Any])


####
##      BASE ERROR
#####
class HvmError(Exception):
    """Base exception for every error raised by hvm."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (Original: {self.original_error})"
        return self.message


####
##      NETWORK / REMOTE REPOSITORY ERRORS
#####
class NetworkError(HvmError):
    """Raised when the release API or a download cannot be reached."""


class RateLimitError(NetworkError):
    """Raised when the GitHub API rate limit is exceeded."""


class AuthenticationError(NetworkError):
    """Raised when GitHub rejects the supplied token."""


class NoTagsError(HvmError):
    """Raised when the repository has no usable tags."""


class AssetNotFoundError(HvmError):
    """Raised when no release asset matches the current platform."""


class UnsupportedPlatformError(HvmError):
    """Raised when the operating system has no published assets."""


####
##      USER INPUT ERRORS
#####
class InvalidSpecifierError(HvmError):
    """Raised when a version specifier cannot be parsed."""


class TagNotFoundError(HvmError):
    """Raised when a specifier matches no tag in the repository."""


####
##      ARCHIVE ERRORS
#####
class ArchiveError(HvmError):
    """Raised when an archive cannot be read or extracted."""


class PathTraversalError(ArchiveError):
    """Raised when an archive entry would escape the destination (zip slip)."""


class UnsupportedFormatError(ArchiveError):
    """Raised for unknown archive extensions or a pkg outside darwin."""


####
##      DOT FILE ERRORS
#####
class DotFileError(HvmError):
    """Raised when the dot file in a working directory is unusable."""


class EmptyFileError(DotFileError):
    """Raised when the dot file exists but is blank."""


class InvalidFormatError(DotFileError):
    """Raised when the dot file does not hold a canonical semver tag."""


class DotFileMissingError(DotFileError):
    """Raised when an operation requires a dot file that does not exist."""


####
##      CONFIGURATION ERRORS
#####
class ConfigurationError(HvmError):
    """Raised when configuration values fail validation at load time."""


####
##      API ERROR TRANSLATION
#####
def handle_api_error(func: F) -> F:
    """
    Decorator translating PyGithub, requests and httpx failures into
    hvm errors. Errors that are already HvmError pass through unchanged.

    Args:
        func: Function performing remote calls

    Returns:
        Wrapped function
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)

        except HvmError:
            raise

        except GithubException as e:
            status = getattr(e, "status", None)
            text = str(e).lower()
            if status in (403, 429) and "rate limit" in text:
                logger.error("GitHub API rate limit exceeded")
                raise RateLimitError(
                    "GitHub API rate limit exceeded: configure a GitHub token", e
                ) from e
            if status in (401, 403):
                raise AuthenticationError("GitHub authentication failed", e) from e
            if status == 404:
                raise NetworkError("GitHub resource not found", e) from e
            raise NetworkError(f"GitHub API error (status {status})", e) from e

        except httpx.HTTPError as e:
            raise NetworkError(f"HTTP request failed: {e}", e) from e

        except RequestException as e:
            raise NetworkError(f"Network request failed: {e}", e) from e

    return wrapper  # type: ignore[return-value]


__all__ = [
    "HvmError",
    "NetworkError",
    "RateLimitError",
    "AuthenticationError",
    "NoTagsError",
    "AssetNotFoundError",
    "UnsupportedPlatformError",
    "InvalidSpecifierError",
    "TagNotFoundError",
    "ArchiveError",
    "PathTraversalError",
    "UnsupportedFormatError",
    "DotFileError",
    "EmptyFileError",
    "InvalidFormatError",
    "DotFileMissingError",
    "ConfigurationError",
    "handle_api_error",
]
