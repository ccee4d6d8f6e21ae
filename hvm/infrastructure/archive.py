"""
Archive extraction for downloaded release assets.

Supports gzip-compressed tar streams, zip containers and, on darwin only,
installer packages expanded with ``pkgutil``. Every tar and zip entry is
checked for path traversal before anything is written for it.
"""

import shutil
import stat
import subprocess
import sys
import tarfile
import tempfile
import zipfile
import zlib
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import BinaryIO, Optional, Union

from ..models import ArchiveKind
from .error_handler import ArchiveError, PathTraversalError, UnsupportedFormatError
from .logger import logger


PathLike = Union[str, Path]

COPY_BUFFER_SIZE = 1024 * 1024


def is_unsafe_entry_name(name: str) -> bool:
    """
    Report whether an archive entry name could escape the destination.

    An entry is unsafe when any of its path segments is ``..`` or when it
    is an absolute path, using either separator.
    """
    normalized = name.replace("\\", "/")
    if normalized.startswith("/") or PureWindowsPath(name).drive:
        return True
    return ".." in PurePosixPath(normalized).parts


def _check_entry(name: str) -> None:
    if is_unsafe_entry_name(name):
        logger.error(f"Refusing unsafe archive entry: {name}")
        raise PathTraversalError(f"detected unsafe file in archive (zip slip): {name}")


def _write_stream(source: BinaryIO, target: Path, mode: Optional[int]) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("wb") as destination:
        shutil.copyfileobj(source, destination, COPY_BUFFER_SIZE)
    if mode:
        target.chmod(stat.S_IMODE(mode))


####
##      TAR.GZ
#####
def extract_tar_gz(archive_path: PathLike, dest_dir: PathLike) -> int:
    """
    Extract a gzip-compressed tar archive.

    Args:
        archive_path: Path to the ``.tar.gz`` file
        dest_dir: Destination directory

    Returns:
        Number of regular files written

    Raises:
        PathTraversalError: On the first entry escaping the destination
        ArchiveError: If the archive is corrupt
    """
    dest = Path(dest_dir)
    written = 0
    try:
        with tarfile.open(archive_path, mode="r:gz") as archive:
            for member in archive:
                _check_entry(member.name)
                target = dest / member.name

                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                elif member.isreg():
                    source = archive.extractfile(member)
                    if source is None:
                        continue
                    with source:
                        _write_stream(source, target, member.mode)
                    written += 1
                else:
                    logger.debug(f"Skipping non-regular tar entry {member.name}")

    except (tarfile.TarError, EOFError, zlib.error) as e:
        raise ArchiveError(f"failed to read tar archive {archive_path}", e) from e

    return written


####
##      ZIP
#####
def _zip_mode(info: zipfile.ZipInfo) -> Optional[int]:
    mode = info.external_attr >> 16
    if mode and stat.S_ISREG(mode):
        return mode
    return None


def extract_zip(archive_path: PathLike, dest_dir: PathLike) -> int:
    """
    Extract a zip archive.

    Args:
        archive_path: Path to the ``.zip`` file
        dest_dir: Destination directory

    Returns:
        Number of regular files written

    Raises:
        PathTraversalError: On the first entry escaping the destination
        ArchiveError: If the archive is corrupt
    """
    dest = Path(dest_dir)
    written = 0
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for info in archive.infolist():
                _check_entry(info.filename)
                target = dest / info.filename

                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                mode = info.external_attr >> 16
                if stat.S_IFMT(mode) and not stat.S_ISREG(mode):
                    logger.debug(f"Skipping non-regular zip entry {info.filename}")
                    continue

                with archive.open(info) as source:
                    _write_stream(source, target, _zip_mode(info))
                written += 1

    except zipfile.BadZipFile as e:
        raise ArchiveError(f"failed to read zip archive {archive_path}", e) from e

    return written


####
##      PKG (darwin)
#####
def extract_pkg(
    archive_path: PathLike,
    dest_dir: PathLike,
    platform_name: Optional[str] = None
) -> int:
    """
    Expand a macOS installer package and copy its payload.

    The package is expanded with ``pkgutil --expand-full`` into a temporary
    directory, whose ``Payload`` subtree is copied into ``dest_dir``. The
    temporary directory is always removed.

    Returns:
        Number of files copied from the payload
    """
    platform_name = platform_name if platform_name is not None else sys.platform
    if platform_name != "darwin":
        raise UnsupportedFormatError("extraction of pkg file is limited to darwin")

    source = Path(archive_path)
    if not source.exists():
        raise ArchiveError(f"unable to find {source}")

    with tempfile.TemporaryDirectory(prefix="hvm-pkg-") as temp_dir:
        expansion_dir = Path(temp_dir) / "expanded"
        try:
            result = subprocess.run(
                ["pkgutil", "--expand-full", str(source), str(expansion_dir)],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as e:
            raise ArchiveError("unable to run pkgutil", e) from e
        if result.returncode != 0:
            raise ArchiveError(result.stdout.strip() or f"pkgutil exited with status {result.returncode}")

        payload = expansion_dir / "Payload"
        if not payload.is_dir():
            raise ArchiveError(f"{source} has no Payload directory")

        copied = sum(1 for path in payload.rglob("*") if path.is_file())
        shutil.copytree(payload, dest_dir, dirs_exist_ok=True)

    return copied


####
##      DISPATCH
#####
def extract(
    archive_path: PathLike,
    dest_dir: PathLike,
    kind: Optional[ArchiveKind] = None,
    remove_archive: bool = False
) -> int:
    """
    Extract an archive, dispatching on its kind.

    Args:
        archive_path: Archive to extract
        dest_dir: Destination directory, created when missing
        kind: Archive kind; derived from the file name when omitted
        remove_archive: Delete the archive after a successful extraction

    Returns:
        Number of files written

    Raises:
        UnsupportedFormatError: If the archive kind is unknown
        PathTraversalError: If an entry escapes the destination
        ArchiveError: If extraction fails
    """
    if kind is None:
        kind = ArchiveKind.from_name(str(archive_path))
    if kind is None:
        raise UnsupportedFormatError("unknown archive format")

    dest = Path(dest_dir)
    dest.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Extracting {archive_path} ({kind.value}) to {dest}")

    if kind is ArchiveKind.TAR_GZ:
        count = extract_tar_gz(archive_path, dest)
    elif kind is ArchiveKind.ZIP:
        count = extract_zip(archive_path, dest)
    elif kind is ArchiveKind.PKG:
        count = extract_pkg(archive_path, dest)
    else:
        raise UnsupportedFormatError("unknown archive format")

    if remove_archive:
        Path(archive_path).unlink()

    logger.debug(f"Extracted {count} files from {archive_path}")
    return count


__all__ = [
    "is_unsafe_entry_name",
    "extract_tar_gz",
    "extract_zip",
    "extract_pkg",
    "extract",
]
