"""
Per-directory pin file holding the tag to use in that directory.
"""

from pathlib import Path
from typing import Union

from ..core import semver
from ..models.config import APP_NAME
from .error_handler import EmptyFileError, InvalidFormatError


class DotFile:
    """
    Read and write the pin file of one working directory.

    An absent file means version management is disabled there. A present
    file must hold exactly one canonical semver tag.
    """

    def __init__(self, path: Union[str, Path], app_name: str = APP_NAME):
        self.path = Path(path)
        self.app_name = app_name

    @property
    def file_name(self) -> str:
        return self.path.name

    @property
    def fix_hint(self) -> str:
        return (
            f'run "{self.app_name} use" to select a version, '
            f'or "{self.app_name} disable" to remove the file'
        )

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        """
        Return the pinned tag, or an empty string when the file is absent.

        Raises:
            EmptyFileError: If the file is blank
            InvalidFormatError: If the content is not a canonical tag
        """
        if not self.path.exists():
            return ""

        try:
            content = self.path.read_text(encoding="utf-8").strip()
        except UnicodeDecodeError as e:
            raise InvalidFormatError(
                f"the {self.file_name} file in the current directory has an invalid format: {self.fix_hint}", e
            ) from e
        if not content:
            raise EmptyFileError(
                f"the {self.file_name} file in the current directory is empty: {self.fix_hint}"
            )
        if semver.canonical(content) != content:
            raise InvalidFormatError(
                f"the {self.file_name} file in the current directory has an invalid format: {self.fix_hint}"
            )
        return content

    def write(self, tag: str) -> None:
        """Write ``tag`` verbatim; validation happens on read."""

        self.path.write_text(tag, encoding="utf-8")

    def remove(self) -> bool:
        """Delete the file. Returns False when it did not exist."""

        if not self.path.exists():
            return False
        self.path.unlink()
        return True


__all__ = [
    "DotFile",
]
