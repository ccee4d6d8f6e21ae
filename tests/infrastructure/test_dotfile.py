import pytest

from hvm.infrastructure.dotfile import DotFile
from hvm.infrastructure.error_handler import EmptyFileError, InvalidFormatError


@pytest.fixture
def dot_file(tmp_path):
    return DotFile(tmp_path / ".hvm")


def test_absent_file_reads_empty(dot_file):
    assert not dot_file.exists()
    assert dot_file.read() == ""


def test_write_then_read(dot_file):
    dot_file.write("v0.120.4")
    assert dot_file.exists()
    assert dot_file.read() == "v0.120.4"


def test_surrounding_whitespace_is_ignored(dot_file):
    dot_file.path.write_text("\n  v0.120.4 \n")
    assert dot_file.read() == "v0.120.4"


@pytest.mark.parametrize("content", ["", "   ", "\n\n"])
def test_blank_file_is_empty_error(dot_file, content):
    dot_file.path.write_text(content)
    with pytest.raises(EmptyFileError, match="is empty"):
        dot_file.read()


@pytest.mark.parametrize("content", ["1.2.3", "v1.2", "v1", "latest", "v1.2.3+build"])
def test_non_canonical_content_is_invalid(dot_file, content):
    dot_file.path.write_text(content)
    with pytest.raises(InvalidFormatError) as excinfo:
        dot_file.read()
    assert 'run "hvm use"' in str(excinfo.value)
    assert 'or "hvm disable"' in str(excinfo.value)


def test_write_is_verbatim(dot_file):
    dot_file.write("not-a-tag")
    assert dot_file.path.read_text() == "not-a-tag"


def test_remove(dot_file):
    assert dot_file.remove() is False
    dot_file.write("v0.120.4")
    assert dot_file.remove() is True
    assert not dot_file.exists()


def test_undecodable_content_is_invalid(dot_file):
    dot_file.path.write_bytes(b"\xff\xfev0.120.0")
    with pytest.raises(InvalidFormatError) as excinfo:
        dot_file.read()
    assert 'run "hvm use"' in str(excinfo.value)
    assert isinstance(excinfo.value.original_error, UnicodeDecodeError)
