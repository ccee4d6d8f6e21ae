import pytest
import httpx
import requests

from hvm.infrastructure.error_handler import (
    HvmError,
    NetworkError,
    RateLimitError,
    AuthenticationError,
    TagNotFoundError,
    PathTraversalError,
    ArchiveError,
    EmptyFileError,
    DotFileError,
    handle_api_error,
)


# ---- Helpers ---------------------------------------------------------------

class FakeGithubException(Exception):
    def __init__(self, status: int, message: str = ""):
        super().__init__(message or f"status={status}")
        self.status = status


@pytest.fixture
def fake_github(monkeypatch):
    from hvm.infrastructure import error_handler as eh
    monkeypatch.setattr(eh, "GithubException", FakeGithubException, raising=True)


# ---- Exception classes -----------------------------------------------------

def test_hvm_error_message_and_original():
    original = ValueError("boom")
    err = HvmError("failed", original)
    assert err.message == "failed"
    assert err.original_error is original
    assert "failed" in str(err)
    assert "Original: boom" in str(err)


@pytest.mark.parametrize("exc_cls", [NetworkError, RateLimitError, TagNotFoundError, EmptyFileError])
def test_specific_errors_store_message(exc_cls):
    err = exc_cls("msg")
    assert err.message == "msg"
    assert str(err) == "msg"


def test_error_hierarchy():
    assert issubclass(RateLimitError, NetworkError)
    assert issubclass(PathTraversalError, ArchiveError)
    assert issubclass(EmptyFileError, DotFileError)
    assert issubclass(DotFileError, HvmError)


# ---- handle_api_error decorator -------------------------------------------

def test_handle_api_error_github_rate_limit(fake_github):
    @handle_api_error
    def fn():
        raise FakeGithubException(403, "API rate limit exceeded")

    with pytest.raises(RateLimitError):
        fn()


@pytest.mark.parametrize("status", [401, 403])
def test_handle_api_error_github_authentication(fake_github, status):
    @handle_api_error
    def fn():
        raise FakeGithubException(status, "Bad credentials")

    with pytest.raises(AuthenticationError):
        fn()


def test_handle_api_error_github_not_found(fake_github):
    @handle_api_error
    def fn():
        raise FakeGithubException(404, "missing")

    with pytest.raises(NetworkError, match="not found"):
        fn()


def test_handle_api_error_github_other(fake_github):
    @handle_api_error
    def fn():
        raise FakeGithubException(500, "oops")

    with pytest.raises(NetworkError, match="status 500"):
        fn()


def test_handle_api_error_httpx():
    @handle_api_error
    def fn():
        raise httpx.ConnectError("conn reset")

    with pytest.raises(NetworkError) as excinfo:
        fn()
    assert isinstance(excinfo.value.original_error, httpx.ConnectError)


def test_handle_api_error_requests():
    @handle_api_error
    def fn():
        raise requests.exceptions.ConnectionError("network down")

    with pytest.raises(NetworkError):
        fn()


def test_handle_api_error_passes_hvm_errors_unchanged():
    original = TagNotFoundError("tag not found: v9")

    @handle_api_error
    def fn():
        raise original

    with pytest.raises(TagNotFoundError) as excinfo:
        fn()
    assert excinfo.value is original


def test_handle_api_error_leaves_unrelated_errors():
    @handle_api_error
    def fn():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        fn()


def test_handle_api_error_returns_value():
    @handle_api_error
    def fn(x):
        return x * 2

    assert fn(21) == 42
