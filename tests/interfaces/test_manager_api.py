import os
from unittest.mock import MagicMock

import pytest

from hvm.infrastructure.error_handler import (
    DotFileMissingError, InvalidFormatError, InvalidSpecifierError, TagNotFoundError
)
from hvm.interfaces.api import HugoVersionManager
from hvm.models import AcquisitionResult, AppPaths, Cancelled, HvmConfig, Platform, Selected
from hvm.services import ReleaseRepository


TAGS = ["v0.121.0", "v0.120.4", "v0.120.3", "v0.119.0", "v0.54.0"]


# --- Test Fixtures for Setup ---

@pytest.fixture
def paths(tmp_path):
    return AppPaths(cache_dir=tmp_path / "cache", working_dir=tmp_path / "site")


@pytest.fixture
def repository():
    repo = ReleaseRepository(client=MagicMock(), fetch=False)
    repo.set_tags_for_testing(TAGS, TAGS[0])
    return repo


@pytest.fixture
def manager(paths, repository):
    paths.working_dir.mkdir(parents=True)
    instance = HugoVersionManager(
        config=HvmConfig(num_tags_to_display=3),
        paths=paths,
        repository=repository,
        download_service=MagicMock(),
        platform=Platform("linux", "amd64")
    )

    def fake_acquire(tag):
        instance.cache.tag_dir(tag).mkdir(parents=True, exist_ok=True)
        instance.cache.exec_path(tag).write_bytes(tag.encode())
        return AcquisitionResult(tag=tag, exec_path=instance.cache.exec_path(tag), cache_hit=False)

    instance._orchestrator = MagicMock()
    instance._orchestrator.acquire.side_effect = fake_acquire
    return instance


# --- Test Cases ---

class TestResolution:

    def test_resolve_defaults_to_latest(self, manager):
        assert manager.resolve() == "v0.121.0"

    def test_resolve_partial(self, manager):
        assert manager.resolve("0.120") == "v0.120.4"

    def test_resolve_invalid(self, manager):
        with pytest.raises(InvalidSpecifierError):
            manager.resolve("0.120.")

    def test_selectable_tags_and_choice(self, manager):
        display = manager.selectable_tags()

        assert display == ["v0.121.0", "v0.120.4", "v0.120.3"]
        assert manager.choose(display, "2") == Selected("v0.120.4")
        assert manager.choose(display, "") == Cancelled()

    def test_render_choices_flags_cached(self, manager):
        manager.use("v0.120.4")
        table = manager.render_choices(manager.selectable_tags())
        assert "v0.120.4 [cached]" in table
        assert "v0.121.0 [cached]" not in table


class TestVersionManagement:

    def test_use_pins_version(self, manager):
        result = manager.use("0.120")

        assert result.tag == "v0.120.4"
        assert manager.dot_file.read() == "v0.120.4"
        assert manager.exec_path_cached() == manager.cache.exec_path("v0.120.4")

    def test_use_dot_file(self, manager):
        manager.dot_file.write("v0.119.0")

        result = manager.use(use_dot_file=True)

        assert result.tag == "v0.119.0"
        manager._orchestrator.acquire.assert_called_once_with("v0.119.0")

    def test_use_dot_file_missing(self, manager):
        with pytest.raises(DotFileMissingError):
            manager.use(use_dot_file=True)

    def test_use_dot_file_unknown_tag(self, manager):
        manager.dot_file.write("v0.99.0")

        with pytest.raises(TagNotFoundError, match="v0.99.0"):
            manager.use(use_dot_file=True)

    def test_use_dot_file_invalid(self, manager):
        manager.dot_file.write("0.120")

        with pytest.raises(InvalidFormatError):
            manager.use(use_dot_file=True)

    def test_install_and_remove(self, manager):
        manager.install("0.119")

        assert manager.cache.default_exec_path.read_bytes() == b"v0.119.0"
        assert manager.remove() is True
        assert manager.remove() is False

    def test_disable(self, manager):
        manager.use()
        assert manager.disable() is True
        assert manager.exec_path() is None
        assert manager.disable() is False

    def test_clean_keeps_default(self, manager):
        manager.install("0.119")
        manager.use("0.120")

        freed = manager.clean()

        assert freed == len(b"v0.119.0") + len(b"v0.120.4")
        assert manager.cache.cached_tags() == []
        assert manager.cache.default_exec_path.exists()

    def test_default_dir_on_path(self, manager):
        default_dir = str(manager.cache.default_dir)
        assert manager.default_dir_on_path({"PATH": os.pathsep.join(["/usr/bin", default_dir])})
        assert not manager.default_dir_on_path({"PATH": "/usr/bin"})


class TestStatus:

    def test_status_unmanaged(self, manager):
        report = manager.status()

        assert report.is_managed is False
        assert report.exec_path is None
        assert report.exec_cached is False
        assert report.cached_tags == []

    def test_status_managed(self, manager):
        manager.use("0.120")
        manager.install("0.119")

        report = manager.status()

        assert report.version == "v0.120.4"
        assert report.exec_cached is True
        assert report.cached_tags == ["v0.120.4", "v0.119.0"]
        assert report.cache_size == len(b"v0.120.4") + len(b"v0.119.0")

    def test_exec_path_when_not_cached(self, manager):
        manager.dot_file.write("v0.120.3")

        assert manager.exec_path() == manager.cache.exec_path("v0.120.3")
        assert manager.exec_path_cached() is None


class TestReset:

    def test_reset_removes_pin_config_and_cache(self, tmp_path, repository):
        paths = AppPaths(
            cache_dir=tmp_path / "cache",
            working_dir=tmp_path / "site",
            config_file=tmp_path / "config" / "config.toml"
        )
        paths.working_dir.mkdir()
        paths.config_file.parent.mkdir()
        paths.config_file.write_text("numTagsToDisplay = 10\n")

        manager = HugoVersionManager(
            paths=paths,
            repository=repository,
            download_service=MagicMock(),
            platform=Platform("linux", "amd64")
        )
        manager.cache.tag_dir("v0.120.4").mkdir(parents=True)
        manager.cache.exec_path("v0.120.4").write_bytes(b"bin")
        manager.cache.install_default("v0.120.4")
        manager.dot_file.write("v0.120.4")

        manager.reset()

        assert not manager.dot_file.exists()
        assert not paths.config_file.parent.exists()
        assert not paths.cache_dir.exists()
        assert paths.working_dir.is_dir()

    def test_reset_when_nothing_exists(self, manager):
        manager.reset()
        assert not manager.cache.cache_dir.exists()
