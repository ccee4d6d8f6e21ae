from pathlib import Path

import pytest

from hvm.infrastructure.config_loader import default_app_paths, load_config
from hvm.infrastructure.error_handler import ConfigurationError
from hvm.models import HvmConfig


def write_config(tmp_path, text):
    path = tmp_path / "config.toml"
    path.write_text(text)
    return path


def test_defaults_without_file_or_env(tmp_path):
    config = load_config(tmp_path / "missing.toml", environ={})
    assert config == HvmConfig()


def test_values_from_file(tmp_path):
    path = write_config(tmp_path, 'numTagsToDisplay = 10\nsortAscending = true\ngithubToken = "abc"\n')

    config = load_config(path, environ={})

    assert config.num_tags_to_display == 10
    assert config.sort_ascending is True
    assert config.github_token == "abc"


def test_environment_overrides_file(tmp_path):
    path = write_config(tmp_path, "numTagsToDisplay = 10\nsortAscending = true\n")
    environ = {
        "HVM_NUMTAGSTODISPLAY": "-1",
        "HVM_SORTASCENDING": "false",
        "HVM_GITHUBTOKEN": "from-env",
        "HVM_UNRELATED": "ignored",
        "PATH": "/usr/bin",
    }

    config = load_config(path, environ=environ)

    assert config.num_tags_to_display == -1
    assert config.sort_ascending is False
    assert config.github_token == "from-env"


def test_verbose_flag_is_carried(tmp_path):
    assert load_config(tmp_path / "missing.toml", environ={}, verbose=True).verbose is True


@pytest.mark.parametrize("value", ["0", "ten", "1.5"])
def test_invalid_num_tags_from_env(tmp_path, value):
    with pytest.raises(ConfigurationError, match="numtagstodisplay|NUMTAGSTODISPLAY"):
        load_config(tmp_path / "missing.toml", environ={"HVM_NUMTAGSTODISPLAY": value})


def test_invalid_bool_from_env(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.toml", environ={"HVM_SORTASCENDING": "maybe"})


def test_invalid_types_in_file(tmp_path):
    path = write_config(tmp_path, "numTagsToDisplay = true\n")
    with pytest.raises(ConfigurationError):
        load_config(path, environ={})


def test_unparsable_file(tmp_path):
    path = write_config(tmp_path, "numTagsToDisplay = = 3\n")
    with pytest.raises(ConfigurationError, match="unable to parse"):
        load_config(path, environ={})


def test_default_app_paths(tmp_path):
    paths = default_app_paths(tmp_path)

    assert paths.working_dir == Path(tmp_path)
    assert paths.dot_file_path == Path(tmp_path) / ".hvm"
    assert "hvm" in paths.cache_dir.parts
    assert paths.config_file.name == "config.toml"
