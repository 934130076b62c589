# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from drivefs import ConfigError, FileSystemConfig, load_config
from drivefs.config import (
    DEFAULT_CONFIG_PATH,
    ENV_CHECK_INVARIANTS,
    ENV_PATH_SEPARATOR,
)


def test_defaults() -> None:
    config = FileSystemConfig()

    assert config.path_separator == "/"
    assert config.check_invariants is False


def test_load_from_mapping() -> None:
    config = load_config({"path_separator": "\\", "check_invariants": True}, env={})

    assert config == FileSystemConfig(path_separator="\\", check_invariants=True)


def test_load_from_nested_section() -> None:
    config = load_config({"drivefs": {"separator": ":"}}, env={})

    assert config.path_separator == ":"


def test_load_toml_file(tmp_path: Path) -> None:
    path = tmp_path / "drivefs.toml"
    path.write_text('path_separator = "|"\ncheck_invariants = true\n', encoding="utf-8")

    config = load_config(path, env={})

    assert config.path_separator == "|"
    assert config.check_invariants is True


def test_load_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "drivefs.yaml"
    path.write_text("drivefs:\n  path_separator: '>'\n", encoding="utf-8")

    assert load_config(path, env={}).path_separator == ">"


def test_empty_yaml_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "drivefs.yml"
    path.write_text("", encoding="utf-8")

    assert load_config(path, env={}) == FileSystemConfig()


def test_environment_overrides_file_values() -> None:
    config = load_config(
        {"path_separator": "|"},
        env={ENV_PATH_SEPARATOR: "\\", ENV_CHECK_INVARIANTS: "yes"},
    )

    assert config.path_separator == "\\"
    assert config.check_invariants is True


@pytest.mark.parametrize("value", ["", "0", "false", "OFF", "no"])
def test_environment_false_values(value: str) -> None:
    config = load_config({"check_invariants": True}, env={ENV_CHECK_INVARIANTS: value})

    assert config.check_invariants is False


def test_missing_default_file_gives_defaults(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    assert not DEFAULT_CONFIG_PATH.expanduser().exists()
    assert load_config(env={}) == FileSystemConfig()


def test_missing_explicit_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.toml", env={})


def test_unsupported_suffix_raises(tmp_path: Path) -> None:
    path = tmp_path / "drivefs.ini"
    path.write_text("[drivefs]\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Unsupported configuration format"):
        load_config(path, env={})


def test_malformed_toml_raises(tmp_path: Path) -> None:
    path = tmp_path / "drivefs.toml"
    path.write_text("path_separator = \n", encoding="utf-8")

    with pytest.raises(ConfigError, match="could not be parsed"):
        load_config(path, env={})


def test_non_mapping_root_raises(tmp_path: Path) -> None:
    path = tmp_path / "drivefs.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping at the root"):
        load_config(path, env={})


@pytest.mark.parametrize("separator", ["", "a", "x/", ".", "9"])
def test_separator_must_not_overlap_name_charset(separator: str) -> None:
    with pytest.raises(ConfigError):
        FileSystemConfig(path_separator=separator)


def test_non_string_separator_raises() -> None:
    with pytest.raises(ConfigError, match="path_separator must be a string"):
        load_config({"path_separator": 7}, env={})


def test_non_boolean_check_invariants_raises() -> None:
    with pytest.raises(ConfigError, match="check_invariants must be a boolean"):
        load_config({"check_invariants": "sometimes"}, env={})


def test_config_error_is_value_error() -> None:
    assert issubclass(ConfigError, ValueError)
