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

"""Configuration loading for :class:`~drivefs.service.FileSystemService`."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import cast

import yaml

from ._validation import NAME_PATTERN
from .entities import DEFAULT_SEPARATOR

DEFAULT_CONFIG_PATH = Path("~/.config/drivefs/config.toml")

ENV_PATH_SEPARATOR = "DRIVEFS_PATH_SEPARATOR"
ENV_CHECK_INVARIANTS = "DRIVEFS_CHECK_INVARIANTS"

_FALSE_VALUES = frozenset({"", "0", "false", "off", "no"})

__all__ = ["DEFAULT_CONFIG_PATH", "ConfigError", "FileSystemConfig", "load_config"]


class ConfigError(ValueError):
    """Raised when the drivefs configuration is invalid."""


@dataclass(frozen=True, slots=True)
class FileSystemConfig:
    """Resolved settings for one filesystem instance.

    Attributes:
        path_separator: Separator between path segments. Must not contain any
            character that is legal in an entity name.
        check_invariants: Verify the tree invariants around every public
            service call, independently of ``DRIVEFS_DBC``.
    """

    path_separator: str = DEFAULT_SEPARATOR
    check_invariants: bool = False

    def __post_init__(self) -> None:
        _validate_separator(self.path_separator)


def load_config(
    path: Path | Mapping[str, object] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> FileSystemConfig:
    """Load and validate a :class:`FileSystemConfig`.

    Parameters
    ----------
    path:
        TOML or YAML file. ``None`` falls back to
        ``~/.config/drivefs/config.toml``, which may be absent. Tests may pass
        an in-memory mapping to skip file I/O.
    env:
        Environment mapping used for ``DRIVEFS_*`` overrides. Defaults to
        :data:`os.environ`.
    """

    env_map = os.environ if env is None else env

    if isinstance(path, Mapping):
        raw: dict[str, object] = dict(path)
    else:
        config_path = path if path is not None else DEFAULT_CONFIG_PATH.expanduser()
        raw = _load_config_file(config_path)

    config = _normalise_config(raw)
    config = _apply_environment_overrides(config=config, env=env_map)
    return _build_config(config)


def _load_config_file(path: Path) -> dict[str, object]:
    if not path.exists():
        if path == DEFAULT_CONFIG_PATH.expanduser():
            return {}
        msg = f"Configuration file not found: {path}"
        raise FileNotFoundError(msg)

    suffix = path.suffix.lower()
    data: object
    try:
        if suffix == ".toml" or not suffix:
            with path.open("rb") as handle:
                data = tomllib.load(handle)
        elif suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        else:
            msg = f"Unsupported configuration format: {path.suffix}"
            raise ConfigError(msg)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as error:
        msg = f"Configuration file could not be parsed: {path}: {error}"
        raise ConfigError(msg) from error

    if not isinstance(data, MutableMapping):
        msg = "Configuration file must contain a mapping at the root."
        raise ConfigError(msg)

    typed_data: dict[str, object] = {}
    for key, value in cast(MutableMapping[object, object], data).items():
        if not isinstance(key, str):
            msg = f"Configuration keys must be strings (got {key!r})."
            raise ConfigError(msg)
        typed_data[key] = value
    return typed_data


def _normalise_config(raw: Mapping[str, object]) -> dict[str, object]:
    config: dict[str, object] = {
        "path_separator": raw.get("path_separator") or raw.get("separator"),
        "check_invariants": raw.get("check_invariants"),
    }

    # [drivefs] table form, e.g. a section inside a larger pyproject-style file.
    section_obj = raw.get("drivefs")
    if isinstance(section_obj, Mapping):
        section = cast(Mapping[str, object], section_obj)
        if config["path_separator"] is None:
            config["path_separator"] = section.get("path_separator") or section.get(
                "separator"
            )
        if config["check_invariants"] is None:
            config["check_invariants"] = section.get("check_invariants")

    return config


def _apply_environment_overrides(
    *, config: dict[str, object], env: Mapping[str, str]
) -> dict[str, object]:
    if ENV_PATH_SEPARATOR in env:
        config["path_separator"] = env[ENV_PATH_SEPARATOR]
    if ENV_CHECK_INVARIANTS in env:
        config["check_invariants"] = (
            env[ENV_CHECK_INVARIANTS].strip().lower() not in _FALSE_VALUES
        )
    return config


def _build_config(config: Mapping[str, object]) -> FileSystemConfig:
    separator = config.get("path_separator")
    if separator is None:
        separator = DEFAULT_SEPARATOR
    if not isinstance(separator, str):
        msg = f"path_separator must be a string (got {separator!r})."
        raise ConfigError(msg)

    check_invariants = config.get("check_invariants")
    if check_invariants is None:
        check_invariants = False
    if not isinstance(check_invariants, bool):
        msg = f"check_invariants must be a boolean (got {check_invariants!r})."
        raise ConfigError(msg)

    return FileSystemConfig(
        path_separator=separator, check_invariants=check_invariants
    )


def _validate_separator(separator: object) -> None:
    if not isinstance(separator, str) or not separator:
        msg = "path_separator must be a non-empty string."
        raise ConfigError(msg)
    if any(NAME_PATTERN.fullmatch(char) for char in separator):
        msg = (
            f"path_separator {separator!r} must not contain letters, digits or '.'."
        )
        raise ConfigError(msg)
