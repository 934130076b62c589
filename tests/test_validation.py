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

"""Tests for entity name validation."""

from __future__ import annotations

import string

import pytest
from hypothesis import given, settings, strategies as st

from drivefs import (
    InvalidNameError,
    NullArgumentError,
    NullNameError,
    validate_entity_name,
)

_NAME_ALPHABET = string.ascii_letters + string.digits + "."


class TestValidateEntityName:
    def test_returns_name_unchanged(self) -> None:
        assert validate_entity_name("note.txt", "Text File") == "note.txt"

    def test_allows_digits_and_dots(self) -> None:
        assert validate_entity_name("v1.2.3", "Folder") == "v1.2.3"

    def test_none_raises_null_name(self) -> None:
        with pytest.raises(NullNameError, match="Folder name cannot be None"):
            validate_entity_name(None, "Folder")

    def test_null_name_is_null_argument_and_type_error(self) -> None:
        with pytest.raises(NullArgumentError):
            validate_entity_name(None, "Drive")
        with pytest.raises(TypeError):
            validate_entity_name(None, "Drive")

    def test_empty_raises_invalid_name(self) -> None:
        with pytest.raises(InvalidNameError, match="Drive name cannot be empty"):
            validate_entity_name("", "Drive")

    @pytest.mark.parametrize(
        "name", ["my folder", "a/b", "a\\b", "under_score", "dash-name", "café", "x\n"]
    )
    def test_disallowed_characters_raise(self, name: str) -> None:
        with pytest.raises(InvalidNameError, match="must be alphanumeric") as exc_info:
            validate_entity_name(name, "Folder")
        assert exc_info.value.name == name

    def test_non_string_raises_invalid_name(self) -> None:
        with pytest.raises(InvalidNameError):
            validate_entity_name(42, "Folder")  # type: ignore[arg-type]

    def test_invalid_name_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_entity_name("bad name", "Folder")


@given(st.text(alphabet=_NAME_ALPHABET, min_size=1, max_size=40))
@settings(max_examples=100)
def test_names_from_allowed_alphabet_are_accepted(name: str) -> None:
    assert validate_entity_name(name, "Folder") == name


@given(
    st.text(alphabet=_NAME_ALPHABET, max_size=10),
    st.characters(exclude_characters=_NAME_ALPHABET),
    st.text(alphabet=_NAME_ALPHABET, max_size=10),
)
@settings(max_examples=100)
def test_any_disallowed_character_is_rejected(
    prefix: str, bad: str, suffix: str
) -> None:
    with pytest.raises(InvalidNameError):
        validate_entity_name(prefix + bad + suffix, "Folder")
