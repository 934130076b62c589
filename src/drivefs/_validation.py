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

"""Entity name validation."""

from __future__ import annotations

import re
from typing import Final

from .errors import InvalidNameError, NullNameError
from .logging import StructuredLogger, get_logger

__all__ = ["NAME_PATTERN", "validate_entity_name"]

# ASCII letters, digits and dots.
NAME_PATTERN: Final[re.Pattern[str]] = re.compile(r"[a-zA-Z0-9.]+")

_logger: StructuredLogger = get_logger(__name__, context={"component": "validation"})


def validate_entity_name(name: str | None, entity_label: str) -> str:
    """Return ``name`` unchanged when it is a valid entity name.

    Args:
        name: Candidate name.
        entity_label: Human readable kind used in error messages, e.g. ``"Folder"``.

    Raises:
        NullNameError: If ``name`` is ``None``.
        InvalidNameError: If ``name`` is empty, not a string, or contains a
            character other than ASCII letters, digits and ``.``.
    """
    if name is None:
        _logger.error(
            "Entity name is None.",
            event="drivefs.validation.null_name",
            context={"entity": entity_label},
        )
        raise NullNameError(entity_label)

    if not isinstance(name, str):
        _logger.error(
            "Entity name is not a string.",
            event="drivefs.validation.invalid_name",
            context={"entity": entity_label, "name": repr(name)},
        )
        msg = f"{entity_label} name must be a string: {name!r}"
        raise InvalidNameError(msg, name=name)

    if not name:
        _logger.error(
            "Entity name is empty.",
            event="drivefs.validation.empty_name",
            context={"entity": entity_label},
        )
        raise InvalidNameError(f"{entity_label} name cannot be empty.", name=name)

    if NAME_PATTERN.fullmatch(name) is None:
        _logger.error(
            "Entity name is not alphanumeric.",
            event="drivefs.validation.invalid_name",
            context={"entity": entity_label, "name": name},
        )
        msg = f"{entity_label} name must be alphanumeric: {name}"
        raise InvalidNameError(msg, name=name)

    return name
