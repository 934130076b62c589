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

"""Path splitting and resolution.

A path is ``drive[<sep>segment]*``. Segments are matched exactly and
case-sensitively against child names; there is no ``.``/``..`` handling and
no normalisation of repeated separators, so ``"C//x"`` carries an empty
segment and never resolves. Trailing separators are ignored: ``"C/Documents/"``
names the same folder as ``"C/Documents"``.

The separator used for splitting is the one passed by the caller. A
:class:`~drivefs.Drive` only uses its own ``separator`` to derive paths, and
the service creates drives with its configured separator so the two agree.

Functions:
    split_path: Split a path into its drive name and remaining segments
    join_path: Join segments back into a path
    resolve_entity: Walk a path from a registered drive to a live entity
    resolve_container: Same walk, filtered to containers
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .entities import DEFAULT_SEPARATOR, Container, Drive, Entity
from .logging import StructuredLogger, get_logger

__all__ = [
    "join_path",
    "resolve_container",
    "resolve_entity",
    "split_path",
]

_logger: StructuredLogger = get_logger(__name__, context={"component": "resolver"})


def split_path(path: str, separator: str = DEFAULT_SEPARATOR) -> list[str]:
    """Split ``path`` on ``separator``, dropping trailing empty segments.

    Empty segments elsewhere are kept, so ``"C//x"`` never resolves.

    Examples:
        >>> split_path("C/Documents/note.txt")
        ['C', 'Documents', 'note.txt']
        >>> split_path("C/Documents/")
        ['C', 'Documents']
        >>> split_path("")
        []
    """
    if not path:
        return []
    parts = path.split(separator)
    while len(parts) > 1 and not parts[-1]:
        parts.pop()
    return parts


def join_path(segments: Sequence[str], separator: str = DEFAULT_SEPARATOR) -> str:
    """Inverse of :func:`split_path`.

    Examples:
        >>> join_path(["C", "Documents"])
        'C/Documents'
    """
    return separator.join(segments)


def resolve_entity(
    drives: Mapping[str, Drive],
    path: str,
    separator: str = DEFAULT_SEPARATOR,
) -> Entity | None:
    """Return the entity at ``path`` or ``None`` when it does not resolve.

    Resolution misses are not errors: an empty path, an unregistered drive,
    a missing segment, and a leaf in the middle of the path all yield ``None``.
    """
    segments = split_path(path, separator)
    if not segments:
        _logger.debug(
            "Empty path does not resolve.",
            event="drivefs.resolve.miss",
            context={"path": path, "reason": "empty"},
        )
        return None

    drive_name, *rest = segments
    current: Entity | None = drives.get(drive_name)
    if current is None:
        _logger.debug(
            "Drive is not registered.",
            event="drivefs.resolve.miss",
            context={"path": path, "reason": "unknown_drive", "drive": drive_name},
        )
        return None

    for segment in rest:
        if not isinstance(current, Container):
            _logger.debug(
                "Path descends through a non-container.",
                event="drivefs.resolve.miss",
                context={"path": path, "reason": "not_a_container", "at": current.name},
            )
            return None
        current = current.get_child(segment)
        if current is None:
            _logger.debug(
                "Path segment not found.",
                event="drivefs.resolve.miss",
                context={"path": path, "reason": "missing_segment", "segment": segment},
            )
            return None

    return current


def resolve_container(
    drives: Mapping[str, Drive],
    path: str,
    separator: str = DEFAULT_SEPARATOR,
) -> Container | None:
    """Return the container at ``path`` or ``None``.

    Resolves like :func:`resolve_entity` and discards non-container results.
    """
    entity = resolve_entity(drives, path, separator)
    return entity if isinstance(entity, Container) else None
