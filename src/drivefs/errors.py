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

"""Exception hierarchy for :mod:`drivefs`.

Exception hierarchy::

    DriveFsError
    ├── NullArgumentError (TypeError)
    │   ├── NullNameError
    │   └── NullChildError
    ├── InvalidNameError (ValueError)
    ├── PathNotFoundError (LookupError)
    ├── PathAlreadyExistsError (ValueError)
    │   └── DuplicateNameError
    ├── NotATextFileError (TypeError)
    └── IllegalOperationError (RuntimeError)
        ├── DriveNestingError
        └── DetachedPathError
"""

from __future__ import annotations


class DriveFsError(Exception):
    """Base class for all drivefs exceptions.

    Catch this to handle any failure raised by the filesystem model while
    letting unrelated Python exceptions propagate normally.

    Example::

        try:
            fs.move("C/Documents/note.txt", "D")
        except DriveFsError as e:
            logger.error("Move failed: %s", e)
    """


class NullArgumentError(DriveFsError, TypeError):
    """Raised when a required path, type, name, or content argument is ``None``."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"{argument} cannot be None.")
        self.argument = argument


class NullNameError(NullArgumentError):
    """Raised by name validation when the candidate name is ``None``."""

    def __init__(self, entity_label: str) -> None:
        super().__init__(f"{entity_label} name")
        self.entity_label = entity_label


class NullChildError(NullArgumentError):
    """Raised when ``None`` is passed to :meth:`Container.attach_child`."""

    def __init__(self) -> None:
        super().__init__("Child entity")


class InvalidNameError(DriveFsError, ValueError):
    """Raised when a name is empty or contains disallowed characters."""

    def __init__(self, message: str, *, name: object) -> None:
        super().__init__(message)
        self.name = name


class PathNotFoundError(DriveFsError, LookupError):
    """Raised when a path does not resolve to an existing entity or container.

    The default message is ``Path not found: <path>``; callers that need to
    distinguish source and destination lookups pass an explicit ``message``.
    """

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(message if message is not None else f"Path not found: {path}")
        self.path = path


class PathAlreadyExistsError(DriveFsError, ValueError):
    """Raised when creating an entity whose name collides with a sibling."""

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(
            message if message is not None else f"Path already exists for: {path}"
        )
        self.path = path


class DuplicateNameError(PathAlreadyExistsError):
    """Raised by :meth:`Container.attach_child` when the name is already taken."""

    def __init__(self, name: str, container_path: str) -> None:
        super().__init__(
            container_path,
            f"Entity with name: '{name}' already exists in: {container_path}",
        )
        self.name = name


class NotATextFileError(DriveFsError, TypeError):
    """Raised when text content is written to or read from a non text-file."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Not a text file: {path}")
        self.path = path


class IllegalOperationError(DriveFsError, RuntimeError):
    """Raised for structurally forbidden actions.

    Examples are creating a drive under a parent path, moving a drive, moving
    a container into its own subtree, and attach/detach consistency failures.
    """


class DriveNestingError(IllegalOperationError):
    """Raised when a Drive is attached as the child of any container."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Child entity cannot be a drive: {name}. Drives cannot be nested."
        )
        self.name = name


class DetachedPathError(IllegalOperationError):
    """Raised when the path of an entity without a parent chain is queried.

    Only observable between a detach and the following attach; a completed
    service call never leaves an entity in this state.
    """

    def __init__(self, name: str, entity_label: str) -> None:
        super().__init__(f"Path invalid for detached {entity_label.lower()}: {name}")
        self.name = name


__all__ = [
    "DetachedPathError",
    "DriveFsError",
    "DriveNestingError",
    "DuplicateNameError",
    "IllegalOperationError",
    "InvalidNameError",
    "NotATextFileError",
    "NullArgumentError",
    "NullChildError",
    "NullNameError",
    "PathAlreadyExistsError",
    "PathNotFoundError",
]
