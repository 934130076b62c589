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

"""Filesystem service orchestrating create, delete, move, and write.

Example usage::

    from drivefs import EntityType, FileSystemService

    fs = FileSystemService()
    fs.create(EntityType.DRIVE, "C")
    fs.create(EntityType.FOLDER, "Documents", "C")
    note = fs.create(EntityType.TEXT_FILE, "note.txt", "C/Documents")
    fs.write_to_file(note.path, "hi")
    fs.move("C/Documents/note.txt", "C")
    assert fs.read_file("C/note.txt") == "hi"

Each service instance owns its drive registry, so independent filesystems can
coexist in one process. Instances are not thread-safe; see
:class:`~drivefs.SynchronizedFileSystemService`.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from ._path import resolve_container, resolve_entity
from ._validation import validate_entity_name
from .config import FileSystemConfig
from .dbc import ContractResult, ensure, invariant, require
from .entities import (
    Container,
    Drive,
    Entity,
    EntityType,
    Folder,
    TextFile,
    ZipFile,
)
from .errors import (
    DriveFsError,
    IllegalOperationError,
    NotATextFileError,
    NullArgumentError,
    PathAlreadyExistsError,
    PathNotFoundError,
)
from .logging import StructuredLogger, get_logger

__all__ = ["FileSystemService"]

_logger: StructuredLogger = get_logger(__name__, context={"component": "service"})


def _iter_tree(container: Container) -> Iterator[tuple[Container, str, Entity]]:
    for key, child in container.children.items():
        yield container, key, child
        if isinstance(child, Container):
            yield from _iter_tree(child)


def _tree_is_consistent(service: FileSystemService) -> ContractResult:
    """Check the structural invariants of every registered drive."""
    seen: set[int] = set()
    for drive_name, drive in service.drives.items():
        if drive.name != drive_name:
            return False, f"drive {drive.name!r} registered as {drive_name!r}"
        if drive.parent is not None:
            return False, f"drive {drive_name!r} has a parent"
        for holder, key, child in _iter_tree(drive):
            if key != child.name:
                return False, f"child {child.name!r} stored under {key!r}"
            if isinstance(child, Drive):
                return False, f"drive {key!r} nested in {holder.name!r}"
            if child.parent is not holder:
                return False, f"{key!r} does not point back at {holder.name!r}"
            if id(child) in seen:
                return False, f"{key!r} is held by more than one container"
            seen.add(id(child))
    return True


def _created_entity_resolves(
    service: FileSystemService, *args: object, result: Entity, **kwargs: object
) -> ContractResult:
    return service.find(result.path) is result, result.path


@invariant(_tree_is_consistent, force_attr="_check_invariants")
class FileSystemService:
    """In-memory namespace of drives, folders, text files, and zip files.

    All operations take textual paths of the form ``drive[<sep>name]*`` and
    either complete fully or raise a :class:`~drivefs.DriveFsError`.
    """

    def __init__(self, config: FileSystemConfig | None = None) -> None:
        self._config = config if config is not None else FileSystemConfig()
        self._check_invariants = self._config.check_invariants
        self._drives: dict[str, Drive] = {}

    @property
    def config(self) -> FileSystemConfig:
        return self._config

    @property
    def separator(self) -> str:
        return self._config.path_separator

    @property
    def drives(self) -> Mapping[str, Drive]:
        """Read-only view of the registered drives keyed by name."""
        return MappingProxyType(self._drives)

    # --- Resolution ---

    def find(self, path: str) -> Entity | None:
        """Return the entity at ``path``, or ``None`` when it does not resolve."""
        if path is None:
            raise NullArgumentError("Path")
        return resolve_entity(self._drives, path, self.separator)

    def find_container(self, path: str) -> Container | None:
        """Return the container at ``path``, or ``None`` for misses and leaves."""
        if path is None:
            raise NullArgumentError("Path")
        return resolve_container(self._drives, path, self.separator)

    def exists(self, path: str) -> bool:
        return self.find(path) is not None

    # --- Mutations ---

    @ensure(_created_entity_resolves)
    def create(
        self,
        entity_type: EntityType,
        name: str,
        parent_path: str | None = None,
    ) -> Entity:
        """Create an entity and return it.

        Drives are created without a parent path. Every other kind needs the
        path of an existing container.

        Raises:
            NullArgumentError: If ``entity_type`` is ``None``.
            NullNameError: If ``name`` is ``None``.
            InvalidNameError: If ``name`` is empty or not alphanumeric.
            IllegalOperationError: If a drive is given a parent path, or the
                entity type is not supported.
            PathNotFoundError: If a non-drive has no parent path or the
                parent path is not a container.
            PathAlreadyExistsError: If the name is already taken.
        """
        _logger.info(
            "Creating entity.",
            event="drivefs.create",
            context={
                "name": name,
                "entity_type": getattr(entity_type, "name", entity_type),
                "parent_path": parent_path,
            },
        )
        if entity_type is None:
            raise NullArgumentError("Entity type")
        if not isinstance(entity_type, EntityType):
            raise IllegalOperationError(f"Unsupported entity type: {entity_type!r}")
        _ = validate_entity_name(name, entity_type.display_name)

        if entity_type is EntityType.DRIVE:
            return self._create_drive(name, parent_path)

        if not parent_path:
            _logger.error(
                "Parent path must be specified for non-drive entities.",
                event="drivefs.create.rejected",
                context={"name": name, "reason": "missing_parent_path"},
            )
            raise PathNotFoundError(
                "", "Parent path must be specified for non-drive entities."
            )
        return self._create_child(entity_type, name, parent_path)

    def _create_drive(self, name: str, parent_path: str | None) -> Drive:
        if parent_path:
            _logger.error(
                "Drive cannot have a parent path.",
                event="drivefs.create.rejected",
                context={"name": name, "parent_path": parent_path},
            )
            raise IllegalOperationError("Drive cannot have parent path.")
        if name in self._drives:
            _logger.error(
                "Drive already exists.",
                event="drivefs.create.rejected",
                context={"name": name, "reason": "duplicate_drive"},
            )
            raise PathAlreadyExistsError(name + self.separator + "Drive")

        drive = Drive(name, separator=self.separator)
        self._drives[name] = drive
        return drive

    def _create_child(
        self, entity_type: EntityType, name: str, parent_path: str
    ) -> Entity:
        parent = self.find_container(parent_path)
        if parent is None:
            _logger.error(
                "Parent path not found or is not a container.",
                event="drivefs.create.rejected",
                context={"name": name, "parent_path": parent_path},
            )
            raise PathNotFoundError(
                parent_path,
                f"Parent path not found or is not a container: {parent_path}",
            )
        if name in parent:
            _logger.error(
                "Entity already exists in parent.",
                event="drivefs.create.rejected",
                context={"name": name, "parent_path": parent_path},
            )
            raise PathAlreadyExistsError(parent.path + self.separator + name)

        entity: Entity
        match entity_type:
            case EntityType.FOLDER:
                entity = Folder(name)
            case EntityType.TEXT_FILE:
                entity = TextFile(name, "")
            case EntityType.ZIP_FILE:
                entity = ZipFile(name)
            case _:
                raise IllegalOperationError(f"Unsupported entity type: {entity_type}")
        parent.attach_child(entity)
        return entity

    def delete(self, path: str) -> None:
        """Delete the entity at ``path`` together with its subtree.

        Deleting a drive unregisters it.

        Raises:
            NullArgumentError: If ``path`` is ``None``.
            PathNotFoundError: If ``path`` does not resolve.
            IllegalOperationError: If the entity cannot be removed from its
                parent.
        """
        _logger.info("Deleting entity.", event="drivefs.delete", context={"path": path})
        entity = self._require_entity(path)

        if isinstance(entity, Drive):
            del self._drives[entity.name]
            return

        parent = entity.parent
        if parent is None:
            _logger.error(
                "Entity has no parent to be deleted from.",
                event="drivefs.delete.rejected",
                context={"path": path},
            )
            raise IllegalOperationError(f"Entity: {path} cannot be deleted from parent")
        if not parent.detach_child(entity.name):
            _logger.error(
                "Failed to remove entity from parent.",
                event="drivefs.delete.rejected",
                context={"path": path, "parent": parent.path},
            )
            raise IllegalOperationError(
                f"Failed to remove entity: {path} from parent: {parent.path}"
            )

    def move(self, source_path: str, destination_parent_path: str) -> None:
        """Move the entity at ``source_path`` into another container.

        Moving an entity into the container that already holds it does
        nothing. A failed move leaves the entity where it was.

        Raises:
            NullArgumentError: If either path is ``None``.
            PathNotFoundError: If the source does not resolve, or the
                destination does not resolve to a container.
            IllegalOperationError: If the source is a drive, the destination
                lies inside the source, or the destination already holds an
                entity with the source's name.
        """
        _logger.info(
            "Moving entity.",
            event="drivefs.move",
            context={"source": source_path, "destination": destination_parent_path},
        )
        if source_path is None:
            raise NullArgumentError("Source path")
        if destination_parent_path is None:
            raise NullArgumentError("Destination path")

        source = self.find(source_path)
        if source is None:
            self._reject_move(source_path, destination_parent_path, "source_not_found")
            raise PathNotFoundError(
                source_path, f"Source path not found: {source_path}"
            )
        destination = self.find_container(destination_parent_path)
        if destination is None:
            self._reject_move(
                source_path, destination_parent_path, "destination_not_found"
            )
            raise PathNotFoundError(
                destination_parent_path,
                f"Destination path not found: {destination_parent_path}",
            )
        if isinstance(source, Drive):
            self._reject_move(source_path, destination_parent_path, "source_is_drive")
            raise IllegalOperationError("Cannot move a Drive.")

        source_parent = source.parent
        if source_parent is None:
            self._reject_move(source_path, destination_parent_path, "orphaned_source")
            raise IllegalOperationError(
                f"Source entity: {source_path} has no parent and cannot be moved."
            )
        if source_parent.path == destination.path:
            _logger.info(
                "Source already in destination; nothing to move.",
                event="drivefs.move.noop",
                context={"source": source_path, "destination": destination_parent_path},
            )
            return

        self._perform_move(source, source_parent, destination)

    @require(
        lambda self, entity, source_parent, destination: (
            entity.parent is source_parent
        )
    )
    def _perform_move(
        self, entity: Entity, source_parent: Container, destination: Container
    ) -> None:
        source_path = entity.path
        if not source_parent.detach_child(entity.name):
            raise IllegalOperationError(
                f"Failed to detach source entity: {source_path} "
                f"from parent: {source_parent.path}"
            )
        try:
            destination.attach_child(entity)
        except DriveFsError as error:
            # Detached above, so the original slot is free again.
            source_parent.attach_child(entity)
            self._reject_move(source_path, destination.path, type(error).__name__)
            raise IllegalOperationError(
                f"Failed to move entity: {source_path} to: {destination.path}"
            ) from error

    def write_to_file(self, path: str, content: str) -> None:
        """Replace the content of the text file at ``path``.

        Raises:
            NullArgumentError: If ``path`` or ``content`` is ``None``.
            PathNotFoundError: If ``path`` does not resolve.
            NotATextFileError: If the entity is not a text file.
        """
        _logger.info(
            "Writing content to file.",
            event="drivefs.write",
            context={"path": path, "length": None if content is None else len(content)},
        )
        if content is None:
            raise NullArgumentError("Content")
        self._require_text_file(path).content = content

    def read_file(self, path: str) -> str:
        """Return the content of the text file at ``path``."""
        return self._require_text_file(path).content

    def list_children(self, path: str) -> list[str]:
        """Return the sorted child names of the container at ``path``."""
        container = self.find_container(path)
        if container is None:
            raise PathNotFoundError(path)
        return sorted(container.children)

    # --- Helpers ---

    def _require_entity(self, path: str) -> Entity:
        entity = self.find(path)
        if entity is None:
            _logger.error(
                "Path not found.", event="drivefs.path_not_found", context={"path": path}
            )
            raise PathNotFoundError(path)
        return entity

    def _require_text_file(self, path: str) -> TextFile:
        entity = self._require_entity(path)
        if not isinstance(entity, TextFile):
            _logger.error(
                "Entity is not a text file.",
                event="drivefs.not_a_text_file",
                context={"path": path, "entity_type": entity.entity_type.name},
            )
            raise NotATextFileError(path)
        return entity

    def _reject_move(self, source: str, destination: str, reason: str) -> None:
        _logger.error(
            "Move rejected.",
            event="drivefs.move.rejected",
            context={"source": source, "destination": destination, "reason": reason},
        )
