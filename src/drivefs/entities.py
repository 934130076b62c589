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

"""Entity model for the in-memory namespace.

The namespace is a forest of four entity kinds:

- :class:`Drive`: a root container. Never has a parent, never nested.
- :class:`Folder`: a container with a parent.
- :class:`ZipFile`: a container with a parent.
- :class:`TextFile`: a leaf holding mutable text ``content``.

Ownership flows from parent to child through each container's ``children``
mapping. The ``parent`` back-reference is a :mod:`weakref` and exists only to
derive paths and to detach an entity from its previous parent on reparenting.
:meth:`Container.attach_child` and :meth:`Container.detach_child` are the only
mutators of the tree structure.
"""

from __future__ import annotations

import sys
import weakref
from collections.abc import Iterator, Mapping
from enum import Enum
from types import MappingProxyType
from typing import ClassVar, Final

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from ._validation import validate_entity_name
from .errors import (
    DetachedPathError,
    DriveNestingError,
    DuplicateNameError,
    IllegalOperationError,
    NullChildError,
)

__all__ = [
    "DEFAULT_SEPARATOR",
    "Container",
    "Drive",
    "Entity",
    "EntityType",
    "Folder",
    "TextFile",
    "ZipFile",
]

DEFAULT_SEPARATOR: Final[str] = "/"


class EntityType(Enum):
    """Closed set of entity kinds. The value is the display label."""

    DRIVE = "Drive"
    FOLDER = "Folder"
    TEXT_FILE = "Text File"
    ZIP_FILE = "Zip File"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def is_container(self) -> bool:
        return self is not EntityType.TEXT_FILE


class Entity:
    """Common behaviour of every node in the namespace.

    ``name`` and ``entity_type`` are fixed at construction. ``parent`` changes
    only through the attach/detach primitives of :class:`Container`.
    """

    __slots__ = ("__weakref__", "_name", "_parent_ref")

    entity_type: ClassVar[EntityType]

    def __init__(self, name: str) -> None:
        self._name = validate_entity_name(name, self.entity_type.display_name)
        self._parent_ref: weakref.ref[Container] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Container | None:
        """The container currently holding this entity, if any."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def path(self) -> str:
        """Separator-joined names from the owning drive down to this entity.

        Raises:
            DetachedPathError: If the parent chain does not end in a drive.
        """
        segments: list[str] = []
        node: Entity = self
        while not isinstance(node, Drive):
            segments.append(node.name)
            parent = node.parent
            if parent is None:
                raise DetachedPathError(self._name, self.entity_type.display_name)
            node = parent
        segments.append(node.name)
        return node.separator.join(reversed(segments))

    def iter_ancestors(self) -> Iterator[Container]:
        """Yield the parent, grandparent, and so on up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def _set_parent(self, parent: Container | None) -> None:
        self._parent_ref = None if parent is None else weakref.ref(parent)

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


class Container(Entity):
    """An entity holding uniquely named children."""

    __slots__ = ("_children",)

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._children: dict[str, Entity] = {}

    @property
    def children(self) -> Mapping[str, Entity]:
        """Read-only view of the children keyed by name."""
        return MappingProxyType(self._children)

    def get_child(self, name: str) -> Entity | None:
        return self._children.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._children

    def __len__(self) -> int:
        return len(self._children)

    def attach_child(self, child: Entity) -> None:
        """Insert ``child`` and point its back-reference at this container.

        A child that still belongs to another container is detached from it
        first, so attaching doubles as reparenting.

        Raises:
            NullChildError: If ``child`` is ``None``.
            InvalidNameError: If the child's name fails validation.
            IllegalOperationError: If ``child`` is this container or one of
                its ancestors.
            DuplicateNameError: If a sibling already uses the child's name.
            DriveNestingError: If ``child`` is a :class:`Drive`.
        """
        if child is None:
            raise NullChildError
        _ = validate_entity_name(child.name, "Child entity")
        if child is self or any(node is child for node in self.iter_ancestors()):
            msg = f"Cannot place {child.name} inside itself or its own subtree."
            raise IllegalOperationError(msg)
        if child.name in self._children:
            raise DuplicateNameError(child.name, self._describe())
        if isinstance(child, Drive):
            raise DriveNestingError(child.name)

        previous = child.parent
        if previous is not None and previous is not self:
            _ = previous.detach_child(child.name)
        self._children[child.name] = child
        child._set_parent(self)  # pyright: ignore[reportPrivateUsage]

    def detach_child(self, name: str) -> bool:
        """Remove the child called ``name`` and clear its back-reference.

        Returns ``False`` without raising when no such child exists.
        """
        child = self._children.pop(name, None)
        if child is None:
            return False
        child._set_parent(None)  # pyright: ignore[reportPrivateUsage]
        return True

    def _describe(self) -> str:
        try:
            return self.path
        except DetachedPathError:
            return self.name


class Drive(Container):
    """Root container. Its path is its own name."""

    __slots__ = ("_separator",)

    entity_type = EntityType.DRIVE

    def __init__(self, name: str, *, separator: str = DEFAULT_SEPARATOR) -> None:
        super().__init__(name)
        self._separator = separator

    @property
    def separator(self) -> str:
        """Separator used when deriving paths of entities on this drive."""
        return self._separator

    @property
    @override
    def path(self) -> str:
        return self.name

    @override
    def _set_parent(self, parent: Container | None) -> None:
        if parent is not None:
            raise DriveNestingError(self.name)


class Folder(Container):
    __slots__ = ()

    entity_type = EntityType.FOLDER


class ZipFile(Container):
    __slots__ = ()

    entity_type = EntityType.ZIP_FILE


class TextFile(Entity):
    """Leaf entity holding text content, empty by default."""

    __slots__ = ("content",)

    entity_type = EntityType.TEXT_FILE

    def __init__(self, name: str, content: str = "") -> None:
        super().__init__(name)
        self.content = content
