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

"""Thread-safe facade over :class:`~drivefs.service.FileSystemService`.

The service itself assumes a single caller. This wrapper serialises every
operation behind one re-entrant lock, which keeps cross-container moves
deadlock free. Use :meth:`SynchronizedFileSystemService.locked` to run several
operations as one atomic unit::

    fs = SynchronizedFileSystemService()
    with fs.locked():
        if not fs.exists("C/Backup"):
            fs.create(EntityType.FOLDER, "Backup", "C")
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from threading import RLock

from .config import FileSystemConfig
from .entities import Container, Drive, Entity, EntityType
from .service import FileSystemService

__all__ = ["SynchronizedFileSystemService"]


class SynchronizedFileSystemService:
    """Delegates to a :class:`FileSystemService` under an exclusive lock."""

    def __init__(
        self,
        service: FileSystemService | None = None,
        *,
        config: FileSystemConfig | None = None,
    ) -> None:
        if service is not None and config is not None:
            msg = "Pass either a service or a config, not both."
            raise ValueError(msg)
        self._service = service if service is not None else FileSystemService(config)
        self._lock = RLock()

    @contextmanager
    def locked(self) -> Iterator[FileSystemService]:
        """Hold the lock and yield the wrapped service."""
        with self._lock:
            yield self._service

    @property
    def separator(self) -> str:
        return self._service.separator

    @property
    def drives(self) -> Mapping[str, Drive]:
        """Snapshot of the registered drives."""
        with self._lock:
            return dict(self._service.drives)

    def find(self, path: str) -> Entity | None:
        with self._lock:
            return self._service.find(path)

    def find_container(self, path: str) -> Container | None:
        with self._lock:
            return self._service.find_container(path)

    def exists(self, path: str) -> bool:
        with self._lock:
            return self._service.exists(path)

    def create(
        self,
        entity_type: EntityType,
        name: str,
        parent_path: str | None = None,
    ) -> Entity:
        with self._lock:
            return self._service.create(entity_type, name, parent_path)

    def delete(self, path: str) -> None:
        with self._lock:
            self._service.delete(path)

    def move(self, source_path: str, destination_parent_path: str) -> None:
        with self._lock:
            self._service.move(source_path, destination_parent_path)

    def write_to_file(self, path: str, content: str) -> None:
        with self._lock:
            self._service.write_to_file(path, content)

    def read_file(self, path: str) -> str:
        with self._lock:
            return self._service.read_file(path)

    def list_children(self, path: str) -> list[str]:
        with self._lock:
            return self._service.list_children(path)
