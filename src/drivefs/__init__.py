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

"""In-memory namespace of drives, folders, text files, and zip files.

Example usage::

    from drivefs import EntityType, FileSystemService

    fs = FileSystemService()
    fs.create(EntityType.DRIVE, "C")
    fs.create(EntityType.FOLDER, "Documents", "C")
    fs.create(EntityType.TEXT_FILE, "note.txt", "C/Documents")
    fs.write_to_file("C/Documents/note.txt", "hi")
"""

from __future__ import annotations

from ._synchronized import SynchronizedFileSystemService
from ._validation import NAME_PATTERN, validate_entity_name
from .config import ConfigError, FileSystemConfig, load_config
from .entities import (
    DEFAULT_SEPARATOR,
    Container,
    Drive,
    Entity,
    EntityType,
    Folder,
    TextFile,
    ZipFile,
)
from .errors import (
    DetachedPathError,
    DriveFsError,
    DriveNestingError,
    DuplicateNameError,
    IllegalOperationError,
    InvalidNameError,
    NotATextFileError,
    NullArgumentError,
    NullChildError,
    NullNameError,
    PathAlreadyExistsError,
    PathNotFoundError,
)
from .service import FileSystemService

__all__ = [
    "DEFAULT_SEPARATOR",
    "NAME_PATTERN",
    "ConfigError",
    "Container",
    "DetachedPathError",
    "Drive",
    "DriveFsError",
    "DriveNestingError",
    "DuplicateNameError",
    "Entity",
    "EntityType",
    "FileSystemConfig",
    "FileSystemService",
    "Folder",
    "IllegalOperationError",
    "InvalidNameError",
    "NotATextFileError",
    "NullArgumentError",
    "NullChildError",
    "NullNameError",
    "PathAlreadyExistsError",
    "PathNotFoundError",
    "SynchronizedFileSystemService",
    "TextFile",
    "ZipFile",
    "load_config",
    "validate_entity_name",
]
