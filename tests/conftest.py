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

from __future__ import annotations

from collections.abc import Iterator

import pytest

import drivefs.dbc as dbc_module
from drivefs import EntityType, FileSystemService


@pytest.fixture(autouse=True)
def reset_dbc_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test with contracts enforced, then restore the default."""
    monkeypatch.delenv("DRIVEFS_DBC", raising=False)
    dbc_module._forced_state = None
    dbc_module.enable_dbc()
    yield
    dbc_module._forced_state = None


@pytest.fixture
def service() -> FileSystemService:
    """Return an empty filesystem."""
    return FileSystemService()


@pytest.fixture
def populated(service: FileSystemService) -> FileSystemService:
    """Return a filesystem with a populated ``C/Documents`` folder."""
    service.create(EntityType.DRIVE, "C")
    service.create(EntityType.FOLDER, "Documents", "C")
    service.create(EntityType.TEXT_FILE, "note.txt", "C/Documents")
    service.create(EntityType.ZIP_FILE, "photos.zip", "C/Documents")
    return service
