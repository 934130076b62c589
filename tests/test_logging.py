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

"""Tests for structured logging helpers and the events the service emits."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO

import pytest

from drivefs import (
    EntityType,
    FileSystemService,
    InvalidNameError,
    NullNameError,
    PathNotFoundError,
    validate_entity_name,
)
from drivefs.logging import (
    StructuredLogger,
    _JsonFormatter,
    configure_logging,
    get_logger,
)


class _CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@contextmanager
def _capture(logger: logging.Logger) -> Iterator[list[logging.LogRecord]]:
    handler = _CaptureHandler()
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
        handler.close()


@pytest.fixture(autouse=True)
def reset_logging_state() -> Iterator[None]:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        yield
    finally:
        for handler in root.handlers:
            if handler not in original_handlers:
                handler.close()
        root.handlers = original_handlers
        root.setLevel(original_level)


def test_structured_logger_emits_event_and_context() -> None:
    logger = get_logger("tests.drivefs.logging").bind(component="unit-test")

    with _capture(logger.logger) as records:
        logger.info("structured", event="tests.event", context={"attempt": 1})

    assert len(records) == 1
    record = records[0]
    assert record.event == "tests.event"  # type: ignore[attr-defined]
    assert record.context == {"component": "unit-test", "attempt": 1}  # type: ignore[attr-defined]
    assert record.getMessage() == "structured"


def test_extra_mapping_is_folded_into_context() -> None:
    logger = get_logger("tests.drivefs.extra")

    with _capture(logger.logger) as records:
        logger.info("none-extra", event="tests.none", extra=None)
        logger.info("with-extra", extra={"event": "tests.extra", "count": 2})

    assert [record.event for record in records] == ["tests.none", "tests.extra"]  # type: ignore[attr-defined]
    assert records[0].context == {}  # type: ignore[attr-defined]
    assert records[1].context == {"count": 2}  # type: ignore[attr-defined]


def test_missing_event_raises() -> None:
    logger = get_logger("tests.drivefs.missing")

    with _capture(logger.logger), pytest.raises(TypeError, match="'event' field"):
        logger.info("no event")


def test_bind_does_not_mutate_original() -> None:
    base = get_logger("tests.drivefs.bind", context={"a": 1})
    bound = base.bind(b=2)

    assert isinstance(bound, StructuredLogger)
    assert base.extra == {"a": 1}
    assert bound.extra == {"a": 1, "b": 2}


def test_configure_logging_json_output() -> None:
    configure_logging(level="DEBUG", json_mode=True, env={}, force=True)
    root = logging.getLogger()
    stream = StringIO()
    root.handlers[0].setStream(stream)  # type: ignore[attr-defined]

    get_logger("tests.drivefs.json").info(
        "hello", event="tests.json", context={"path": "C"}
    )

    payload = json.loads(stream.getvalue().strip())
    assert payload["event"] == "tests.json"
    assert payload["context"] == {"path": "C"}
    assert payload["level"] == "INFO"
    assert payload["message"] == "hello"


def test_configure_logging_reads_environment() -> None:
    configure_logging(
        env={"DRIVEFS_LOG_LEVEL": "warning", "DRIVEFS_LOG_FORMAT": "json"}, force=True
    )
    root = logging.getLogger()

    assert root.level == logging.WARNING
    assert isinstance(root.handlers[0].formatter, _JsonFormatter)


def test_configure_logging_keeps_existing_handlers() -> None:
    root = logging.getLogger()
    sentinel = logging.NullHandler()
    root.handlers = [sentinel]

    configure_logging(level=logging.ERROR, env={})

    assert root.handlers == [sentinel]
    assert root.level == logging.ERROR


def test_unknown_level_raises() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging(level="LOUD", env={}, force=True)


def test_service_logs_operations_and_rejections() -> None:
    service_logger = logging.getLogger("drivefs.service")
    fs = FileSystemService()

    with _capture(service_logger) as records:
        fs.create(EntityType.DRIVE, "C")
        with pytest.raises(PathNotFoundError):
            fs.move("C/missing", "C")

    events = [record.event for record in records]  # type: ignore[attr-defined]
    assert "drivefs.create" in events
    assert "drivefs.move" in events
    rejected = [r for r in records if r.event == "drivefs.move.rejected"]  # type: ignore[attr-defined]
    assert len(rejected) == 1
    assert rejected[0].levelno == logging.ERROR
    assert rejected[0].context["reason"] == "source_not_found"  # type: ignore[attr-defined]
    assert rejected[0].context["component"] == "service"  # type: ignore[attr-defined]


def test_resolver_logs_misses_at_debug() -> None:
    resolver_logger = logging.getLogger("drivefs._path")
    fs = FileSystemService()

    with _capture(resolver_logger) as records:
        assert fs.find("Z/anything") is None

    assert [r.levelno for r in records] == [logging.DEBUG]
    assert records[0].context["reason"] == "unknown_drive"  # type: ignore[attr-defined]


@pytest.mark.parametrize(
    ("name", "error", "event"),
    [
        (None, NullNameError, "drivefs.validation.null_name"),
        (42, InvalidNameError, "drivefs.validation.invalid_name"),
        ("", InvalidNameError, "drivefs.validation.empty_name"),
        ("a b", InvalidNameError, "drivefs.validation.invalid_name"),
    ],
)
def test_every_rejected_name_is_logged(
    name: object, error: type[Exception], event: str
) -> None:
    validation_logger = logging.getLogger("drivefs._validation")

    with _capture(validation_logger) as records, pytest.raises(error):
        validate_entity_name(name, "Folder")  # type: ignore[arg-type]

    assert [r.event for r in records] == [event]  # type: ignore[attr-defined]
    assert records[0].levelno == logging.ERROR
    assert records[0].context["component"] == "validation"  # type: ignore[attr-defined]
