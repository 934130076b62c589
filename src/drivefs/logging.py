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

"""Structured logging helpers for :mod:`drivefs`.

Every record emitted through :class:`StructuredLogger` carries a dotted
``event`` name and a ``context`` mapping::

    logger = get_logger(__name__, context={"component": "service"})
    logger.info("Creating entity.", event="drivefs.create", context={"name": "C"})
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
import sys
from collections.abc import Mapping, MutableMapping
from datetime import UTC, datetime
from typing import Any, cast

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

__all__ = [
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]

LOG_LEVEL_ENV = "DRIVEFS_LOG_LEVEL"
LOG_FORMAT_ENV = "DRIVEFS_LOG_FORMAT"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(event)s %(message)s %(context)s"


class StructuredLogger(logging.LoggerAdapter[logging.Logger]):
    """Adapter that demands an ``event`` name and gathers extras into ``context``.

    Context comes from three places, later ones winning: the mapping bound
    at construction (or via :meth:`bind`), the ``context=`` keyword of the
    call, and any non-``event`` keys passed through ``extra=``.
    """

    def __init__(
        self,
        logger: logging.Logger,
        *,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(logger, {} if context is None else dict(context))

    @property
    def bound_context(self) -> Mapping[str, object]:
        return cast(Mapping[str, object], self.extra or {})

    def bind(self, **context: object) -> StructuredLogger:
        """Return a sibling adapter whose bound context also holds ``context``."""

        return type(self)(self.logger, context={**self.bound_context, **context})

    @override
    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        raw_extra = kwargs.get("extra") or {}
        if not isinstance(raw_extra, Mapping):
            raise TypeError("Structured logs require a mapping for extra.")
        fields = dict(cast(Mapping[str, object], raw_extra))

        call_context = kwargs.pop("context", None)
        if call_context is not None and not isinstance(call_context, Mapping):
            raise TypeError("context must be a mapping when provided.")

        event = kwargs.pop("event", None)
        if event is None:
            event = fields.pop("event", None)
        else:
            fields.pop("event", None)
        if not isinstance(event, str):
            raise TypeError("Structured logs require an 'event' field.")

        merged: dict[str, object] = {**self.bound_context}
        merged.update(cast(Mapping[str, object], call_context or {}))
        merged.update(fields)
        kwargs["extra"] = {"event": event, "context": merged}
        return msg, kwargs


def get_logger(
    name: str,
    *,
    context: Mapping[str, object] | None = None,
) -> StructuredLogger:
    """Return a :class:`StructuredLogger` for the stdlib logger ``name``."""

    return StructuredLogger(logging.getLogger(name), context=context)


def configure_logging(
    *,
    level: int | str | None = None,
    json_mode: bool | None = None,
    env: Mapping[str, str] | None = None,
    force: bool = False,
) -> None:
    """Install a stderr handler on the root logger.

    ``level`` and ``json_mode`` fall back to ``DRIVEFS_LOG_LEVEL`` and
    ``DRIVEFS_LOG_FORMAT`` (``json`` or ``text``). When the root logger
    already has handlers they are kept and only the level changes, unless
    ``force=True``.
    """

    environ = os.environ if env is None else env
    threshold = _coerce_level(level or environ.get(LOG_LEVEL_ENV) or logging.INFO)
    if json_mode is None:
        json_mode = environ.get(LOG_FORMAT_ENV, "").strip().lower() == "json"

    root = logging.getLogger()
    if root.handlers and not force:
        root.setLevel(threshold)
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {
                    "()": "drivefs.logging._TextFormatter",
                    "fmt": _TEXT_FORMAT,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {"()": "drivefs.logging._JsonFormatter"},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "json" if json_mode else "text",
                }
            },
            "root": {"handlers": ["stderr"], "level": threshold},
        }
    )


class _TextFormatter(logging.Formatter):
    """Line formatter that tolerates records logged without an adapter."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "event"):
            record.event = "-"
        if not hasattr(record, "context"):
            record.context = {}
        return super().format(record)


class _JsonFormatter(logging.Formatter):
    """One compact JSON object per record."""

    @override
    def format(self, record: logging.LogRecord) -> str:
        document: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in ("event", "context"):
            value = getattr(record, field, None)
            if value:
                document[field] = value
        if record.exc_info:
            document["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(document, default=repr, separators=(",", ":"))


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelNamesMapping().get(level.strip().upper())
    if resolved is None:
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved
