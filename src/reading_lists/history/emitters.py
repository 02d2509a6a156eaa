"""Event transports for user history snapshots."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from reading_lists.history.base import Snapshot
from reading_lists.history.models import (
    USER_HISTORY_SCHEMA,
    USER_HISTORY_SCHEMA_REVISION,
    EventEmissionError,
)

EVENTS_LOGGER_NAME = "reading_lists.events"


def build_envelope(
    event: Mapping[str, Any],
    *,
    schema: str = USER_HISTORY_SCHEMA,
    revision: int = USER_HISTORY_SCHEMA_REVISION,
) -> dict[str, Any]:
    return {"schema": schema, "revision": revision, "event": dict(event)}


def encode_envelope(envelope: Mapping[str, Any]) -> str:
    try:
        return json.dumps(envelope, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError) as error:
        raise EventEmissionError(f"Event is not JSON serializable: {error}") from error


class LoggingEventEmitter:
    """Writes each event envelope as one JSON line to the events logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(EVENTS_LOGGER_NAME)

    def emit(
        self,
        event: Mapping[str, Any],
        *,
        on_logged: Callable[[Snapshot], None] | None = None,
    ) -> None:
        self._logger.info("%s", encode_envelope(build_envelope(event)))
        if on_logged is not None:
            on_logged(dict(event))


class JsonlEventEmitter:
    """Appends event envelopes to a JSON-lines file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def emit(
        self,
        event: Mapping[str, Any],
        *,
        on_logged: Callable[[Snapshot], None] | None = None,
    ) -> None:
        line = encode_envelope(build_envelope(event))
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        except OSError as error:
            raise EventEmissionError(f"Failed to append event to {self.path}: {error}") from error
        if on_logged is not None:
            on_logged(dict(event))
