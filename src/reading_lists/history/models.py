"""Snapshot field names, outcomes and errors."""

from __future__ import annotations

from enum import Enum

USER_HISTORY_SCHEMA = "ReadingListUserHistory"
USER_HISTORY_SCHEMA_REVISION = 1
USER_HISTORY_BASELINE_NAME = "user_history"
DEFAULT_LANGUAGE_CODE = "en"

LIST_COUNT_FIELD = "measure_readinglist_listcount"
ITEM_COUNT_FIELD = "measure_readinglist_itemcount"
SYNC_ENABLED_FIELD = "readinglist_sync"
DEFAULT_LIST_ENABLED_FIELD = "readinglist_showdefault"
PRIMARY_LANGUAGE_FIELD = "primary_language"
IS_ANON_FIELD = "is_anon"


class ReconcilerState(str, Enum):
    IDLE = "idle"
    BASELINE_ESTABLISHED = "baseline_established"


class ReconcileOutcome(str, Enum):
    """Result of one ``log_if_changed`` attempt."""

    UNCHANGED = "unchanged"
    EMITTED = "emitted"
    EMIT_FAILED = "emit_failed"


class SnapshotBaselineMissingError(RuntimeError):
    """Snapshot comparison requested before any baseline was persisted."""


class EventEmissionError(RuntimeError):
    """Event could not be handed to the transport."""
