"""Build and compare user history snapshots."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from reading_lists.history.base import Snapshot
from reading_lists.history.models import (
    DEFAULT_LANGUAGE_CODE,
    DEFAULT_LIST_ENABLED_FIELD,
    IS_ANON_FIELD,
    ITEM_COUNT_FIELD,
    LIST_COUNT_FIELD,
    PRIMARY_LANGUAGE_FIELD,
    SYNC_ENABLED_FIELD,
)


def build_snapshot(  # noqa: PLR0913
    *,
    list_count: int,
    saved_article_count: int,
    sync_enabled: bool,
    default_list_enabled: bool,
    language_code: str | None,
    logged_in: bool,
    standard: Mapping[str, Any],
) -> Snapshot:
    """Merge usage metrics with standard fields; standard values win on key clashes."""

    metrics: Snapshot = {
        LIST_COUNT_FIELD: list_count,
        ITEM_COUNT_FIELD: saved_article_count,
        SYNC_ENABLED_FIELD: sync_enabled,
        DEFAULT_LIST_ENABLED_FIELD: default_list_enabled,
        PRIMARY_LANGUAGE_FIELD: language_code or DEFAULT_LANGUAGE_CODE,
        IS_ANON_FIELD: not logged_in,
    }
    return {**metrics, **standard}


def snapshots_equal(
    left: Mapping[str, Any],
    right: Mapping[str, Any],
    *,
    excluding: Iterable[str] = (),
) -> bool:
    """Value equality over both mappings once the excluded keys are dropped."""

    excluded = set(excluding)
    return _without(left, excluded) == _without(right, excluded)


def _without(snapshot: Mapping[str, Any], excluded: set[str]) -> dict[str, Any]:
    return {key: value for key, value in snapshot.items() if key not in excluded}
