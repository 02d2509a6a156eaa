"""Collaborator interfaces consumed by the snapshot reconciler."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol

Snapshot = dict[str, Any]


class ListCounts(Protocol):
    """Aggregate counts read from the reading list store."""

    def count_lists(self) -> int: ...

    def count_saved_articles(self) -> int: ...


class FeatureFlags(Protocol):
    @property
    def is_sync_enabled(self) -> bool: ...

    @property
    def is_default_list_enabled(self) -> bool: ...


class SessionProvider(Protocol):
    @property
    def is_logged_in(self) -> bool: ...


class LocaleProvider(Protocol):
    @property
    def current_language_code(self) -> str | None: ...


class StandardEventDataProvider(Protocol):
    """Contextual fields attached to every event and ignored for change detection."""

    def standard_event_data(self) -> Snapshot: ...


class EventEmitter(Protocol):
    """Event transport.

    ``emit`` raises :class:`~reading_lists.history.models.EventEmissionError` when
    delivery fails; ``on_logged`` runs only after a successful delivery.
    """

    def emit(
        self,
        event: Mapping[str, Any],
        *,
        on_logged: Callable[[Snapshot], None] | None = None,
    ) -> None: ...


class SnapshotStore(Protocol):
    """Persisted baseline snapshot."""

    def load(self) -> Snapshot | None: ...

    def save(self, snapshot: Mapping[str, Any]) -> None: ...
