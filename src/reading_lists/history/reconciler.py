"""Emit user history snapshots only when they differ from the last one logged."""

from __future__ import annotations

import logging

from reading_lists.history.base import (
    EventEmitter,
    FeatureFlags,
    ListCounts,
    LocaleProvider,
    SessionProvider,
    Snapshot,
    SnapshotStore,
    StandardEventDataProvider,
)
from reading_lists.history.models import (
    EventEmissionError,
    ReconcileOutcome,
    ReconcilerState,
    SnapshotBaselineMissingError,
)
from reading_lists.history.snapshot import build_snapshot, snapshots_equal

logger = logging.getLogger(__name__)


class UserHistorySnapshotReconciler:
    """Change detection for the periodic user history event.

    ``establish_baseline`` runs once at process start and stores the current
    snapshot without emitting. ``log_if_changed`` compares the current snapshot
    with that baseline, ignoring the standard contextual fields, and emits only
    when a metric changed. The baseline moves forward only after the emitter
    acknowledges delivery.
    """

    def __init__(  # noqa: PLR0913
        self,
        *,
        counts: ListCounts,
        feature_flags: FeatureFlags,
        session: SessionProvider,
        locale: LocaleProvider,
        standard_data: StandardEventDataProvider,
        emitter: EventEmitter,
        store: SnapshotStore,
    ) -> None:
        self._counts = counts
        self._feature_flags = feature_flags
        self._session = session
        self._locale = locale
        self._standard_data = standard_data
        self._emitter = emitter
        self._store = store

    @property
    def state(self) -> ReconcilerState:
        if self._store.load() is None:
            return ReconcilerState.IDLE
        return ReconcilerState.BASELINE_ESTABLISHED

    def current_snapshot(self) -> tuple[Snapshot, set[str]]:
        """Current snapshot and the standard keys it carries."""

        standard = self._standard_data.standard_event_data()
        snapshot = build_snapshot(
            list_count=self._counts.count_lists(),
            saved_article_count=self._counts.count_saved_articles(),
            sync_enabled=self._feature_flags.is_sync_enabled,
            default_list_enabled=self._feature_flags.is_default_list_enabled,
            language_code=self._locale.current_language_code,
            logged_in=self._session.is_logged_in,
            standard=standard,
        )
        return snapshot, set(standard)

    def establish_baseline(self) -> Snapshot:
        snapshot, _ = self.current_snapshot()
        self._store.save(snapshot)
        logger.debug("User history baseline established")
        return snapshot

    def log_if_changed(self) -> ReconcileOutcome:
        snapshot, standard_keys = self.current_snapshot()
        baseline = self._store.load()
        if baseline is None:
            logger.error("User history snapshot requested before a baseline was established")
            raise SnapshotBaselineMissingError(
                "User history snapshots must have values: call establish_baseline() first.",
            )

        if snapshots_equal(snapshot, baseline, excluding=standard_keys):
            logger.debug("User history snapshots are identical; logging new snapshot aborted")
            return ReconcileOutcome.UNCHANGED

        logger.debug("User history snapshots are different; logging new snapshot")
        try:
            self._emitter.emit(snapshot, on_logged=self._store.save)
        except EventEmissionError as error:
            logger.error("Error logging user history snapshot: %s", error)
            return ReconcileOutcome.EMIT_FAILED
        return ReconcileOutcome.EMITTED
