"""Controllers for user history snapshot CLI commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from reading_lists.config import Settings
from reading_lists.history.base import EventEmitter
from reading_lists.history.emitters import JsonlEventEmitter, LoggingEventEmitter
from reading_lists.history.models import ReconcileOutcome
from reading_lists.history.providers import InstallStandardEventData, collaborators_from_settings
from reading_lists.history.reconciler import UserHistorySnapshotReconciler
from reading_lists.history.stores import SQLiteSnapshotStore
from reading_lists.lists.repository import SQLiteReadingListRepository


@dataclass(slots=True)
class HistoryCommand:
    """CLI inputs for snapshot commands."""

    db_path: Path | None


@dataclass(slots=True)
class HistoryLogResult:
    lines: list[str]
    success: bool


class HistoryCliController:
    """Coordinates user history snapshot commands."""

    def baseline(self, command: HistoryCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _reconciler(settings) as reconciler:
            snapshot = reconciler.establish_baseline()
        return ["User history baseline established:", *_format_fields(snapshot)]

    def log(self, command: HistoryCommand) -> HistoryLogResult:
        settings = _settings(command.db_path)
        with _reconciler(settings) as reconciler:
            outcome = reconciler.log_if_changed()

        if outcome is ReconcileOutcome.UNCHANGED:
            return HistoryLogResult(lines=["User history unchanged; nothing logged."], success=True)
        if outcome is ReconcileOutcome.EMITTED:
            return HistoryLogResult(lines=["User history snapshot logged."], success=True)
        return HistoryLogResult(
            lines=["User history snapshot could not be logged; baseline kept."],
            success=False,
        )


def _format_fields(snapshot: dict[str, object]) -> list[str]:
    return [f"  {key}={snapshot[key]}" for key in sorted(snapshot)]


def _emitter(settings: Settings) -> EventEmitter:
    if settings.events.events_file is not None:
        return JsonlEventEmitter(settings.events.events_file)
    return LoggingEventEmitter()


def _settings(db_path: Path | None) -> Settings:
    settings = Settings.from_env(db_path=db_path)
    settings.validate()
    return settings


@contextmanager
def _reconciler(settings: Settings) -> Iterator[UserHistorySnapshotReconciler]:
    repository = SQLiteReadingListRepository(
        settings.db_path,
        user_id=settings.session.user_id,
        user_name=settings.session.user_name,
        sqlite_busy_timeout_ms=settings.lists.sqlite_busy_timeout_ms,
    )
    try:
        repository.init_schema()
        feature_flags, session, locale = collaborators_from_settings(settings)
        yield UserHistorySnapshotReconciler(
            counts=repository,
            feature_flags=feature_flags,
            session=session,
            locale=locale,
            standard_data=InstallStandardEventData(),
            emitter=_emitter(settings),
            store=SQLiteSnapshotStore(repository.engine, user_id=settings.session.user_id),
        )
    finally:
        repository.close()
