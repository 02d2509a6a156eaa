"""Settings-backed collaborators for the snapshot reconciler."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

from reading_lists.config import Settings
from reading_lists.history.base import Snapshot
from reading_lists.lists.owner import MainContextOwner
from reading_lists.lists.repository import SQLiteReadingListRepository
from reading_lists.storage.common import utc_now


@dataclass(frozen=True, slots=True)
class StaticFeatureFlags:
    is_sync_enabled: bool = False
    is_default_list_enabled: bool = False


@dataclass(frozen=True, slots=True)
class StaticSession:
    is_logged_in: bool = False


@dataclass(frozen=True, slots=True)
class StaticLocale:
    current_language_code: str | None = None


@dataclass(slots=True)
class InstallStandardEventData:
    """Install id, per-process session id and the client timestamp of each event."""

    app_install_id: str = field(default_factory=lambda: str(uuid4()))
    session_id: str = field(default_factory=lambda: uuid4().hex)

    def standard_event_data(self) -> Snapshot:
        return {
            "app_install_id": self.app_install_id,
            "session_id": self.session_id,
            "client_dt": utc_now().isoformat(),
        }


class OwnerListCounts:
    """Reads aggregate counts through the thread that owns the repository."""

    def __init__(self, owner: MainContextOwner) -> None:
        self._owner = owner

    def count_lists(self) -> int:
        return self._owner.call(SQLiteReadingListRepository.count_lists)

    def count_saved_articles(self) -> int:
        return self._owner.call(SQLiteReadingListRepository.count_saved_articles)


def collaborators_from_settings(
    settings: Settings,
) -> tuple[StaticFeatureFlags, StaticSession, StaticLocale]:
    return (
        StaticFeatureFlags(
            is_sync_enabled=settings.features.sync_enabled,
            is_default_list_enabled=settings.features.default_list_enabled,
        ),
        StaticSession(is_logged_in=settings.session.logged_in),
        StaticLocale(current_language_code=settings.session.language_code),
    )
