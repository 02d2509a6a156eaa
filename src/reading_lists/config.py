"""Runtime configuration for reading lists and user history snapshots."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

_LANGUAGE_CODE_RE = re.compile(r"^[a-z]{2,3}(-[a-z0-9]+)*$")


@dataclass(slots=True)
class ListSettings:
    """Storage and membership limits."""

    max_article_key_length: int = 2_048
    sqlite_busy_timeout_ms: int = 5_000


@dataclass(slots=True)
class FeatureSettings:
    """Reading list feature flags reported in user history snapshots."""

    sync_enabled: bool = False
    default_list_enabled: bool = False


@dataclass(slots=True)
class SessionSettings:
    """User context settings."""

    user_id: str = "default_user"
    user_name: str = "Default User"
    logged_in: bool = False
    language_code: str | None = None


@dataclass(slots=True)
class EventSettings:
    """Where user history events are delivered."""

    events_file: Path | None = None


@dataclass(slots=True)
class Settings:
    """Application settings grouped by domain concerns."""

    db_path: Path = Path(".reading_lists.db")
    lists: ListSettings = field(default_factory=ListSettings)
    features: FeatureSettings = field(default_factory=FeatureSettings)
    session: SessionSettings = field(default_factory=SessionSettings)
    events: EventSettings = field(default_factory=EventSettings)

    @classmethod
    def from_env(cls, db_path: Path | None = None) -> Settings:
        """Load settings from environment with sane defaults for local development."""

        events_file = os.getenv("READING_LISTS_EVENTS_FILE", "").strip()
        language_code = os.getenv("READING_LISTS_LANGUAGE", "").strip()
        return cls(
            db_path=db_path or Path(os.getenv("READING_LISTS_DB_PATH", ".reading_lists.db")),
            lists=ListSettings(
                max_article_key_length=int(
                    os.getenv("READING_LISTS_MAX_ARTICLE_KEY_LENGTH", "2048"),
                ),
                sqlite_busy_timeout_ms=int(
                    os.getenv("READING_LISTS_SQLITE_BUSY_TIMEOUT_MS", "5000"),
                ),
            ),
            features=FeatureSettings(
                sync_enabled=_env_bool("READING_LISTS_SYNC_ENABLED", default=False),
                default_list_enabled=_env_bool(
                    "READING_LISTS_DEFAULT_LIST_ENABLED",
                    default=False,
                ),
            ),
            session=SessionSettings(
                user_id=os.getenv("READING_LISTS_USER_ID", "default_user"),
                user_name=os.getenv("READING_LISTS_USER_NAME", "Default User"),
                logged_in=_env_bool("READING_LISTS_LOGGED_IN", default=False),
                language_code=language_code.lower() or None,
            ),
            events=EventSettings(events_file=Path(events_file) if events_file else None),
        )

    def validate(self) -> None:
        """Raise configuration error for values the repository cannot work with."""

        if self.lists.max_article_key_length <= 0:
            raise ValueError("READING_LISTS_MAX_ARTICLE_KEY_LENGTH must be a positive integer.")
        if self.lists.sqlite_busy_timeout_ms <= 0:
            raise ValueError("READING_LISTS_SQLITE_BUSY_TIMEOUT_MS must be > 0.")
        if not self.session.user_id.strip():
            raise ValueError("READING_LISTS_USER_ID must not be empty.")
        language_code = self.session.language_code
        if language_code is not None and not _LANGUAGE_CODE_RE.match(language_code):
            raise ValueError(
                f"Invalid READING_LISTS_LANGUAGE value: {language_code!r}. "
                "Expected a language code such as 'en' or 'zh-hans'.",
            )


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
