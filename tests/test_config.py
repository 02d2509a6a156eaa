from __future__ import annotations

from pathlib import Path

import allure
import pytest

from reading_lists.config import ListSettings, SessionSettings, Settings

pytestmark = [
    allure.epic("Reading Lists"),
    allure.feature("Configuration"),
]


def test_from_env_reads_flags_and_session(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("READING_LISTS_DB_PATH", "/tmp/custom.db")
    monkeypatch.setenv("READING_LISTS_SYNC_ENABLED", "yes")
    monkeypatch.setenv("READING_LISTS_DEFAULT_LIST_ENABLED", "0")
    monkeypatch.setenv("READING_LISTS_LOGGED_IN", "true")
    monkeypatch.setenv("READING_LISTS_LANGUAGE", "DE")
    monkeypatch.setenv("READING_LISTS_MAX_ARTICLE_KEY_LENGTH", "512")

    settings = Settings.from_env()

    assert settings.db_path == Path("/tmp/custom.db")
    assert settings.features.sync_enabled is True
    assert settings.features.default_list_enabled is False
    assert settings.session.logged_in is True
    assert settings.session.language_code == "de"
    assert settings.lists.max_article_key_length == 512
    assert settings.events.events_file is None
    settings.validate()


def test_from_env_prefers_explicit_db_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("READING_LISTS_DB_PATH", "/tmp/ignored.db")
    monkeypatch.setenv("READING_LISTS_EVENTS_FILE", "/tmp/events.jsonl")

    settings = Settings.from_env(db_path=Path("explicit.db"))

    assert settings.db_path == Path("explicit.db")
    assert settings.events.events_file == Path("/tmp/events.jsonl")


def test_from_env_rejects_invalid_boolean(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("READING_LISTS_SYNC_ENABLED", "maybe")

    with pytest.raises(ValueError, match="READING_LISTS_SYNC_ENABLED"):
        Settings.from_env()


def test_validate_rejects_non_positive_key_length() -> None:
    settings = Settings(lists=ListSettings(max_article_key_length=0))

    with pytest.raises(ValueError, match="MAX_ARTICLE_KEY_LENGTH"):
        settings.validate()


def test_validate_rejects_malformed_language_code() -> None:
    settings = Settings(session=SessionSettings(language_code="english!"))

    with pytest.raises(ValueError, match="Invalid READING_LISTS_LANGUAGE"):
        settings.validate()
