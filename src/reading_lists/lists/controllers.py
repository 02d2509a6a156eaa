"""Controllers for reading list CLI commands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from reading_lists.config import Settings
from reading_lists.lists.models import ArticleRef, ReadingListView
from reading_lists.lists.repository import SQLiteReadingListRepository


@dataclass(slots=True)
class CreateListCommand:
    """CLI inputs for list creation."""

    db_path: Path | None
    name: str
    description: str | None
    article_keys: tuple[str, ...]


@dataclass(slots=True)
class DeleteListsCommand:
    db_path: Path | None
    names: tuple[str, ...]


@dataclass(slots=True)
class MembershipCommand:
    """CLI inputs shared by add and remove."""

    db_path: Path | None
    name: str
    article_keys: tuple[str, ...]


@dataclass(slots=True)
class ShowListCommand:
    db_path: Path | None
    name: str


@dataclass(slots=True)
class ListListsCommand:
    db_path: Path | None


@dataclass(slots=True)
class ListsForArticleCommand:
    db_path: Path | None
    article_key: str


class ListsCliController:
    """Coordinates reading list command execution."""

    def create(self, command: CreateListCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _repository(settings) as repository:
            reading_list = repository.create_list(
                command.name,
                command.description,
                _articles(command.article_keys),
            )
        return [
            f"Created reading list {reading_list.name!r} "
            f"entries={len(reading_list.entries)}",
        ]

    def delete(self, command: DeleteListsCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _repository(settings) as repository:
            deleted = repository.delete_lists(command.names)
        return [f"Deleted reading lists: {deleted}"]

    def add(self, command: MembershipCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _repository(settings) as repository:
            result = repository.add_articles(_articles(command.article_keys), command.name)

        lines = [
            f"Added to {command.name!r}: "
            f"added={len(result.added)} "
            f"already_present={len(result.skipped_existing)} "
            f"failed={len(result.failed)} "
            f"not_attempted={len(result.aborted)}",
        ]
        lines.extend(f"  failed: {key}" for key in result.failed)
        lines.extend(f"  not attempted: {key}" for key in result.aborted)
        return lines

    def remove(self, command: MembershipCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _repository(settings) as repository:
            removed = repository.remove_articles(_articles(command.article_keys), command.name)
        return [f"Removed from {command.name!r}: {removed}"]

    def show(self, command: ShowListCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _repository(settings) as repository:
            reading_list = repository.fetch_list(command.name)
        return _describe(reading_list, with_entries=True)

    def list_all(self, command: ListListsCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _repository(settings) as repository:
            reading_lists = repository.list_reading_lists()
        if not reading_lists:
            return ["No reading lists."]
        lines: list[str] = []
        for reading_list in reading_lists:
            lines.extend(_describe(reading_list, with_entries=False))
        return lines

    def for_article(self, command: ListsForArticleCommand) -> list[str]:
        settings = _settings(command.db_path)
        with _repository(settings) as repository:
            reading_lists = repository.get_lists_for_article(ArticleRef(key=command.article_key))
        if not reading_lists:
            return [f"{command.article_key} is not saved to any reading list."]
        return [f"- {reading_list.name}" for reading_list in reading_lists]


def _describe(reading_list: ReadingListView, *, with_entries: bool) -> list[str]:
    header = f"{reading_list.name} entries={len(reading_list.entries)}"
    if reading_list.description:
        header += f" description={reading_list.description!r}"
    lines = [header]
    if with_entries:
        for entry in reading_list.entries:
            title = entry.display_title or "-"
            lines.append(f"  {title} <{entry.article_key}>")
    return lines


def _articles(article_keys: tuple[str, ...]) -> list[ArticleRef]:
    return [ArticleRef(key=key) for key in article_keys]


def _settings(db_path: Path | None) -> Settings:
    settings = Settings.from_env(db_path=db_path)
    settings.validate()
    return settings


@contextmanager
def _repository(settings: Settings) -> Iterator[SQLiteReadingListRepository]:
    repository = SQLiteReadingListRepository(
        settings.db_path,
        user_id=settings.session.user_id,
        user_name=settings.session.user_name,
        max_article_key_length=settings.lists.max_article_key_length,
        sqlite_busy_timeout_ms=settings.lists.sqlite_busy_timeout_ms,
    )
    try:
        repository.init_schema()
        yield repository
    finally:
        repository.close()
