"""Domain models and errors for reading lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol


class ReadingListErrorKind(str, Enum):
    """Caller-facing validation failures."""

    LIST_EXISTS_WITH_SAME_NAME = "list_exists_with_same_name"
    LIST_NOT_FOUND = "list_not_found"
    UNABLE_TO_CREATE_LIST = "unable_to_create_list"


class ReadingListError(Exception):
    """Base for validation errors surfaced to the caller as-is."""

    kind: ReadingListErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReadingListError):
            return NotImplemented
        return self.kind == other.kind and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.kind, self.message))


class ListExistsWithSameNameError(ReadingListError):
    kind = ReadingListErrorKind.LIST_EXISTS_WITH_SAME_NAME

    def __init__(self, name: str) -> None:
        super().__init__(f"A reading list already exists with the name “{name}”")
        self.name = name


class ListWithProvidedNameNotFoundError(ReadingListError):
    kind = ReadingListErrorKind.LIST_NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(
            f"A reading list with the name “{name}” was not found. "
            "Please make sure you have the correct name.",
        )
        self.name = name


class UnableToCreateListError(ReadingListError):
    kind = ReadingListErrorKind.UNABLE_TO_CREATE_LIST

    def __init__(self) -> None:
        super().__init__(
            "An unexpected error occurred while creating your reading list. "
            "Please try again later.",
        )


class EntryCreationError(ValueError):
    """A single membership record could not be built for an article key."""


class WrongThreadError(RuntimeError):
    """Repository used outside the thread that owns its session."""


class SavedArticle(Protocol):
    """Anything that can be saved to a reading list."""

    @property
    def key(self) -> str | None: ...


@dataclass(frozen=True, slots=True)
class ArticleRef:
    """Minimal saved article: just the opaque URL-like key."""

    key: str | None


@dataclass(slots=True)
class ReadingListEntryView:
    """Membership of one article in one list."""

    entry_id: int
    article_key: str
    display_title: str | None
    created_at: datetime


@dataclass(slots=True)
class ReadingListView:
    """Read-only projection of a stored reading list."""

    list_id: str
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime
    entries: list[ReadingListEntryView] = field(default_factory=list)

    @property
    def article_keys(self) -> set[str]:
        return {entry.article_key for entry in self.entries}


@dataclass(slots=True)
class AddArticlesResult:
    """Per-key outcome of a best-effort membership batch."""

    added: list[str] = field(default_factory=list)
    skipped_existing: list[str] = field(default_factory=list)
    skipped_no_key: int = 0
    failed: list[str] = field(default_factory=list)
    aborted: list[str] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        """True when no key failed and nothing was left unattempted."""

        return not self.failed and not self.aborted
