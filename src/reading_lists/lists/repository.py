"""SQLModel-backed storage for reading lists and their entries."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from uuid import uuid4

from sqlalchemy import func
from sqlmodel import Session, col, select

from reading_lists.lists.models import (
    AddArticlesResult,
    EntryCreationError,
    ListExistsWithSameNameError,
    ListWithProvidedNameNotFoundError,
    ReadingListEntryView,
    ReadingListView,
    SavedArticle,
    UnableToCreateListError,
    WrongThreadError,
)
from reading_lists.lists.titles import derive_display_title
from reading_lists.storage.alembic_runner import upgrade_head
from reading_lists.storage.common import (
    build_sqlite_engine,
    connect_sqlite_with_policy,
    to_utc_aware_datetime,
    utc_now,
)
from reading_lists.storage.sqlmodel_models import (
    DEFAULT_USER_ID,
    AppUser,
    ReadingList,
    ReadingListEntry,
)

logger = logging.getLogger(__name__)
DEFAULT_MAX_ARTICLE_KEY_LENGTH = 2_048


class SQLiteReadingListRepository:
    """Reading list store bound to one long-lived session (the main context).

    The session is not thread-safe: every public operation must run on the
    thread that constructed the repository. Writes accumulate in the session
    and each operation commits at most once, as its last step, and only when
    something is pending.
    """

    def __init__(  # noqa: PLR0913
        self,
        db_path: Path,
        *,
        user_id: str = DEFAULT_USER_ID,
        user_name: str = "Default User",
        max_article_key_length: int = DEFAULT_MAX_ARTICLE_KEY_LENGTH,
        sqlite_busy_timeout_ms: int = 5_000,
    ) -> None:
        self.db_path = db_path
        self.user_id = user_id
        self.user_name = user_name
        self.max_article_key_length = max_article_key_length

        self.engine = build_sqlite_engine(
            db_path=db_path,
            busy_timeout_ms=sqlite_busy_timeout_ms,
        )
        # Keep low-level connection for tests and ad-hoc debugging queries.
        self._connection = connect_sqlite_with_policy(
            db_path=db_path,
            busy_timeout_ms=sqlite_busy_timeout_ms,
        )
        self._session = Session(self.engine, autoflush=False)
        self._owner_thread_id = threading.get_ident()

    def close(self) -> None:
        self._assert_owner_thread()
        self._session.close()
        self._connection.close()
        self.engine.dispose()

    def init_schema(self) -> None:
        upgrade_head(self.db_path)
        self._ensure_actor_context()

    def has_pending_changes(self) -> bool:
        return bool(self._session.new or self._session.dirty or self._session.deleted)

    def create_list(
        self,
        name: str,
        description: str | None = None,
        articles: Iterable[SavedArticle] = (),
    ) -> ReadingListView:
        try:
            reading_list = _new_list(user_id=self.user_id, name=name, description=description)
        except (TypeError, ValueError) as error:
            raise UnableToCreateListError() from error

        with self._main_context() as session:
            if self._find_list(name) is not None:
                raise ListExistsWithSameNameError(name)
            session.add(reading_list)
            list_id = reading_list.list_id
            result = self._attach_articles(reading_list, articles)

        logger.info(
            "Created reading list %r (list_id=%s entries=%d).",
            name,
            list_id,
            len(result.added),
        )
        return self.fetch_list(name)

    def delete_lists(self, names: Iterable[str]) -> int:
        requested = list(dict.fromkeys(names))
        if not requested:
            return 0

        with self._main_context() as session:
            rows = session.exec(
                select(ReadingList).where(
                    ReadingList.user_id == self.user_id,
                    col(ReadingList.name).in_(requested),
                ),
            ).all()
            deleted_names = [row.name for row in rows]
            # Entries go with their list through ON DELETE CASCADE.
            for row in rows:
                session.delete(row)

        if deleted_names:
            logger.info(
                "Deleted %d reading list(s): %s",
                len(deleted_names),
                ", ".join(repr(deleted) for deleted in sorted(deleted_names)),
            )
        return len(deleted_names)

    def add_articles(
        self,
        articles: Iterable[SavedArticle],
        list_name: str,
    ) -> AddArticlesResult:
        with self._main_context():
            reading_list = self._require_list(list_name)
            result = self._attach_articles(reading_list, articles)
        return result

    def remove_articles(self, articles: Iterable[SavedArticle], list_name: str) -> int:
        with self._main_context() as session:
            reading_list = self._require_list(list_name)
            keys, _ = _collect_keys(articles)
            if not keys:
                return 0

            entries = session.exec(
                select(ReadingListEntry)
                .join(ReadingList, col(ReadingList.list_id) == col(ReadingListEntry.list_id))
                .where(
                    ReadingList.user_id == self.user_id,
                    ReadingList.name_folded == _fold_name(list_name),
                    col(ReadingListEntry.article_key).in_(keys),
                ),
            ).all()
            for entry in entries:
                session.delete(entry)
            if entries:
                reading_list.updated_at = utc_now()
                session.add(reading_list)
        return len(entries)

    def get_lists_for_article(self, article: SavedArticle) -> list[ReadingListView]:
        """Every list holding the article, oldest list first."""

        article_key = article.key
        if article_key is None:
            return []

        with self._main_context() as session:
            rows = session.exec(
                select(ReadingList)
                .join(ReadingListEntry, col(ReadingListEntry.list_id) == col(ReadingList.list_id))
                .where(
                    ReadingList.user_id == self.user_id,
                    ReadingListEntry.article_key_folded == _fold_key(article_key),
                )
                .distinct()
                .order_by(col(ReadingList.created_at), col(ReadingList.list_id)),
            ).all()
            views = self._to_views(rows)
        return views

    def get_list_for_article(self, article: SavedArticle) -> ReadingListView | None:
        lists = self.get_lists_for_article(article)
        return lists[0] if lists else None

    def fetch_list(self, name: str) -> ReadingListView:
        with self._main_context():
            reading_list = self._require_list(name)
            view = self._to_views([reading_list])[0]
        return view

    def list_reading_lists(self) -> list[ReadingListView]:
        with self._main_context() as session:
            rows = session.exec(
                select(ReadingList)
                .where(ReadingList.user_id == self.user_id)
                .order_by(col(ReadingList.name_folded)),
            ).all()
            views = self._to_views(rows)
        return views

    def count_lists(self) -> int:
        with self._main_context() as session:
            count = int(
                session.exec(
                    select(func.count())
                    .select_from(ReadingList)
                    .where(col(ReadingList.user_id) == self.user_id),
                ).one(),
            )
        return count

    def count_saved_articles(self) -> int:
        """Distinct article keys across all of the user's lists."""

        with self._main_context() as session:
            count = int(
                session.exec(
                    select(func.count(col(ReadingListEntry.article_key).distinct()))
                    .select_from(ReadingListEntry)
                    .join(ReadingList, col(ReadingList.list_id) == col(ReadingListEntry.list_id))
                    .where(col(ReadingList.user_id) == self.user_id),
                ).one(),
            )
        return count

    @contextmanager
    def _main_context(self) -> Iterator[Session]:
        self._assert_owner_thread()
        try:
            yield self._session
        except BaseException:
            self._session.rollback()
            raise
        self._commit_if_pending()

    def _commit_if_pending(self) -> None:
        if not self.has_pending_changes():
            # Nothing to save; end the read transaction so later reads see fresh data.
            self._session.rollback()
            return
        try:
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def _assert_owner_thread(self) -> None:
        if threading.get_ident() != self._owner_thread_id:
            raise WrongThreadError(
                "Reading list repository must be used from the thread that created it.",
            )

    def _attach_articles(
        self,
        reading_list: ReadingList,
        articles: Iterable[SavedArticle],
    ) -> AddArticlesResult:
        keys, skipped_no_key = _collect_keys(articles)
        result = AddArticlesResult(skipped_no_key=skipped_no_key)
        existing_keys = self._existing_keys(reading_list.list_id)

        keys_to_add: list[str] = []
        for key in keys:
            if key in existing_keys:
                result.skipped_existing.append(key)
            else:
                keys_to_add.append(key)

        now = utc_now()
        for index, key in enumerate(keys_to_add):
            try:
                entry = self._new_entry(list_id=reading_list.list_id, article_key=key, now=now)
            except EntryCreationError as error:
                result.failed.append(key)
                result.aborted.extend(keys_to_add[index + 1 :])
                logger.warning(
                    "Stopped adding articles to reading list %r after %d of %d key(s): %s",
                    reading_list.name,
                    len(result.added),
                    len(keys_to_add),
                    error,
                )
                break
            self._session.add(entry)
            result.added.append(key)

        if result.added:
            reading_list.updated_at = now
            self._session.add(reading_list)
        return result

    def _new_entry(self, *, list_id: str, article_key: str, now: datetime) -> ReadingListEntry:
        if len(article_key) > self.max_article_key_length:
            raise EntryCreationError(
                f"article key is longer than {self.max_article_key_length} characters",
            )
        return ReadingListEntry(
            list_id=list_id,
            article_key=article_key,
            article_key_folded=_fold_key(article_key),
            display_title=derive_display_title(article_key),
            created_at=now,
        )

    def _existing_keys(self, list_id: str) -> set[str]:
        keys = self._session.exec(
            select(ReadingListEntry.article_key).where(ReadingListEntry.list_id == list_id),
        ).all()
        return set(keys)

    def _find_list(self, name: str) -> ReadingList | None:
        return self._session.exec(
            select(ReadingList)
            .where(
                ReadingList.user_id == self.user_id,
                ReadingList.name_folded == _fold_name(name),
            )
            .limit(1),
        ).first()

    def _require_list(self, name: str) -> ReadingList:
        reading_list = self._find_list(name)
        if reading_list is None:
            raise ListWithProvidedNameNotFoundError(name)
        return reading_list

    def _to_views(self, rows: Iterable[ReadingList]) -> list[ReadingListView]:
        rows = list(rows)
        entries_by_list: dict[str, list[ReadingListEntryView]] = defaultdict(list)
        if rows:
            entry_rows = self._session.exec(
                select(ReadingListEntry)
                .where(col(ReadingListEntry.list_id).in_([row.list_id for row in rows]))
                .order_by(col(ReadingListEntry.created_at), col(ReadingListEntry.entry_id)),
            ).all()
            for entry in entry_rows:
                entries_by_list[entry.list_id].append(
                    ReadingListEntryView(
                        entry_id=int(entry.entry_id or 0),
                        article_key=entry.article_key,
                        display_title=entry.display_title,
                        created_at=to_utc_aware_datetime(entry.created_at),
                    ),
                )

        return [
            ReadingListView(
                list_id=row.list_id,
                name=row.name,
                description=row.description,
                created_at=to_utc_aware_datetime(row.created_at),
                updated_at=to_utc_aware_datetime(row.updated_at),
                entries=entries_by_list[row.list_id],
            )
            for row in rows
        ]

    def _ensure_actor_context(self) -> None:
        with Session(self.engine) as session:
            user = session.get(AppUser, self.user_id)
            if user is None:
                user = AppUser(
                    user_id=self.user_id,
                    display_name=self.user_name,
                    created_at=utc_now(),
                )
                session.add(user)
            session.commit()


def _new_list(*, user_id: str, name: str, description: str | None) -> ReadingList:
    if not isinstance(name, str):
        raise TypeError(f"Reading list name must be a string, got {type(name).__name__}")
    if not name.strip():
        raise ValueError("Reading list name must not be blank")
    now = utc_now()
    return ReadingList(
        list_id=str(uuid4()),
        user_id=user_id,
        name=name,
        name_folded=_fold_name(name),
        description=description,
        created_at=now,
        updated_at=now,
    )


def _collect_keys(articles: Iterable[SavedArticle]) -> tuple[list[str], int]:
    """Unique article keys in first-seen order, plus how many articles had none.

    A blank key cannot be resolved to an article and counts as missing.
    """

    keys: dict[str, None] = {}
    missing = 0
    for article in articles:
        key = article.key
        if key is None or not key.strip():
            missing += 1
            continue
        keys.setdefault(key, None)
    return list(keys), missing


def _fold_name(name: str) -> str:
    return name.casefold()


def _fold_key(article_key: str) -> str:
    return article_key.casefold()
