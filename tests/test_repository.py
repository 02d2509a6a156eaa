from __future__ import annotations

import threading
from pathlib import Path

import allure
import pytest

from reading_lists.lists.models import (
    ArticleRef,
    ListExistsWithSameNameError,
    ListWithProvidedNameNotFoundError,
    ReadingListErrorKind,
    UnableToCreateListError,
    WrongThreadError,
)
from reading_lists.lists.repository import SQLiteReadingListRepository

pytestmark = [
    allure.epic("Reading Lists"),
    allure.feature("List Repository"),
]

PARIS = "https://en.wikipedia.org/wiki/Paris"
ROME = "https://en.wikipedia.org/wiki/Rome"
LISBON = "https://en.wikipedia.org/wiki/Lisbon"


@pytest.fixture()
def repo(tmp_path: Path):
    repository = SQLiteReadingListRepository(tmp_path / "lists.db")
    repository.init_schema()
    yield repository
    repository.close()


def _count(repository: SQLiteReadingListRepository, table: str) -> int:
    row = repository._connection.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()
    return int(row["n"])


def test_create_list_with_initial_article_derives_title(
    repo: SQLiteReadingListRepository,
) -> None:
    reading_list = repo.create_list("Travel", "Trips", [ArticleRef(key=PARIS)])

    assert reading_list.name == "Travel"
    assert reading_list.description == "Trips"
    assert [entry.article_key for entry in reading_list.entries] == [PARIS]
    assert reading_list.entries[0].display_title == "Paris"
    assert repo.count_lists() == 1
    assert repo.count_saved_articles() == 1


def test_create_list_rejects_case_insensitive_duplicate_name(
    repo: SQLiteReadingListRepository,
) -> None:
    repo.create_list("Travel", "Trips", [ArticleRef(key=PARIS)])

    with pytest.raises(ListExistsWithSameNameError) as exc_info:
        repo.create_list("travel", None, [ArticleRef(key=ROME)])

    assert exc_info.value.name == "travel"
    assert exc_info.value.kind is ReadingListErrorKind.LIST_EXISTS_WITH_SAME_NAME
    assert _count(repo, "reading_lists") == 1
    assert _count(repo, "reading_list_entries") == 1
    assert not repo.has_pending_changes()


def test_create_list_collision_error_references_requested_name(
    repo: SQLiteReadingListRepository,
) -> None:
    repo.create_list("Travel", "Trips")

    with pytest.raises(ListExistsWithSameNameError, match="Travel"):
        repo.create_list("Travel", "Trips")
    assert ListExistsWithSameNameError("Travel") == ListExistsWithSameNameError("Travel")
    assert ListExistsWithSameNameError("Travel") != ListExistsWithSameNameError("Trips")


def test_create_list_with_blank_name_fails_without_writing(
    repo: SQLiteReadingListRepository,
) -> None:
    with pytest.raises(UnableToCreateListError):
        repo.create_list("   ")

    assert _count(repo, "reading_lists") == 0


def test_add_articles_twice_is_idempotent(repo: SQLiteReadingListRepository) -> None:
    repo.create_list("Travel", "Trips", [ArticleRef(key=PARIS)])

    first = repo.add_articles([ArticleRef(key=PARIS), ArticleRef(key=ROME)], "Travel")
    second = repo.add_articles([ArticleRef(key=PARIS), ArticleRef(key=ROME)], "Travel")

    assert first.added == [ROME]
    assert first.skipped_existing == [PARIS]
    assert second.added == []
    assert second.skipped_existing == [PARIS, ROME]
    assert repo.fetch_list("Travel").article_keys == {PARIS, ROME}
    assert _count(repo, "reading_list_entries") == 2


def test_add_same_key_again_keeps_single_entry(repo: SQLiteReadingListRepository) -> None:
    repo.create_list("Travel", "Trips", [ArticleRef(key=PARIS)])

    repo.add_articles([ArticleRef(key=PARIS)], "Travel")

    assert len(repo.fetch_list("Travel").entries) == 1


def test_add_articles_collapses_repeated_keys_and_skips_missing_keys(
    repo: SQLiteReadingListRepository,
) -> None:
    repo.create_list("Travel")

    result = repo.add_articles(
        [ArticleRef(key=ROME), ArticleRef(key=None), ArticleRef(key=ROME), ArticleRef(key=PARIS)],
        "Travel",
    )

    assert result.added == [ROME, PARIS]
    assert result.skipped_no_key == 1
    assert result.completed
    assert [entry.article_key for entry in repo.fetch_list("Travel").entries] == [ROME, PARIS]


def test_add_articles_stops_batch_on_entry_failure_and_keeps_earlier_entries(
    tmp_path: Path,
) -> None:
    repository = SQLiteReadingListRepository(tmp_path / "limits.db", max_article_key_length=40)
    repository.init_schema()
    repository.create_list("Travel")
    too_long = "https://en.wikipedia.org/wiki/" + "A" * 40

    result = repository.add_articles(
        [ArticleRef(key=PARIS), ArticleRef(key=too_long), ArticleRef(key=ROME)],
        "Travel",
    )

    assert result.added == [PARIS]
    assert result.failed == [too_long]
    assert result.aborted == [ROME]
    assert not result.completed
    assert repository.fetch_list("Travel").article_keys == {PARIS}
    repository.close()


def test_add_articles_skips_blank_keys_without_stopping_batch(
    repo: SQLiteReadingListRepository,
) -> None:
    repo.create_list("Travel")

    result = repo.add_articles(
        [ArticleRef(key=""), ArticleRef(key="   "), ArticleRef(key=PARIS)],
        "Travel",
    )

    assert result.added == [PARIS]
    assert result.skipped_no_key == 2
    assert result.failed == []
    assert result.aborted == []
    assert result.completed
    assert repo.fetch_list("Travel").article_keys == {PARIS}


def test_add_articles_to_unknown_list_fails(repo: SQLiteReadingListRepository) -> None:
    with pytest.raises(ListWithProvidedNameNotFoundError):
        repo.add_articles([ArticleRef(key=PARIS)], "Nowhere")


def test_entry_without_parsable_title_has_no_display_title(
    repo: SQLiteReadingListRepository,
) -> None:
    reading_list = repo.create_list("Misc", None, [ArticleRef(key="not a url")])

    assert reading_list.entries[0].display_title is None


def test_remove_articles_empties_list_but_keeps_it(repo: SQLiteReadingListRepository) -> None:
    repo.create_list("Travel", "Trips", [ArticleRef(key=PARIS)])

    removed = repo.remove_articles([ArticleRef(key=PARIS)], "Travel")

    assert removed == 1
    reading_list = repo.fetch_list("Travel")
    assert reading_list.entries == []
    assert repo.count_lists() == 1


def test_remove_articles_matches_list_name_case_insensitively(
    repo: SQLiteReadingListRepository,
) -> None:
    repo.create_list("Travel", None, [ArticleRef(key=PARIS), ArticleRef(key=ROME)])

    removed = repo.remove_articles([ArticleRef(key=ROME), ArticleRef(key=None)], "TRAVEL")

    assert removed == 1
    assert repo.fetch_list("travel").article_keys == {PARIS}


def test_remove_articles_only_touches_named_list(repo: SQLiteReadingListRepository) -> None:
    repo.create_list("Travel", None, [ArticleRef(key=PARIS)])
    repo.create_list("France", None, [ArticleRef(key=PARIS)])

    repo.remove_articles([ArticleRef(key=PARIS)], "Travel")

    assert repo.fetch_list("France").article_keys == {PARIS}


def test_remove_articles_from_unknown_list_fails_without_deletions(
    repo: SQLiteReadingListRepository,
) -> None:
    repo.create_list("Travel", None, [ArticleRef(key=PARIS)])

    with pytest.raises(ListWithProvidedNameNotFoundError) as exc_info:
        repo.remove_articles([ArticleRef(key=PARIS)], "Nowhere")

    assert exc_info.value.name == "Nowhere"
    assert exc_info.value.kind is ReadingListErrorKind.LIST_NOT_FOUND
    assert _count(repo, "reading_list_entries") == 1


def test_delete_lists_cascades_entries(repo: SQLiteReadingListRepository) -> None:
    repo.create_list("Travel", "Trips", [ArticleRef(key=PARIS), ArticleRef(key=ROME)])
    repo.create_list("Keep", None, [ArticleRef(key=LISBON)])

    deleted = repo.delete_lists(["Travel"])

    assert deleted == 1
    assert _count(repo, "reading_lists") == 1
    assert _count(repo, "reading_list_entries") == 1
    with pytest.raises(ListWithProvidedNameNotFoundError):
        repo.fetch_list("Travel")


def test_delete_unknown_list_is_noop(repo: SQLiteReadingListRepository) -> None:
    repo.create_list("Travel")

    assert repo.delete_lists(["Nowhere"]) == 0
    assert repo.delete_lists([]) == 0
    assert repo.count_lists() == 1


def test_delete_lists_uses_exact_names(repo: SQLiteReadingListRepository) -> None:
    repo.create_list("Travel")

    assert repo.delete_lists(["travel"]) == 0
    assert repo.delete_lists(["Travel", "Missing"]) == 1


def test_get_lists_for_article_returns_every_owning_list(
    repo: SQLiteReadingListRepository,
) -> None:
    repo.create_list("Travel", None, [ArticleRef(key=PARIS)])
    repo.create_list("France", None, [ArticleRef(key=PARIS), ArticleRef(key=LISBON)])
    repo.create_list("Italy", None, [ArticleRef(key=ROME)])

    owners = repo.get_lists_for_article(ArticleRef(key=PARIS))

    assert [reading_list.name for reading_list in owners] == ["Travel", "France"]
    first = repo.get_list_for_article(ArticleRef(key=PARIS))
    assert first is not None
    assert first.name == "Travel"


def test_get_lists_for_article_matches_non_ascii_keys(
    repo: SQLiteReadingListRepository,
) -> None:
    eire = "https://en.wikipedia.org/wiki/Éire"
    repo.create_list("Ireland", None, [ArticleRef(key=eire)])

    exact = repo.get_lists_for_article(ArticleRef(key=eire))
    folded = repo.get_lists_for_article(ArticleRef(key="https://en.wikipedia.org/wiki/éire"))

    assert [reading_list.name for reading_list in exact] == ["Ireland"]
    assert [reading_list.name for reading_list in folded] == ["Ireland"]


def test_get_list_for_article_without_key_or_entry_returns_nothing(
    repo: SQLiteReadingListRepository,
) -> None:
    repo.create_list("Travel", None, [ArticleRef(key=PARIS)])

    assert repo.get_list_for_article(ArticleRef(key=None)) is None
    assert repo.get_list_for_article(ArticleRef(key=ROME)) is None
    assert repo.get_lists_for_article(ArticleRef(key=None)) == []


def test_saved_article_count_counts_distinct_keys(repo: SQLiteReadingListRepository) -> None:
    repo.create_list("Travel", None, [ArticleRef(key=PARIS), ArticleRef(key=ROME)])
    repo.create_list("France", None, [ArticleRef(key=PARIS)])

    assert repo.count_lists() == 2
    assert repo.count_saved_articles() == 2


def test_list_reading_lists_orders_by_name(repo: SQLiteReadingListRepository) -> None:
    repo.create_list("b-list")
    repo.create_list("A-list")

    assert [reading_list.name for reading_list in repo.list_reading_lists()] == [
        "A-list",
        "b-list",
    ]


def test_lists_are_scoped_to_user(tmp_path: Path) -> None:
    db_path = tmp_path / "scoped.db"
    alice = SQLiteReadingListRepository(db_path, user_id="alice", user_name="Alice")
    alice.init_schema()
    bob = SQLiteReadingListRepository(db_path, user_id="bob", user_name="Bob")
    bob.init_schema()

    alice.create_list("Travel", None, [ArticleRef(key=PARIS)])
    bob.create_list("Travel")

    assert alice.count_saved_articles() == 1
    assert bob.count_saved_articles() == 0
    alice.close()
    bob.close()


def test_repository_rejects_calls_from_other_threads(repo: SQLiteReadingListRepository) -> None:
    errors: list[BaseException] = []

    def _call() -> None:
        try:
            repo.count_lists()
        except BaseException as error:  # noqa: BLE001
            errors.append(error)

    worker = threading.Thread(target=_call)
    worker.start()
    worker.join()

    assert len(errors) == 1
    assert isinstance(errors[0], WrongThreadError)


def test_changes_survive_reopening_database(tmp_path: Path) -> None:
    db_path = tmp_path / "durable.db"
    first = SQLiteReadingListRepository(db_path)
    first.init_schema()
    first.create_list("Travel", "Trips", [ArticleRef(key=PARIS)])
    first.close()

    second = SQLiteReadingListRepository(db_path)
    second.init_schema()
    reading_list = second.fetch_list("Travel")
    assert reading_list.description == "Trips"
    assert reading_list.article_keys == {PARIS}
    second.close()
