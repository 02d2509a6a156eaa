"""CLI entrypoint for reading-lists."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import rich_click as click

from reading_lists import __version__
from reading_lists.history.controllers import HistoryCliController, HistoryCommand
from reading_lists.history.models import SnapshotBaselineMissingError
from reading_lists.lists.controllers import (
    CreateListCommand,
    DeleteListsCommand,
    ListListsCommand,
    ListsCliController,
    ListsForArticleCommand,
    MembershipCommand,
    ShowListCommand,
)
from reading_lists.lists.models import ReadingListError

click.rich_click.USE_MARKDOWN = True
LISTS_CONTROLLER = ListsCliController()
HISTORY_CONTROLLER = HistoryCliController()
T = TypeVar("T")

_DB_PATH_OPTION = click.option(
    "--db-path",
    type=click.Path(path_type=Path),
    default=None,
    help="SQLite DB path.",
)


@click.group()
@click.version_option(version=__version__, prog_name="reading-lists")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def reading_lists(log_level: str) -> None:
    """Reading lists CLI."""

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@reading_lists.group()
def lists() -> None:
    """Reading list commands."""


@lists.command("create")
@_DB_PATH_OPTION
@click.argument("name")
@click.option("--description", default=None, help="Optional list description.")
@click.option(
    "--article",
    "article_keys",
    multiple=True,
    help="Article key (URL) to save to the new list. Can be repeated.",
)
def lists_create(
    db_path: Path | None,
    name: str,
    description: str | None,
    article_keys: tuple[str, ...],
) -> None:
    """Create a reading list, optionally with initial articles."""

    _emit_lines(
        _guarded(
            lambda: LISTS_CONTROLLER.create(
                CreateListCommand(
                    db_path=db_path,
                    name=name,
                    description=description,
                    article_keys=article_keys,
                ),
            ),
        ),
    )


@lists.command("delete")
@_DB_PATH_OPTION
@click.argument("names", nargs=-1, required=True)
def lists_delete(db_path: Path | None, names: tuple[str, ...]) -> None:
    """Delete reading lists by exact name. Unknown names are ignored."""

    _emit_lines(LISTS_CONTROLLER.delete(DeleteListsCommand(db_path=db_path, names=names)))


@lists.command("add")
@_DB_PATH_OPTION
@click.argument("name")
@click.argument("article_keys", nargs=-1, required=True)
def lists_add(db_path: Path | None, name: str, article_keys: tuple[str, ...]) -> None:
    """Save articles to a reading list. Already saved articles are skipped."""

    _emit_lines(
        _guarded(
            lambda: LISTS_CONTROLLER.add(
                MembershipCommand(db_path=db_path, name=name, article_keys=article_keys),
            ),
        ),
    )


@lists.command("remove")
@_DB_PATH_OPTION
@click.argument("name")
@click.argument("article_keys", nargs=-1, required=True)
def lists_remove(db_path: Path | None, name: str, article_keys: tuple[str, ...]) -> None:
    """Remove articles from a reading list. The list itself is kept."""

    _emit_lines(
        _guarded(
            lambda: LISTS_CONTROLLER.remove(
                MembershipCommand(db_path=db_path, name=name, article_keys=article_keys),
            ),
        ),
    )


@lists.command("show")
@_DB_PATH_OPTION
@click.argument("name")
def lists_show(db_path: Path | None, name: str) -> None:
    """Show one reading list with its entries."""

    _emit_lines(
        _guarded(lambda: LISTS_CONTROLLER.show(ShowListCommand(db_path=db_path, name=name))),
    )


@lists.command("ls")
@_DB_PATH_OPTION
def lists_ls(db_path: Path | None) -> None:
    """List all reading lists."""

    _emit_lines(LISTS_CONTROLLER.list_all(ListListsCommand(db_path=db_path)))


@lists.command("for-article")
@_DB_PATH_OPTION
@click.argument("article_key")
def lists_for_article(db_path: Path | None, article_key: str) -> None:
    """Show every reading list that holds an article."""

    _emit_lines(
        LISTS_CONTROLLER.for_article(
            ListsForArticleCommand(db_path=db_path, article_key=article_key),
        ),
    )


@reading_lists.group()
def history() -> None:
    """User history snapshot commands."""


@history.command("baseline")
@_DB_PATH_OPTION
def history_baseline(db_path: Path | None) -> None:
    """Store the current snapshot as baseline without logging an event."""

    _emit_lines(HISTORY_CONTROLLER.baseline(HistoryCommand(db_path=db_path)))


@history.command("log")
@_DB_PATH_OPTION
def history_log(db_path: Path | None) -> None:
    """Log a user history event if the snapshot changed since the last one."""

    result = _guarded(lambda: HISTORY_CONTROLLER.log(HistoryCommand(db_path=db_path)))
    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("User history snapshot logging failed.")


def _guarded(action: Callable[[], T]) -> T:
    try:
        return action()
    except (ReadingListError, SnapshotBaselineMissingError) as error:
        raise click.ClickException(str(error)) from error


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    reading_lists()
