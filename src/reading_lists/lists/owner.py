"""Dedicated thread that owns the reading list repository session."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, TypeVar, cast

from reading_lists.lists.repository import SQLiteReadingListRepository

logger = logging.getLogger(__name__)
T = TypeVar("T")
_STOP = object()


@dataclass(slots=True)
class _Call:
    operation: Callable[..., Any]
    args: tuple[Any, ...]
    kwargs: dict[str, Any]
    future: Future[Any]


class MainContextOwner:
    """Runs every repository operation on one thread.

    The repository is built on the owner thread, so its thread assertion holds
    for all calls routed through :meth:`call`. Callers block until the
    operation finishes; its exception, if any, is re-raised in the caller.
    """

    def __init__(
        self,
        factory: Callable[[], SQLiteReadingListRepository],
        *,
        init_schema: bool = True,
    ) -> None:
        self._factory = factory
        self._init_schema = init_schema
        self._calls: queue.Queue[_Call | object] = queue.Queue()
        self._ready: Future[None] = Future()
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="reading-lists-main",
        )
        self._thread.start()
        self._ready.result()

    def call(
        self,
        operation: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """Run ``operation(repository, *args, **kwargs)`` on the owner thread."""

        if threading.current_thread() is self._thread:
            raise RuntimeError("MainContextOwner.call() must not run on the owner thread.")
        if not self._thread.is_alive():
            raise RuntimeError("MainContextOwner is closed.")
        future: Future[T] = Future()
        self._calls.put(_Call(operation=operation, args=args, kwargs=kwargs, future=future))
        return future.result()

    def close(self) -> None:
        if not self._thread.is_alive():
            return
        self._calls.put(_STOP)
        self._thread.join()

    def __enter__(self) -> MainContextOwner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _run(self) -> None:
        try:
            repository = self._factory()
        except BaseException as error:  # noqa: BLE001
            self._ready.set_exception(error)
            return
        if self._init_schema:
            try:
                repository.init_schema()
            except BaseException as error:  # noqa: BLE001
                try:
                    repository.close()
                finally:
                    self._ready.set_exception(error)
                return
        self._ready.set_result(None)
        logger.debug("Reading list main context started on thread %s", threading.get_ident())

        try:
            while True:
                item = self._calls.get()
                if item is _STOP:
                    break
                call = cast(_Call, item)
                if not call.future.set_running_or_notify_cancel():
                    continue
                try:
                    value = call.operation(repository, *call.args, **call.kwargs)
                except BaseException as error:  # noqa: BLE001
                    call.future.set_exception(error)
                else:
                    call.future.set_result(value)
        finally:
            repository.close()
            logger.debug("Reading list main context stopped")
