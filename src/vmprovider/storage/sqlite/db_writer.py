# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Single-writer queue for the provider database.

Every mutating statement is handed to one worker thread that owns the write
side of the connection, so at most one write runs at a time no matter how
many threads call into the provider. Callers block until their statement has
finished and receive its result (or its exception).

Usage:
    writer = DbWriter(conn)
    count = writer.run(lambda c: c.execute("DELETE ...").rowcount)
    writer.close()
"""

from __future__ import annotations

import logging
import queue
import sqlite3
import threading
from concurrent.futures import Future
from typing import Any, Callable, TypeVar

__all__ = ["DbWriter", "WriterClosed"]

log = logging.getLogger(__name__)

T = TypeVar("T")


class WriterClosed(RuntimeError):
    """Raised when a write is submitted after the writer is closed."""


class DbWriter:
    """Serialises write callables onto a dedicated thread."""

    def __init__(self, conn: sqlite3.Connection, *, name: str = "DbWriter") -> None:
        self.conn = conn
        self._queue: "queue.Queue[tuple[Future, Callable[[sqlite3.Connection], Any]] | None]" = (
            queue.Queue()
        )
        self._lock = threading.RLock()
        self._state_lock = threading.Lock()
        self._closed = False
        self._thread = threading.Thread(target=self._worker, name=name, daemon=True)
        self._thread.start()

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #
    @property
    def closed(self) -> bool:
        return self._closed

    def run(self, func: Callable[[sqlite3.Connection], T]) -> T:
        """Run ``func`` on the writer thread and return its result."""

        return self.submit(func).result()

    def submit(self, func: Callable[[sqlite3.Connection], T]) -> "Future[T]":
        if threading.current_thread() is self._thread:
            # Nested submission from inside a write would deadlock the queue.
            future: Future = Future()
            try:
                future.set_result(func(self.conn))
            except Exception as exc:
                future.set_exception(exc)
            return future
        future = Future()
        with self._state_lock:
            if self._closed:
                raise WriterClosed("Writer is closed")
            self._queue.put((future, func))
        return future

    def barrier(self) -> None:
        """Block until all writes queued so far have finished."""

        self.run(lambda _conn: None)

    def read_lock(self) -> threading.RLock:
        """Lock held while a write executes; readers take it to see whole writes."""

        return self._lock

    def close(self) -> None:
        """Drain pending writes and stop the worker thread."""

        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(None)
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join(timeout=5)

    # ------------------------------------------------------------------ #
    # Internal worker                                                    #
    # ------------------------------------------------------------------ #
    def _worker(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                self._queue.task_done()
                self._fail_pending()
                break
            future, func = item
            if not future.set_running_or_notify_cancel():
                self._queue.task_done()
                continue
            try:
                with self._lock:
                    result = func(self.conn)
                future.set_result(result)
            except Exception as exc:
                log.debug("Write failed on %s: %s", self._thread.name, exc)
                future.set_exception(exc)
            finally:
                self._queue.task_done()

    def _fail_pending(self) -> None:
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return
            self._queue.task_done()
            if item is not None and item[0].set_running_or_notify_cancel():
                item[0].set_exception(WriterClosed("Writer closed before the write ran"))

    # ------------------------------------------------------------------ #
    # Context manager helpers                                            #
    # ------------------------------------------------------------------ #
    def __enter__(self) -> DbWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
