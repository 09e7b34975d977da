# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Materialised query results with change subscriptions."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any

import pandas as pd

from vmprovider.core.notifications import ChangeEvent, ChangeNotifier, ObserverHandle

__all__ = ["Cursor"]

log = logging.getLogger(__name__)


class Cursor:
    """Rows returned by a query.

    Rows are fetched eagerly so the underlying sqlite cursor can be closed
    before the result leaves the storage layer. A cursor may be bound to a
    notification URI; any change under that URI marks it stale and is
    forwarded to observers registered on the cursor.
    """

    def __init__(self, columns: Sequence[str], rows: Sequence[Sequence[Any]]):
        self.columns: tuple[str, ...] = tuple(columns)
        self._rows: list[tuple[Any, ...]] = [tuple(row) for row in rows]
        self._notifier: ChangeNotifier | None = None
        self._handle: ObserverHandle | None = None
        self._observers: list[Callable[[ChangeEvent], None]] = []
        self.notification_uri: str | None = None
        self.is_stale = False
        self.closed = False

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(self._rows)

    def __enter__(self) -> Cursor:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def count(self) -> int:
        return len(self._rows)

    def get_column_index(self, column: str) -> int:
        """Return the index of ``column`` or ``-1`` when it was not projected."""

        try:
            return self.columns.index(column)
        except ValueError:
            return -1

    def fetchall(self) -> list[tuple[Any, ...]]:
        return list(self._rows)

    def to_records(self) -> list[dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self._rows]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(self._rows, columns=list(self.columns))

    # ---- notifications ---------------------------------------------------

    def set_notification_uri(self, notifier: ChangeNotifier, uri: str) -> None:
        """Watch ``uri`` (and everything below it) for changes.

        The subscription is weak: dropping an unclosed cursor releases it.
        """

        if self._handle is not None and self._notifier is not None:
            self._notifier.unregister_observer(self._handle)
        self._notifier = notifier
        self.notification_uri = uri
        self._handle = notifier.register_observer(
            uri, self._on_change, notify_for_descendants=True, weak=True
        )

    def register_content_observer(self, observer: Callable[[ChangeEvent], None]) -> None:
        self._observers.append(observer)

    def unregister_content_observer(self, observer: Callable[[ChangeEvent], None]) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _on_change(self, event: ChangeEvent) -> None:
        self.is_stale = True
        for observer in list(self._observers):
            observer(event)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._handle is not None and self._notifier is not None:
            self._notifier.unregister_observer(self._handle)
        self._handle = None
        self._observers.clear()
