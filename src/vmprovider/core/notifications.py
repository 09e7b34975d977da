# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""In-process change-notification registry keyed by content URI."""

from __future__ import annotations

import itertools
import logging
import threading
import weakref
from collections.abc import Callable
from dataclasses import dataclass

from vmprovider.core.uri import is_ancestor, without_query

__all__ = ["ChangeEvent", "ChangeNotifier", "ObserverHandle"]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """Payload delivered to observers."""

    uri: str
    kind: str | None = None


Observer = Callable[[ChangeEvent], None]


@dataclass(frozen=True)
class ObserverHandle:
    token: int
    uri: str
    notify_for_descendants: bool


class ChangeNotifier:
    """Registry of observers that want to hear about data changes.

    An observer registered for ``uri`` hears about changes to ``uri`` itself,
    to any ancestor of ``uri`` (a collection change may affect the row), and,
    when ``notify_for_descendants`` is set, to any URI below ``uri``.
    """

    def __init__(self) -> None:
        self._observers: dict[int, tuple[ObserverHandle, Callable[[], Observer | None]]] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def register_observer(
        self,
        uri: str,
        observer: Observer,
        *,
        notify_for_descendants: bool = True,
        weak: bool = False,
    ) -> ObserverHandle:
        """Start delivering changes under ``uri`` to ``observer``.

        With ``weak=True`` the observer must be a bound method; the registry
        does not keep its object alive and drops the entry once it is
        collected.
        """

        handle = ObserverHandle(
            token=next(self._tokens),
            uri=without_query(uri),
            notify_for_descendants=notify_for_descendants,
        )
        ref: Callable[[], Observer | None]
        if weak:
            ref = weakref.WeakMethod(observer)  # type: ignore[arg-type]
        else:
            ref = lambda: observer  # noqa: E731
        with self._lock:
            self._observers[handle.token] = (handle, ref)
        return handle

    def unregister_observer(self, handle: ObserverHandle) -> bool:
        with self._lock:
            return self._observers.pop(handle.token, None) is not None

    def _live_observers(self) -> list[tuple[ObserverHandle, Observer]]:
        # Caller holds self._lock.
        live = []
        for token, (handle, ref) in list(self._observers.items()):
            observer = ref()
            if observer is None:
                del self._observers[token]
            else:
                live.append((handle, observer))
        return live

    def observer_count(self) -> int:
        with self._lock:
            return len(self._live_observers())

    def _matches(self, handle: ObserverHandle, target: str) -> bool:
        if handle.uri == target or is_ancestor(target, handle.uri):
            return True
        return handle.notify_for_descendants and is_ancestor(handle.uri, target)

    def notify_change(self, uri: str, kind: str | None = None) -> int:
        """Deliver a :class:`ChangeEvent` for ``uri``; return observers invoked."""

        target = without_query(uri)
        with self._lock:
            matched = [
                obs for handle, obs in self._live_observers() if self._matches(handle, target)
            ]

        event = ChangeEvent(uri=uri, kind=kind)
        for observer in matched:
            try:
                observer(event)
            except Exception:
                log.exception("Change observer failed for %s", uri)
        log.debug("Notified %d observer(s) of change to %s (%s)", len(matched), uri, kind)
        return len(matched)
