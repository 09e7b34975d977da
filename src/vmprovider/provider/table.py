# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Interfaces shared by the provider and its per-table delegates."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from vmprovider.core.uri import UriData
from vmprovider.core.values import ContentValues
from vmprovider.storage.cursor import Cursor

__all__ = ["Delegate", "DelegateHelper", "UnsupportedOperationError"]


class UnsupportedOperationError(NotImplementedError):
    """Raised when a delegate does not offer an operation at all."""


@runtime_checkable
class DelegateHelper(Protocol):
    """Services a delegate borrows from the provider hosting it."""

    def check_and_add_source_package_into_values(
        self, uri_data: UriData, values: ContentValues
    ) -> None: ...

    def notify_change(self, uri: str, *kinds: str) -> None: ...


@runtime_checkable
class Delegate(Protocol):
    """CRUD contract implemented once per table."""

    def insert(self, uri_data: UriData, values: Mapping[str, Any]) -> str | None: ...

    def bulk_insert(self, uri_data: UriData, values_array: Sequence[Mapping[str, Any]]) -> int: ...

    def delete(
        self,
        uri_data: UriData,
        selection: str | None,
        selection_args: Sequence[object] | None,
    ) -> int: ...

    def query(
        self,
        uri_data: UriData,
        projection: Sequence[str] | None,
        selection: str | None,
        selection_args: Sequence[object] | None,
        sort_order: str | None,
    ) -> Cursor | None: ...

    def update(
        self,
        uri_data: UriData,
        values: Mapping[str, Any],
        selection: str | None,
        selection_args: Sequence[object] | None,
    ) -> int: ...

    def get_type(self, uri_data: UriData) -> str: ...

    def open_file(self, uri_data: UriData, mode: str) -> Any: ...
