# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Delegate for the voicemail status table."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from vmprovider.contract import ACTION_PROVIDER_CHANGED, STATUS_CONTENT_URI, Status
from vmprovider.core.notifications import ChangeNotifier
from vmprovider.core.uri import UriData, with_appended_id
from vmprovider.core.values import ContentValues
from vmprovider.provider.table import DelegateHelper, UnsupportedOperationError
from vmprovider.storage.cursor import Cursor
from vmprovider.storage.database import DatabaseHelper
from vmprovider.storage.query_builder import (
    ProjectionMap,
    StrictQueryBuilder,
    concatenate_clauses,
    validate_selection,
)

__all__ = ["StatusTableDelegate", "STATUS_PROJECTION_MAP"]

log = logging.getLogger(__name__)

STATUS_PROJECTION_MAP = (
    ProjectionMap.Builder()
    .add(Status.ID)
    .add(Status.CONFIGURATION_STATE)
    .add(Status.DATA_CHANNEL_STATE)
    .add(Status.NOTIFICATION_CHANNEL_STATE)
    .add(Status.SETTINGS_URI)
    .add(Status.SOURCE_PACKAGE)
    .add(Status.VOICEMAIL_ACCESS_URI)
    .build()
)


class StatusTableDelegate:
    """Maps provider operations onto the status table.

    Reads are limited to :data:`STATUS_PROJECTION_MAP`; writes notify
    observers only when at least one row changed.
    """

    def __init__(
        self,
        table_name: str,
        notifier: ChangeNotifier,
        db_helper: DatabaseHelper,
        delegate_helper: DelegateHelper,
    ) -> None:
        self._table_name = table_name
        self._notifier = notifier
        self._db_helper = db_helper
        self._delegate_helper = delegate_helper

    @property
    def table_name(self) -> str:
        return self._table_name

    def insert(self, uri_data: UriData, values: Mapping[str, Any]) -> str | None:
        db = self._db_helper.get_writable_database()
        copied_values = ContentValues(values)
        self._delegate_helper.check_and_add_source_package_into_values(uri_data, copied_values)
        row_id = db.insert(self._table_name, copied_values)
        if row_id > 0:
            new_uri = with_appended_id(uri_data.get_uri(), row_id)
            self._delegate_helper.notify_change(new_uri, ACTION_PROVIDER_CHANGED)
            return new_uri
        log.warning("Insert into %s declined for %s", self._table_name, uri_data.get_uri())
        return None

    def bulk_insert(self, uri_data: UriData, values_array: Sequence[Mapping[str, Any]]) -> int:
        raise UnsupportedOperationError("bulk_insert is not supported for status table")

    def delete(
        self,
        uri_data: UriData,
        selection: str | None,
        selection_args: Sequence[object] | None,
    ) -> int:
        validate_selection(selection)
        db = self._db_helper.get_writable_database()
        combined_clause = concatenate_clauses(selection, uri_data.get_where_clause())
        count = db.delete(self._table_name, combined_clause, selection_args)
        if count > 0:
            self._delegate_helper.notify_change(uri_data.get_uri(), ACTION_PROVIDER_CHANGED)
        return count

    def query(
        self,
        uri_data: UriData,
        projection: Sequence[str] | None,
        selection: str | None,
        selection_args: Sequence[object] | None,
        sort_order: str | None,
    ) -> Cursor | None:
        validate_selection(selection)
        qb = StrictQueryBuilder(self._table_name, STATUS_PROJECTION_MAP, strict=True)
        combined_clause = concatenate_clauses(selection, uri_data.get_where_clause())
        db = self._db_helper.get_readable_database()
        c = qb.query(db, projection, combined_clause, selection_args, None, None, sort_order)
        if c is not None:
            c.set_notification_uri(self._notifier, STATUS_CONTENT_URI)
        return c

    def update(
        self,
        uri_data: UriData,
        values: Mapping[str, Any],
        selection: str | None,
        selection_args: Sequence[object] | None,
    ) -> int:
        validate_selection(selection)
        db = self._db_helper.get_writable_database()
        combined_clause = concatenate_clauses(selection, uri_data.get_where_clause())
        count = db.update(self._table_name, ContentValues(values), combined_clause, selection_args)
        if count > 0:
            self._delegate_helper.notify_change(uri_data.get_uri(), ACTION_PROVIDER_CHANGED)
        return count

    def get_type(self, uri_data: UriData) -> str:
        if uri_data.has_id():
            return Status.ITEM_TYPE
        return Status.DIR_TYPE

    def open_file(self, uri_data: UriData, mode: str) -> Any:
        raise UnsupportedOperationError("File operation is not supported for status table")
