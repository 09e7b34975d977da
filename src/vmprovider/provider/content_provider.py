# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""
URI-level entry point for the voicemail status store.

``VoicemailStatusProvider`` matches incoming content URIs, checks the
caller's access, narrows reads and writes to the caller's own rows unless it
has full access, and hands the call to the table delegate.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any
from urllib.parse import urlsplit

from vmprovider.contract import PARAM_KEY_SOURCE_PACKAGE, STATUS_PATH, STATUS_TABLE, Status
from vmprovider.core.config import ProviderSettings
from vmprovider.core.notifications import ChangeNotifier
from vmprovider.core.uri import UriData, equality_clause, path_segments
from vmprovider.provider.helper import CallerIdentity, DefaultDelegateHelper, SourcePackageError
from vmprovider.provider.status_table import StatusTableDelegate
from vmprovider.provider.table import Delegate, UnsupportedOperationError
from vmprovider.storage.cursor import Cursor
from vmprovider.storage.database import DatabaseHelper
from vmprovider.storage.query_builder import concatenate_clauses, validate_selection

__all__ = ["UnknownUriError", "VoicemailStatusProvider"]

log = logging.getLogger(__name__)

_ROW_ID = re.compile(r"[0-9]+")


class UnknownUriError(ValueError):
    """Raised for URIs that no delegate serves."""


class VoicemailStatusProvider:
    """Dispatches content-URI operations to the status table delegate."""

    def __init__(
        self,
        db_helper: DatabaseHelper,
        *,
        calling_identity: Callable[[], CallerIdentity],
        notifier: ChangeNotifier | None = None,
        settings: ProviderSettings | None = None,
    ) -> None:
        self.settings = settings or db_helper.settings
        self.authority = self.settings.authority
        self.notifier = notifier or ChangeNotifier()
        self._calling_identity = calling_identity
        helper = DefaultDelegateHelper(self.notifier, calling_identity)
        self._status_delegate: Delegate = StatusTableDelegate(
            STATUS_TABLE, self.notifier, db_helper, helper
        )

    # ---- URI handling ------------------------------------------------------

    def _create_uri_data(self, uri: str) -> UriData:
        parts = urlsplit(uri)
        if parts.scheme != "content" or parts.netloc != self.authority:
            raise UnknownUriError(f"Unknown URI {uri}")
        segments = path_segments(uri)
        if segments == [STATUS_PATH]:
            return UriData.from_uri(uri, STATUS_TABLE)
        if len(segments) == 2 and segments[0] == STATUS_PATH and _ROW_ID.fullmatch(segments[1]):
            return UriData.from_uri(uri, STATUS_TABLE, has_id_segment=True)
        raise UnknownUriError(f"Unknown URI {uri}")

    def _delegate_for(self, uri_data: UriData) -> Delegate:
        return self._status_delegate

    # ---- access control ----------------------------------------------------

    def _check_caller_has_access(self) -> CallerIdentity:
        identity = self._calling_identity()
        if not identity.has_any_access:
            raise SourcePackageError(f"Package {identity.package} has no voicemail access")
        return identity

    @staticmethod
    def _check_source_package_same_if_set(uri_data: UriData, values: Mapping[str, Any]) -> None:
        if not uri_data.has_source_package() or PARAM_KEY_SOURCE_PACKAGE not in values:
            return
        value_package = values[PARAM_KEY_SOURCE_PACKAGE]
        if uri_data.source_package != value_package:
            raise ValueError(
                f"source_package in URI was {uri_data.source_package} but doesn't match "
                f"source_package in values which was {value_package}"
            )

    @staticmethod
    def _package_restriction_clause(identity: CallerIdentity) -> str | None:
        if identity.has_full_access:
            return None
        return equality_clause(Status.SOURCE_PACKAGE, identity.package)

    # ---- operations --------------------------------------------------------

    def insert(self, uri: str, values: Mapping[str, Any]) -> str | None:
        self._check_caller_has_access()
        uri_data = self._create_uri_data(uri)
        if uri_data.has_id():
            raise UnsupportedOperationError(f"Cannot insert on a URI containing id: {uri}")
        self._check_source_package_same_if_set(uri_data, values)
        log.debug("insert %s", uri)
        return self._delegate_for(uri_data).insert(uri_data, values)

    def bulk_insert(self, uri: str, values_array: Sequence[Mapping[str, Any]]) -> int:
        self._check_caller_has_access()
        uri_data = self._create_uri_data(uri)
        return self._delegate_for(uri_data).bulk_insert(uri_data, values_array)

    def query(
        self,
        uri: str,
        projection: Sequence[str] | None = None,
        selection: str | None = None,
        selection_args: Sequence[object] | None = None,
        sort_order: str | None = None,
    ) -> Cursor | None:
        identity = self._check_caller_has_access()
        uri_data = self._create_uri_data(uri)
        validate_selection(selection)
        combined = concatenate_clauses(selection, self._package_restriction_clause(identity))
        log.debug("query %s where %s", uri, combined)
        return self._delegate_for(uri_data).query(
            uri_data, projection, combined, selection_args, sort_order
        )

    def update(
        self,
        uri: str,
        values: Mapping[str, Any],
        selection: str | None = None,
        selection_args: Sequence[object] | None = None,
    ) -> int:
        identity = self._check_caller_has_access()
        uri_data = self._create_uri_data(uri)
        self._check_source_package_same_if_set(uri_data, values)
        validate_selection(selection)
        combined = concatenate_clauses(selection, self._package_restriction_clause(identity))
        log.debug("update %s where %s", uri, combined)
        return self._delegate_for(uri_data).update(uri_data, values, combined, selection_args)

    def delete(
        self,
        uri: str,
        selection: str | None = None,
        selection_args: Sequence[object] | None = None,
    ) -> int:
        identity = self._check_caller_has_access()
        uri_data = self._create_uri_data(uri)
        validate_selection(selection)
        combined = concatenate_clauses(selection, self._package_restriction_clause(identity))
        log.debug("delete %s where %s", uri, combined)
        return self._delegate_for(uri_data).delete(uri_data, combined, selection_args)

    def get_type(self, uri: str) -> str:
        uri_data = self._create_uri_data(uri)
        return self._delegate_for(uri_data).get_type(uri_data)

    def open_file(self, uri: str, mode: str) -> Any:
        self._check_caller_has_access()
        uri_data = self._create_uri_data(uri)
        return self._delegate_for(uri_data).open_file(uri_data, mode)
