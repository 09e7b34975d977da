# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Public package interface for the voicemail status provider."""

from vmprovider.contract import (
    DIR_TYPE,
    ITEM_TYPE,
    STATUS_CONTENT_URI,
    STATUS_TABLE,
    ConfigurationState,
    DataChannelState,
    NotificationChannelState,
    Status,
)
from vmprovider.core.config import ProviderSettings
from vmprovider.core.notifications import ChangeEvent, ChangeNotifier
from vmprovider.core.uri import UriData, with_appended_id
from vmprovider.core.values import ContentValues
from vmprovider.provider.content_provider import UnknownUriError, VoicemailStatusProvider
from vmprovider.provider.helper import CallerIdentity, DefaultDelegateHelper, SourcePackageError
from vmprovider.provider.status_table import STATUS_PROJECTION_MAP, StatusTableDelegate
from vmprovider.provider.table import UnsupportedOperationError
from vmprovider.storage.cursor import Cursor
from vmprovider.storage.database import DatabaseHelper, SQLiteDatabase
from vmprovider.storage.query_builder import InvalidColumnError, ProjectionMap

__version__ = "1.0.0"

__all__ = [
    "CallerIdentity",
    "ChangeEvent",
    "ChangeNotifier",
    "ConfigurationState",
    "ContentValues",
    "Cursor",
    "DataChannelState",
    "DatabaseHelper",
    "DefaultDelegateHelper",
    "DIR_TYPE",
    "ITEM_TYPE",
    "InvalidColumnError",
    "NotificationChannelState",
    "ProjectionMap",
    "ProviderSettings",
    "SQLiteDatabase",
    "STATUS_CONTENT_URI",
    "STATUS_PROJECTION_MAP",
    "STATUS_TABLE",
    "SourcePackageError",
    "Status",
    "StatusTableDelegate",
    "UnknownUriError",
    "UnsupportedOperationError",
    "UriData",
    "VoicemailStatusProvider",
    "with_appended_id",
]
