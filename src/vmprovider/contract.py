# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Public contract for the voicemail status table.

Column names, content URIs and MIME types shared by the provider, its
delegates and any client reading status rows.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final

__all__ = [
    "AUTHORITY",
    "AUTHORITY_URI",
    "STATUS_TABLE",
    "STATUS_PATH",
    "STATUS_CONTENT_URI",
    "DIR_TYPE",
    "ITEM_TYPE",
    "PARAM_KEY_SOURCE_PACKAGE",
    "ACTION_PROVIDER_CHANGED",
    "Status",
    "ConfigurationState",
    "DataChannelState",
    "NotificationChannelState",
]

AUTHORITY: Final = "com.android.voicemail"
AUTHORITY_URI: Final = f"content://{AUTHORITY}"

STATUS_TABLE: Final = "voicemail_status"
STATUS_PATH: Final = "status"
STATUS_CONTENT_URI: Final = f"{AUTHORITY_URI}/{STATUS_PATH}"

DIR_TYPE: Final = "vnd.android.cursor.dir/voicemail.source.status"
ITEM_TYPE: Final = "vnd.android.cursor.item/voicemail.source.status"

# Query parameter that scopes a URI to a single voicemail source.
PARAM_KEY_SOURCE_PACKAGE: Final = "source_package"

ACTION_PROVIDER_CHANGED: Final = "android.intent.action.PROVIDER_CHANGED"


class Status:
    """Column names of the status table."""

    ID: Final = "_id"
    CONFIGURATION_STATE: Final = "configuration_state"
    DATA_CHANNEL_STATE: Final = "data_channel_state"
    NOTIFICATION_CHANNEL_STATE: Final = "notification_channel_state"
    SETTINGS_URI: Final = "settings_uri"
    SOURCE_PACKAGE: Final = "source_package"
    VOICEMAIL_ACCESS_URI: Final = "voicemail_access_uri"

    CONTENT_URI: Final = STATUS_CONTENT_URI
    DIR_TYPE: Final = DIR_TYPE
    ITEM_TYPE: Final = ITEM_TYPE


class ConfigurationState(IntEnum):
    OK = 0
    NOT_CONFIGURED = 1
    CAN_BE_CONFIGURED = 2


class DataChannelState(IntEnum):
    OK = 0
    NO_CONNECTION = 1


class NotificationChannelState(IntEnum):
    OK = 0
    NO_CONNECTION = 1
    MESSAGE_WAITING = 2
