# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Caller identity checks and change notification for delegates."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from vmprovider.contract import PARAM_KEY_SOURCE_PACKAGE
from vmprovider.core.notifications import ChangeNotifier
from vmprovider.core.uri import UriData
from vmprovider.core.values import ContentValues

__all__ = [
    "CallerIdentity",
    "DefaultDelegateHelper",
    "SourcePackageError",
    "check_packages_match",
]

log = logging.getLogger(__name__)


class SourcePackageError(PermissionError):
    """Raised when a caller may not act on behalf of a source package."""


@dataclass(frozen=True)
class CallerIdentity:
    """Who is calling the provider and what they may touch.

    ``has_own_access`` lets a package manage rows it owns;
    ``has_full_access`` lets it read and write every package's rows.
    """

    package: str
    has_own_access: bool = True
    has_full_access: bool = False

    @property
    def has_any_access(self) -> bool:
        return self.has_own_access or self.has_full_access


def check_packages_match(calling_package: str, source_package: str | None, uri: str) -> None:
    if source_package is None or calling_package != source_package:
        raise SourcePackageError(
            f"Provider {calling_package} does not have access to content of {uri} "
            f"owned by {source_package}"
        )


class DefaultDelegateHelper:
    """Stamps the writing package into new rows and fans out change events."""

    def __init__(
        self,
        notifier: ChangeNotifier,
        calling_identity: Callable[[], CallerIdentity],
    ) -> None:
        self._notifier = notifier
        self._calling_identity = calling_identity

    def check_and_add_source_package_into_values(
        self, uri_data: UriData, values: ContentValues
    ) -> None:
        identity = self._calling_identity()
        if PARAM_KEY_SOURCE_PACKAGE not in values:
            package = (
                uri_data.source_package if uri_data.has_source_package() else identity.package
            )
            values[PARAM_KEY_SOURCE_PACKAGE] = package
        if not identity.has_full_access:
            check_packages_match(
                identity.package,
                values.get_as_string(PARAM_KEY_SOURCE_PACKAGE),
                uri_data.get_uri(),
            )

    def notify_change(self, uri: str, *kinds: str) -> None:
        kind = kinds[0] if kinds else None
        count = self._notifier.notify_change(uri, kind)
        log.debug("Change %s on %s reached %d observer(s)", kind, uri, count)
