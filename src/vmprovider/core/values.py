# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Column/value assignments used for inserts and updates."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Union

import pandas as pd

__all__ = ["ContentValues", "Scalar", "normalize_scalar"]

Scalar = Union[str, int, float, bytes, bool, None]

_SCALAR_TYPES = (str, int, float, bytes, bool)


def normalize_scalar(value: object) -> Scalar:
    """Return ``value`` as a storable scalar; NaN-like values become ``None``."""

    if value is None:
        return None
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, (str, bytes)):
        return value
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    if isinstance(value, _SCALAR_TYPES):
        return value
    # numpy / pandas scalars expose ``item()``
    item = getattr(value, "item", None)
    if callable(item):
        converted = item()
        if isinstance(converted, _SCALAR_TYPES):
            return converted
    raise TypeError(f"Unsupported value type {type(value).__name__!r}")


class ContentValues(MutableMapping[str, Scalar]):
    """Ordered column -> scalar mapping.

    ``ContentValues(other)`` always produces an independent copy, so a callee
    may mutate its copy without touching the caller's values.
    """

    def __init__(self, values: Mapping[str, object] | None = None, **kwargs: object) -> None:
        self._values: dict[str, Scalar] = {}
        if values is not None:
            for key, value in values.items():
                self[key] = value
        for key, value in kwargs.items():
            self[key] = value

    def __getitem__(self, key: str) -> Scalar:
        return self._values[key]

    def __setitem__(self, key: str, value: object) -> None:
        if not isinstance(key, str) or not key:
            raise TypeError("Column names must be non-empty strings")
        self._values[key] = normalize_scalar(value)

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ContentValues({self._values!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ContentValues):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def copy(self) -> ContentValues:
        return ContentValues(self)

    def get_as_string(self, key: str) -> str | None:
        value = self._values.get(key)
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)

    def columns(self) -> list[str]:
        return list(self._values)

    def params(self) -> list[Scalar]:
        return list(self._values.values())
