# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""Content URI helpers and the per-call ``UriData`` value."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit, urlunsplit

from vmprovider.contract import PARAM_KEY_SOURCE_PACKAGE, Status
from vmprovider.storage.query_builder import concatenate_clauses

__all__ = [
    "UriData",
    "with_appended_id",
    "parse_id",
    "path_segments",
    "query_parameter",
    "without_query",
    "sql_escape_string",
    "equality_clause",
    "is_ancestor",
]


def with_appended_id(uri: str, row_id: int) -> str:
    """Return ``uri`` with ``row_id`` appended as the last path segment.

    Any query string on ``uri`` is preserved after the new segment.
    """

    parts = urlsplit(uri)
    path = parts.path.rstrip("/") + f"/{int(row_id)}"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def path_segments(uri: str) -> list[str]:
    return [seg for seg in urlsplit(uri).path.split("/") if seg]


def parse_id(uri: str) -> int:
    """Return the numeric last path segment of ``uri`` or ``-1``."""

    segments = path_segments(uri)
    if not segments:
        return -1
    try:
        return int(segments[-1])
    except ValueError:
        return -1


def query_parameter(uri: str, key: str) -> str | None:
    values = parse_qs(urlsplit(uri).query, keep_blank_values=True).get(key)
    return values[0] if values else None


def without_query(uri: str) -> str:
    parts = urlsplit(uri)
    return urlunsplit((parts.scheme, parts.netloc, parts.path.rstrip("/"), "", ""))


def is_ancestor(parent: str, child: str) -> bool:
    """Return True when ``parent`` is a strict path prefix of ``child``."""

    p, c = urlsplit(parent), urlsplit(child)
    if (p.scheme, p.netloc) != (c.scheme, c.netloc):
        return False
    p_segs, c_segs = path_segments(parent), path_segments(child)
    return len(p_segs) < len(c_segs) and c_segs[: len(p_segs)] == p_segs


def sql_escape_string(value: str) -> str:
    """Quote ``value`` as an SQL string literal."""

    return "'" + str(value).replace("'", "''") + "'"


def equality_clause(column: str, value: str) -> str:
    return f"{column}={sql_escape_string(value)}"


@dataclass(frozen=True)
class UriData:
    """Parsed view of a content URI addressed to one table.

    ``id`` is set when the URI targets a single row; ``source_package`` when
    the URI carries the ``source_package`` query parameter.
    """

    uri: str
    table: str
    id: int | None = None
    source_package: str | None = None

    @classmethod
    def from_uri(cls, uri: str, table: str, *, has_id_segment: bool = False) -> UriData:
        row_id = parse_id(uri) if has_id_segment else None
        if has_id_segment and row_id < 0:
            raise ValueError(f"URI {uri} does not end in a row id")
        return cls(
            uri=uri,
            table=table,
            id=row_id,
            source_package=query_parameter(uri, PARAM_KEY_SOURCE_PACKAGE),
        )

    def get_uri(self) -> str:
        return self.uri

    def has_id(self) -> bool:
        return self.id is not None

    def has_source_package(self) -> bool:
        return self.source_package is not None

    def get_where_clause(self) -> str | None:
        """Where-clause fragment restricting an operation to this URI."""

        return concatenate_clauses(
            f"{Status.ID}={self.id}" if self.has_id() else None,
            equality_clause(Status.SOURCE_PACKAGE, self.source_package)
            if self.source_package is not None
            else None,
        )
