# vmprovider
# Copyright © 2025 Osvaldo J. Vega Rodríguez
# Licensed under CC BY-NC-SA 4.0 International
# http://creativecommons.org/licenses/by-nc-sa/4.0/

"""
Column allow-lists and a strict SELECT builder.

``ProjectionMap`` fixes the set of columns a table exposes to readers;
``StrictQueryBuilder`` refuses projections or sort orders that step outside
it instead of silently dropping the offending columns.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vmprovider.storage.cursor import Cursor
    from vmprovider.storage.database import SQLiteDatabase

__all__ = [
    "InvalidColumnError",
    "ProjectionMap",
    "StrictQueryBuilder",
    "concatenate_clauses",
    "validate_selection",
]

log = logging.getLogger(__name__)

_SORT_TERM = re.compile(
    r"^(?P<column>[A-Za-z_][A-Za-z0-9_]*)"
    r"(?:\s+COLLATE\s+(?P<collation>[A-Za-z_][A-Za-z0-9_]*))?"
    r"(?:\s+(?P<direction>ASC|DESC))?$",
    re.IGNORECASE,
)


class InvalidColumnError(ValueError):
    """Raised when a query references a column outside the allow-list."""

    def __init__(self, column: str, table: str | None = None):
        self.column = column
        self.table = table
        where = f" for table {table}" if table else ""
        super().__init__(f"Invalid column {column}{where}")


def concatenate_clauses(*clauses: str | None) -> str | None:
    """AND together the non-empty ``clauses``, each wrapped in parentheses."""

    parts = [f"({clause})" for clause in clauses if clause]
    if not parts:
        return None
    return " AND ".join(parts)


class ProjectionMap(Sequence[str]):
    """Immutable, ordered set of column names readable through a query."""

    __slots__ = ("_columns", "_lookup")

    def __init__(self, columns: Iterable[str]):
        cols = tuple(columns)
        seen: set[str] = set()
        for col in cols:
            if not col or not isinstance(col, str):
                raise ValueError("Projection map columns must be non-empty strings")
            if col in seen:
                raise ValueError(f"Duplicate column {col!r} in projection map")
            seen.add(col)
        self._columns = cols
        self._lookup = frozenset(cols)

    class Builder:
        def __init__(self) -> None:
            self._columns: list[str] = []

        def add(self, column: str) -> ProjectionMap.Builder:
            self._columns.append(column)
            return self

        def build(self) -> ProjectionMap:
            return ProjectionMap(self._columns)

    def __getitem__(self, index):  # type: ignore[override]
        return self._columns[index]

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __contains__(self, column: object) -> bool:
        return column in self._lookup

    def __repr__(self) -> str:
        return f"ProjectionMap({list(self._columns)!r})"

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns


def _has_balanced_parentheses(clause: str) -> bool:
    depth = 0
    quote: str | None = None
    for ch in clause:
        if quote:
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0 and quote is None


def validate_selection(selection: str | None) -> None:
    """Reject a caller selection that could close the parentheses around it.

    Run this on the raw caller text before it is ANDed with other clauses;
    once combined, ``1) OR (1`` balances out and slips past the check.
    """

    if selection and not _has_balanced_parentheses(selection):
        raise ValueError(f"Invalid selection: {selection}")


class StrictQueryBuilder:
    """Build and run SELECT statements against one table.

    With ``strict=True`` every projected or sorted column must be present in
    ``projection_map`` and the caller's selection must be a self-contained
    expression.
    """

    def __init__(self, table: str, projection_map: ProjectionMap, *, strict: bool = True):
        self.table = table
        self.projection_map = projection_map
        self.strict = strict

    # ---- validation ------------------------------------------------------

    def _columns_for(self, projection: Sequence[str] | None) -> list[str]:
        if not projection:
            return list(self.projection_map)
        columns = []
        for column in projection:
            if column in self.projection_map:
                columns.append(column)
            elif self.strict:
                raise InvalidColumnError(column, self.table)
            else:
                log.debug("Passing unmapped column %s through to %s", column, self.table)
                columns.append(column)
        return columns

    def _validate_sort_order(self, sort_order: str | None) -> str | None:
        if not sort_order or not sort_order.strip():
            return None
        if not self.strict:
            return sort_order
        terms = []
        for raw_term in sort_order.split(","):
            term = raw_term.strip()
            match = _SORT_TERM.match(term)
            if match is None:
                raise InvalidColumnError(term, self.table)
            if match.group("column") not in self.projection_map:
                raise InvalidColumnError(match.group("column"), self.table)
            terms.append(term)
        return ", ".join(terms)

    def _validate_selection(self, selection: str | None) -> None:
        if self.strict:
            validate_selection(selection)

    # ---- building --------------------------------------------------------

    def build_query(
        self,
        projection: Sequence[str] | None = None,
        selection: str | None = None,
        *,
        group_by: str | None = None,
        having: str | None = None,
        sort_order: str | None = None,
        limit: str | int | None = None,
    ) -> str:
        """Return the SELECT statement text; raise on allow-list violations."""

        columns = self._columns_for(projection)
        order = self._validate_sort_order(sort_order)
        self._validate_selection(selection)

        sql = [f"SELECT {', '.join(columns)}", f"FROM {self.table}"]
        if selection:
            sql.append(f"WHERE ({selection})")
        if group_by:
            sql.append(f"GROUP BY {group_by}")
        if having:
            sql.append(f"HAVING {having}")
        if order:
            sql.append(f"ORDER BY {order}")
        if limit is not None and str(limit).strip():
            sql.append(f"LIMIT {int(limit)}")
        return " ".join(sql)

    def query(
        self,
        db: SQLiteDatabase,
        projection: Sequence[str] | None,
        selection: str | None,
        selection_args: Sequence[object] | None,
        group_by: str | None = None,
        having: str | None = None,
        sort_order: str | None = None,
        limit: str | int | None = None,
    ) -> Cursor:
        sql = self.build_query(
            projection,
            selection,
            group_by=group_by,
            having=having,
            sort_order=sort_order,
            limit=limit,
        )
        log.debug("Query on %s: %s %s", self.table, sql, list(selection_args or ()))
        return db.raw_query(sql, selection_args)
