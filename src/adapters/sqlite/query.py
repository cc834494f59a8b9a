"""
Predicate -> SQL translation for the SQLite repositories.

Field names never reach the SQL text directly: each repo passes the map of
entity fields it allows, and anything outside that map is rejected.
"""

import sqlite3
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from src.components.listing.models import AnyOf, Condition, Predicate


def _casefold(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


def register_functions(conn: sqlite3.Connection) -> None:
    """Install the SQL functions the WHERE builder relies on."""
    # SQLite's own lower()/LIKE only fold ASCII
    conn.create_function("casefold", 1, _casefold, deterministic=True)


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _column(columns: Mapping[str, str], field: str) -> str:
    try:
        return columns[field]
    except KeyError:
        raise ValueError(f"Field '{field}' cannot be queried") from None


def _sql_value(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, UUID):
        return str(value)
    return value


def _condition_sql(cond: Condition, columns: Mapping[str, str]) -> tuple[str, list[Any]]:
    col = _column(columns, cond.field)
    if cond.op == "eq":
        return f"{col} = ?", [_sql_value(cond.value)]
    if cond.op == "lte":
        return f"{col} <= ?", [_sql_value(cond.value)]
    if cond.op == "icontains":
        needle = escape_like(str(cond.value).casefold())
        return f"casefold({col}) LIKE ? ESCAPE '\\'", [f"%{needle}%"]
    raise ValueError(f"Unsupported operator: {cond.op}")


def build_where(predicate: Predicate, columns: Mapping[str, str]) -> tuple[str, list[Any]]:
    """
    Build a WHERE clause (including the keyword) for a predicate.

    Returns ("", []) for the empty predicate.
    """
    clauses: list[str] = []
    params: list[Any] = []

    for entry in predicate:
        if isinstance(entry, AnyOf):
            if not entry.conditions:
                clauses.append("0")
                continue
            parts = []
            for cond in entry.conditions:
                sql, p = _condition_sql(cond, columns)
                parts.append(sql)
                params.extend(p)
            clauses.append("(" + " OR ".join(parts) + ")")
        else:
            sql, p = _condition_sql(entry, columns)
            clauses.append(sql)
            params.extend(p)

    if not clauses:
        return "", []
    return "WHERE " + " AND ".join(clauses), params


def build_order_by(sort_field: str, descending: bool, columns: Mapping[str, str]) -> str:
    col = _column(columns, sort_field)
    direction = "DESC" if descending else "ASC"
    # id keeps pagination stable when sort values tie
    return f"ORDER BY {col} {direction}, id {direction}"
