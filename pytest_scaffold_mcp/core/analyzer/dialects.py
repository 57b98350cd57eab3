"""
Dialect-specific schema queries.

Each dialect answers the same questions (tables, primary key, foreign
keys, indexes, per-column details) with SQL native to its database family.
Queries run on a fresh connection so one failure cannot poison the next.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine

from ..errors import UnsupportedDriverError
from .models import ForeignKeyInfo, IndexInfo


class SchemaDialect(ABC):
    """Schema queries for one database family."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @property
    def name(self) -> str:
        return self.engine.dialect.name

    # -------------------------------------------------------------------------
    # Query helpers
    # -------------------------------------------------------------------------

    def _rows(self, sql: str, **params: Any) -> Sequence[Mapping[str, Any]]:
        with self.engine.connect() as conn:
            return conn.execute(text(sql), params).mappings().all()

    def _scalar(self, sql: str, **params: Any) -> Any:
        with self.engine.connect() as conn:
            return conn.execute(text(sql), params).scalar()

    def _quote(self, identifier: str) -> str:
        return self.engine.dialect.identifier_preparer.quote(identifier)

    # -------------------------------------------------------------------------
    # Table level
    # -------------------------------------------------------------------------

    @abstractmethod
    def list_tables(self) -> list[str]:
        pass

    @abstractmethod
    def primary_key(self, table: str) -> list[str]:
        pass

    @abstractmethod
    def foreign_keys(self, table: str) -> list[ForeignKeyInfo]:
        pass

    @abstractmethod
    def indexes(self, table: str) -> list[IndexInfo]:
        pass

    # -------------------------------------------------------------------------
    # Column level
    # -------------------------------------------------------------------------

    @abstractmethod
    def is_nullable(self, table: str, column: str) -> bool:
        pass

    @abstractmethod
    def column_default(self, table: str, column: str) -> str | None:
        pass

    @abstractmethod
    def is_auto_increment(self, table: str, column: str) -> bool:
        pass

    def is_unsigned(self, table: str, column: str) -> bool:
        return False

    @abstractmethod
    def column_length(self, table: str, column: str) -> int | None:
        pass


def _group_indexes(rows: Sequence[Mapping[str, Any]]) -> list[IndexInfo]:
    """Fold (index_name, column_name, is_unique, is_primary) rows into IndexInfo."""
    grouped: dict[str, dict[str, Any]] = {}
    for row in rows:
        entry = grouped.setdefault(row["index_name"], {
            "columns": [],
            "unique": bool(row["is_unique"]),
            "primary": bool(row["is_primary"]),
        })
        entry["columns"].append(row["column_name"])
    return [
        IndexInfo(name=name, columns=tuple(e["columns"]), unique=e["unique"], primary=e["primary"])
        for name, e in grouped.items()
    ]


def _foreign_keys(rows: Sequence[Mapping[str, Any]]) -> list[ForeignKeyInfo]:
    return [
        ForeignKeyInfo(
            local_column=row["local_column"],
            foreign_table=row["foreign_table"],
            foreign_column=row["foreign_column"],
            on_delete=row.get("on_delete"),
            on_update=row.get("on_update"),
        )
        for row in rows
    ]


# =============================================================================
# SQLite
# =============================================================================

class SQLiteDialect(SchemaDialect):
    """SQLite, read through PRAGMA statements and sqlite_master."""

    def _table_info(self, table: str, column: str) -> Mapping[str, Any] | None:
        for row in self._rows(f"PRAGMA table_info({self._quote(table)})"):
            if row["name"] == column:
                return row
        return None

    def list_tables(self) -> list[str]:
        rows = self._rows(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        return [row["name"] for row in rows]

    def primary_key(self, table: str) -> list[str]:
        rows = self._rows(f"PRAGMA table_info({self._quote(table)})")
        keyed = sorted((row for row in rows if row["pk"]), key=lambda row: row["pk"])
        return [row["name"] for row in keyed]

    def foreign_keys(self, table: str) -> list[ForeignKeyInfo]:
        rows = self._rows(f"PRAGMA foreign_key_list({self._quote(table)})")
        return [
            ForeignKeyInfo(
                local_column=row["from"],
                foreign_table=row["table"],
                foreign_column=row["to"],
                on_delete=row["on_delete"],
                on_update=row["on_update"],
            )
            for row in rows
        ]

    def indexes(self, table: str) -> list[IndexInfo]:
        found = []
        for row in self._rows(f"PRAGMA index_list({self._quote(table)})"):
            name = row["name"]
            columns = self._rows(f"PRAGMA index_info({self._quote(name)})")
            found.append(IndexInfo(
                name=name,
                columns=tuple(c["name"] for c in columns),
                unique=bool(row["unique"]),
                primary=row["origin"] == "pk",
            ))
        return found

    def is_nullable(self, table: str, column: str) -> bool:
        info = self._table_info(table, column)
        return info is not None and info["notnull"] == 0

    def column_default(self, table: str, column: str) -> str | None:
        info = self._table_info(table, column)
        return None if info is None else info["dflt_value"]

    def is_auto_increment(self, table: str, column: str) -> bool:
        info = self._table_info(table, column)
        return info is not None and info["pk"] == 1 and str(info["type"]).upper() == "INTEGER"

    def column_length(self, table: str, column: str) -> int | None:
        sql = self._scalar(
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = :table",
            table=table,
        )
        if not sql:
            return None
        pattern = rf"(?:^|[\s,(])[\"`\[]?{re.escape(column)}[\"`\]]?\s+\w+\s*\(\s*(\d+)"
        match = re.search(pattern, sql, re.IGNORECASE)
        return int(match.group(1)) if match else None


# =============================================================================
# MySQL / MariaDB
# =============================================================================

class MySQLDialect(SchemaDialect):
    """MySQL and MariaDB, read through information_schema."""

    def _column(self, table: str, column: str) -> Mapping[str, Any] | None:
        rows = self._rows(
            "SELECT is_nullable, column_default, extra, column_type, character_maximum_length "
            "FROM information_schema.columns "
            "WHERE table_schema = DATABASE() AND table_name = :table AND column_name = :column",
            table=table, column=column,
        )
        return rows[0] if rows else None

    def list_tables(self) -> list[str]:
        rows = self._rows(
            "SELECT table_name AS name FROM information_schema.tables "
            "WHERE table_schema = DATABASE() AND table_type = 'BASE TABLE' ORDER BY table_name"
        )
        return [row["name"] for row in rows]

    def primary_key(self, table: str) -> list[str]:
        rows = self._rows(
            "SELECT column_name AS name FROM information_schema.key_column_usage "
            "WHERE table_schema = DATABASE() AND table_name = :table "
            "AND constraint_name = 'PRIMARY' ORDER BY ordinal_position",
            table=table,
        )
        return [row["name"] for row in rows]

    def foreign_keys(self, table: str) -> list[ForeignKeyInfo]:
        return _foreign_keys(self._rows(
            "SELECT k.column_name AS local_column, k.referenced_table_name AS foreign_table, "
            "k.referenced_column_name AS foreign_column, r.delete_rule AS on_delete, "
            "r.update_rule AS on_update "
            "FROM information_schema.key_column_usage k "
            "JOIN information_schema.referential_constraints r "
            "ON r.constraint_name = k.constraint_name AND r.constraint_schema = k.table_schema "
            "WHERE k.table_schema = DATABASE() AND k.table_name = :table "
            "AND k.referenced_table_name IS NOT NULL",
            table=table,
        ))

    def indexes(self, table: str) -> list[IndexInfo]:
        return _group_indexes(self._rows(
            "SELECT index_name, column_name, non_unique = 0 AS is_unique, "
            "index_name = 'PRIMARY' AS is_primary "
            "FROM information_schema.statistics "
            "WHERE table_schema = DATABASE() AND table_name = :table "
            "ORDER BY index_name, seq_in_index",
            table=table,
        ))

    def is_nullable(self, table: str, column: str) -> bool:
        row = self._column(table, column)
        return row is not None and row["is_nullable"] == "YES"

    def column_default(self, table: str, column: str) -> str | None:
        row = self._column(table, column)
        return None if row is None else row["column_default"]

    def is_auto_increment(self, table: str, column: str) -> bool:
        row = self._column(table, column)
        return row is not None and "auto_increment" in (row["extra"] or "").lower()

    def is_unsigned(self, table: str, column: str) -> bool:
        row = self._column(table, column)
        return row is not None and "unsigned" in (row["column_type"] or "").lower()

    def column_length(self, table: str, column: str) -> int | None:
        row = self._column(table, column)
        if row is None or row["character_maximum_length"] is None:
            return None
        return int(row["character_maximum_length"])


# =============================================================================
# PostgreSQL
# =============================================================================

class PostgresDialect(SchemaDialect):
    """PostgreSQL, read through pg_catalog and information_schema."""

    def _column(self, table: str, column: str) -> Mapping[str, Any] | None:
        rows = self._rows(
            "SELECT is_nullable, column_default, is_identity, character_maximum_length "
            "FROM information_schema.columns "
            "WHERE table_schema = current_schema() AND table_name = :table "
            "AND column_name = :column",
            table=table, column=column,
        )
        return rows[0] if rows else None

    def list_tables(self) -> list[str]:
        rows = self._rows(
            "SELECT tablename AS name FROM pg_catalog.pg_tables "
            "WHERE schemaname = current_schema() ORDER BY tablename"
        )
        return [row["name"] for row in rows]

    def primary_key(self, table: str) -> list[str]:
        rows = self._rows(
            "SELECT a.attname AS name FROM pg_index i "
            "JOIN pg_attribute a ON a.attrelid = i.indrelid AND a.attnum = ANY(i.indkey) "
            "WHERE i.indrelid = CAST(:table AS regclass) AND i.indisprimary",
            table=table,
        )
        return [row["name"] for row in rows]

    def foreign_keys(self, table: str) -> list[ForeignKeyInfo]:
        return _foreign_keys(self._rows(
            "SELECT kcu.column_name AS local_column, ccu.table_name AS foreign_table, "
            "ccu.column_name AS foreign_column, rc.delete_rule AS on_delete, "
            "rc.update_rule AS on_update "
            "FROM information_schema.table_constraints tc "
            "JOIN information_schema.key_column_usage kcu "
            "ON tc.constraint_name = kcu.constraint_name AND tc.table_schema = kcu.table_schema "
            "JOIN information_schema.constraint_column_usage ccu "
            "ON ccu.constraint_name = tc.constraint_name AND ccu.table_schema = tc.table_schema "
            "JOIN information_schema.referential_constraints rc "
            "ON rc.constraint_name = tc.constraint_name AND rc.constraint_schema = tc.table_schema "
            "WHERE tc.constraint_type = 'FOREIGN KEY' AND tc.table_name = :table",
            table=table,
        ))

    def indexes(self, table: str) -> list[IndexInfo]:
        return _group_indexes(self._rows(
            "SELECT i.relname AS index_name, a.attname AS column_name, "
            "ix.indisunique AS is_unique, ix.indisprimary AS is_primary "
            "FROM pg_class t "
            "JOIN pg_index ix ON t.oid = ix.indrelid "
            "JOIN pg_class i ON i.oid = ix.indexrelid "
            "JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = ANY(ix.indkey) "
            "WHERE t.relname = :table ORDER BY i.relname",
            table=table,
        ))

    def is_nullable(self, table: str, column: str) -> bool:
        row = self._column(table, column)
        return row is not None and row["is_nullable"] == "YES"

    def column_default(self, table: str, column: str) -> str | None:
        row = self._column(table, column)
        return None if row is None else row["column_default"]

    def is_auto_increment(self, table: str, column: str) -> bool:
        row = self._column(table, column)
        if row is None:
            return False
        default = row["column_default"] or ""
        return default.startswith("nextval(") or row["is_identity"] == "YES"

    def is_unsigned(self, table: str, column: str) -> bool:
        # Postgres has no unsigned types; a non-negative check constraint stands in
        rows = self._rows(
            "SELECT pg_get_constraintdef(c.oid) AS definition FROM pg_constraint c "
            "JOIN pg_class t ON c.conrelid = t.oid "
            "WHERE t.relname = :table AND c.contype = 'c'",
            table=table,
        )
        needle = f"({column} >= 0)"
        return any(needle in (row["definition"] or "") for row in rows)

    def column_length(self, table: str, column: str) -> int | None:
        row = self._column(table, column)
        if row is None or row["character_maximum_length"] is None:
            return None
        return int(row["character_maximum_length"])


# =============================================================================
# SQL Server
# =============================================================================

class SqlServerDialect(SchemaDialect):
    """Microsoft SQL Server, read through INFORMATION_SCHEMA and sys views."""

    def _column(self, table: str, column: str) -> Mapping[str, Any] | None:
        rows = self._rows(
            "SELECT IS_NULLABLE AS is_nullable, COLUMN_DEFAULT AS column_default, "
            "CHARACTER_MAXIMUM_LENGTH AS character_maximum_length "
            "FROM INFORMATION_SCHEMA.COLUMNS WHERE TABLE_NAME = :table AND COLUMN_NAME = :column",
            table=table, column=column,
        )
        return rows[0] if rows else None

    def list_tables(self) -> list[str]:
        rows = self._rows(
            "SELECT TABLE_NAME AS name FROM INFORMATION_SCHEMA.TABLES "
            "WHERE TABLE_TYPE = 'BASE TABLE' ORDER BY TABLE_NAME"
        )
        return [row["name"] for row in rows]

    def primary_key(self, table: str) -> list[str]:
        rows = self._rows(
            "SELECT kcu.COLUMN_NAME AS name FROM INFORMATION_SCHEMA.TABLE_CONSTRAINTS tc "
            "JOIN INFORMATION_SCHEMA.KEY_COLUMN_USAGE kcu ON tc.CONSTRAINT_NAME = kcu.CONSTRAINT_NAME "
            "WHERE tc.TABLE_NAME = :table AND tc.CONSTRAINT_TYPE = 'PRIMARY KEY' "
            "ORDER BY kcu.ORDINAL_POSITION",
            table=table,
        )
        return [row["name"] for row in rows]

    def foreign_keys(self, table: str) -> list[ForeignKeyInfo]:
        return _foreign_keys(self._rows(
            "SELECT COL_NAME(fc.parent_object_id, fc.parent_column_id) AS local_column, "
            "OBJECT_NAME(fc.referenced_object_id) AS foreign_table, "
            "COL_NAME(fc.referenced_object_id, fc.referenced_column_id) AS foreign_column, "
            "f.delete_referential_action_desc AS on_delete, "
            "f.update_referential_action_desc AS on_update "
            "FROM sys.foreign_keys f "
            "JOIN sys.foreign_key_columns fc ON f.object_id = fc.constraint_object_id "
            "WHERE f.parent_object_id = OBJECT_ID(:table)",
            table=table,
        ))

    def indexes(self, table: str) -> list[IndexInfo]:
        return _group_indexes(self._rows(
            "SELECT i.name AS index_name, c.name AS column_name, "
            "i.is_unique AS is_unique, i.is_primary_key AS is_primary "
            "FROM sys.indexes i "
            "JOIN sys.index_columns ic ON i.object_id = ic.object_id AND i.index_id = ic.index_id "
            "JOIN sys.columns c ON ic.object_id = c.object_id AND ic.column_id = c.column_id "
            "WHERE i.object_id = OBJECT_ID(:table) ORDER BY i.name, ic.key_ordinal",
            table=table,
        ))

    def is_nullable(self, table: str, column: str) -> bool:
        row = self._column(table, column)
        return row is not None and row["is_nullable"] == "YES"

    def column_default(self, table: str, column: str) -> str | None:
        row = self._column(table, column)
        return None if row is None else row["column_default"]

    def is_auto_increment(self, table: str, column: str) -> bool:
        value = self._scalar(
            "SELECT COLUMNPROPERTY(OBJECT_ID(:table), :column, 'IsIdentity')",
            table=table, column=column,
        )
        return value == 1

    def column_length(self, table: str, column: str) -> int | None:
        row = self._column(table, column)
        if row is None or row["character_maximum_length"] is None:
            return None
        return int(row["character_maximum_length"])


DIALECTS: dict[str, type[SchemaDialect]] = {
    "mysql": MySQLDialect,
    "mariadb": MySQLDialect,
    "postgresql": PostgresDialect,
    "sqlite": SQLiteDialect,
    "mssql": SqlServerDialect,
}


def dialect_for(engine: Engine) -> SchemaDialect:
    """
    Pick the schema dialect for an engine.

    Raises:
        UnsupportedDriverError: For any database family not listed in DIALECTS
    """
    dialect_cls = DIALECTS.get(engine.dialect.name)
    if dialect_cls is None:
        raise UnsupportedDriverError(engine.dialect.name)
    return dialect_cls(engine)
