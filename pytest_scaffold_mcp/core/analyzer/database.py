"""Database analyzer: describes tables reached through a SQLAlchemy engine."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import CompileError, SQLAlchemyError

from ...constants import (
    DEFAULT_CONNECTION,
    EXCLUDED_TABLES,
    SOFT_DELETE_COLUMN,
    TIMESTAMP_COLUMNS,
)
from ..errors import NotFoundError
from ..naming import singular, studly
from .dialects import SchemaDialect, dialect_for
from .models import ColumnInfo, DatabaseDescriptor, SubjectKind, TableDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseAnalyzer:
    """
    Analyze tables of one connection.

    The dialect is chosen from `engine.dialect.name` on first use, so an
    unsupported engine fails with UnsupportedDriverError at analysis time.
    """

    kind = SubjectKind.TABLE

    def __init__(self, engine: Engine, connection: str = DEFAULT_CONNECTION):
        self.engine = engine
        self.connection = connection
        self._dialect: SchemaDialect | None = None

    @property
    def dialect(self) -> SchemaDialect:
        if self._dialect is None:
            self._dialect = dialect_for(self.engine)
        return self._dialect

    def analyze(self, table: str) -> TableDescriptor:
        """
        Describe one table.

        Raises:
            UnsupportedDriverError: If the engine's dialect is not supported
            NotFoundError: If the table does not exist
        """
        dialect = self.dialect
        inspector = sa_inspect(self.engine)
        if not inspector.has_table(table):
            raise NotFoundError(table, f"no such table on connection {self.connection}")

        columns = tuple(
            self._column(dialect, table, raw["name"], raw["type"])
            for raw in inspector.get_columns(table)
        )
        names = {c.name for c in columns}
        foreign_keys = self._safe(f"foreign keys of {table}", dialect.foreign_keys, table, default=[])
        indexes = self._safe(f"indexes of {table}", dialect.indexes, table, default=[])

        return TableDescriptor(
            qualified_name=table,
            short_name=table,
            namespace=self.connection,
            model_name=studly(singular(table)),
            primary_key=tuple(self._safe(f"primary key of {table}", dialect.primary_key, table, default=[])),
            columns=columns,
            foreign_keys={fk.local_column: fk for fk in foreign_keys},
            indexes={index.name: index for index in indexes},
            has_timestamps=all(c in names for c in TIMESTAMP_COLUMNS),
            has_soft_deletes=SOFT_DELETE_COLUMN in names,
        )

    def list_tables(
        self,
        include: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> list[str]:
        """List tables, honouring include/exclude; bookkeeping tables are always skipped."""
        tables = self.dialect.list_tables()
        if include:
            wanted = set(include)
            tables = [t for t in tables if t in wanted]
        skipped = EXCLUDED_TABLES | set(exclude or ())
        return [t for t in tables if t not in skipped]

    def analyze_database(
        self,
        include: Iterable[str] | None = None,
        exclude: Iterable[str] | None = None,
    ) -> DatabaseDescriptor:
        tables = self.list_tables(include=include, exclude=exclude)
        logger.info(f"Analyzing {len(tables)} tables on {self.connection} ({self.dialect.name})")
        return DatabaseDescriptor(
            connection=self.connection,
            driver=self.dialect.name,
            tables=tuple(self.analyze(t) for t in tables),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _column(self, dialect: SchemaDialect, table: str, name: str, column_type) -> ColumnInfo:
        label = f"{table}.{name}"
        length = getattr(column_type, "length", None)
        if not isinstance(length, int):
            length = self._safe(f"length of {label}", dialect.column_length, table, name, default=None)
        return ColumnInfo(
            name=name,
            type=_type_name(column_type),
            nullable=self._safe(f"nullability of {label}", dialect.is_nullable, table, name, default=False),
            default=self._safe(f"default of {label}", dialect.column_default, table, name, default=None),
            auto_increment=self._safe(
                f"auto increment of {label}", dialect.is_auto_increment, table, name, default=False
            ),
            unsigned=self._safe(f"unsigned flag of {label}", dialect.is_unsigned, table, name, default=False),
            length=length,
        )

    def _safe(self, what: str, query: Callable[..., T], *args: str, default: T) -> T:
        """Run a metadata query; a database error yields `default`."""
        try:
            return query(*args)
        except SQLAlchemyError as exc:
            logger.debug(f"Could not read {what}: {exc}")
            return default


def _type_name(column_type) -> str:
    try:
        return str(column_type)
    except CompileError:
        return type(column_type).__name__
