# src/component_schema/db/introspector.py
import logging
from typing import Optional, Protocol

import sqlalchemy as sa
from sqlalchemy import Engine

logger = logging.getLogger(__name__)


class TableIntrospector(Protocol):
    """Reports table presence and executes raw DDL."""

    dialect_name: str

    def table_exists(self, table_name: str) -> bool: ...

    def execute(self, sql: str) -> None: ...


class SqlAlchemyTableIntrospector:
    """
    TableIntrospector over a SQLAlchemy engine.

    Every statement runs in its own transaction; nothing spans tables.
    """

    def __init__(self, engine: Engine, schema: Optional[str] = None):
        self.engine = engine
        self.schema = schema

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def table_exists(self, table_name: str) -> bool:
        with self.engine.connect() as conn:
            return sa.inspect(conn).has_table(table_name, schema=self.schema)

    def execute(self, sql: str) -> None:
        logger.debug(f"Executing DDL: {sql}")
        with self.engine.begin() as conn:
            conn.exec_driver_sql(sql)
