# src/component_schema/schema/ddl.py
"""
DDL generation for component table manifests.

Column-list manifests are turned into a throwaway SQLAlchemy Table and
compiled for the target dialect, so the same manifest yields valid
PostgreSQL and SQLite DDL. Literal manifests pass their SQL through
untouched.
"""
import hashlib

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine.default import DefaultDialect
from sqlalchemy.schema import CreateTable, DropTable

from component_schema.components.types import ColumnSpec, TableManifest

_SQL_TYPES = {
    "varchar": sa.String,
    "text": sa.Text,
    "timestamp": sa.DateTime,
    "integer": sa.Integer,
    "serial": sa.Integer,
    "boolean": sa.Boolean,
}

_DIALECTS = {
    "postgresql": postgresql.dialect,
    "sqlite": sqlite.dialect,
}


def get_dialect(dialect_name: str) -> sa.Dialect:
    factory = _DIALECTS.get(dialect_name, DefaultDialect)
    return factory()


def _server_default(value):
    if value is None:
        return None
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return sa.true() if value else sa.false()
    if isinstance(value, int):
        return sa.text(str(value))
    return str(value)


def _build_column(spec: ColumnSpec) -> sa.Column:
    return sa.Column(
        spec.name,
        _SQL_TYPES[spec.type](),
        primary_key=spec.primary_key,
        nullable=spec.nullable and not spec.primary_key,
        autoincrement=spec.type == "serial",
        server_default=_server_default(spec.default),
    )


def build_table(manifest: TableManifest) -> sa.Table:
    """SQLAlchemy Table for a manifest, on its own MetaData."""
    return sa.Table(
        manifest.table_name,
        sa.MetaData(),
        *(_build_column(c) for c in manifest.columns),
    )


def render_create_sql(manifest: TableManifest, dialect_name: str) -> str:
    """CREATE TABLE IF NOT EXISTS statement for the manifest."""
    if manifest.create_sql:
        return manifest.create_sql.strip()

    statement = CreateTable(build_table(manifest), if_not_exists=True)
    return str(statement.compile(dialect=get_dialect(dialect_name))).strip()


def render_drop_sql(manifest: TableManifest, dialect_name: str) -> str:
    """DROP TABLE IF EXISTS statement, cascading on PostgreSQL."""
    if manifest.drop_sql:
        return manifest.drop_sql.strip()

    table = sa.Table(manifest.table_name, sa.MetaData())
    statement = DropTable(table, if_exists=True)
    sql = str(statement.compile(dialect=get_dialect(dialect_name))).strip()
    if dialect_name == "postgresql":
        sql += " CASCADE"
    return sql


def compute_sql_checksum(sql: str) -> str:
    """
    SHA-256 of the creation SQL. Changes whenever the table's intended
    definition changes.
    """
    return hashlib.sha256(sql.encode("utf-8")).hexdigest()
