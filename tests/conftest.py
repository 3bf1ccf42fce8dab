"""
Pytest fixtures and configuration for component schema tests.
"""
import time

import pytest
from sqlalchemy import create_engine

from component_schema.components.registry import ComponentRegistry
from component_schema.components.types import (
    ColumnSpec,
    ComponentDefinition,
    SchemaManifest,
    TableManifest,
)
from component_schema.db.introspector import SqlAlchemyTableIntrospector
from component_schema.db.setup import initialize_database
from component_schema.db.variables import SqlVariableStore
from component_schema.services.lifecycle import ComponentLifecycleManager
from component_schema.services.migrations import MigrationRunner
from component_schema.services.state_repository import SchemaStateRepository

FIXED_NOW = "2026-01-15T12:00:00+00:00"


class FlakyIntrospector(SqlAlchemyTableIntrospector):
    """Raises on DDL that mentions any table in `fail_tables`; records all DDL."""

    def __init__(self, engine, fail_tables=()):
        super().__init__(engine)
        self.fail_tables = set(fail_tables)
        self.executed = []

    def execute(self, sql):
        self.executed.append(sql)
        for name in self.fail_tables:
            if name in sql:
                raise RuntimeError(f"simulated DDL failure on {name}")
        super().execute(sql)


class SilentIntrospector(SqlAlchemyTableIntrospector):
    """Accepts DDL for `ignored_tables` without running it."""

    def __init__(self, engine, ignored_tables=()):
        super().__init__(engine)
        self.ignored_tables = set(ignored_tables)

    def execute(self, sql):
        if any(name in sql for name in self.ignored_tables):
            return
        super().execute(sql)


class SlowIntrospector(SqlAlchemyTableIntrospector):
    """Blocks on DDL that mentions any table in `slow_tables`."""

    def __init__(self, engine, slow_tables=(), delay=1.0):
        super().__init__(engine)
        self.slow_tables = set(slow_tables)
        self.delay = delay

    def execute(self, sql):
        if any(name in sql for name in self.slow_tables):
            time.sleep(self.delay)
            return
        super().execute(sql)


def _table(name, *extra):
    return TableManifest(
        name,
        columns=(
            ColumnSpec("id", "varchar", nullable=False, primary_key=True),
            ColumnSpec("name", "text", nullable=False),
            *extra,
        ),
    )


TEST_COMPONENTS = [
    ComponentDefinition(
        id="trust",
        name="Trust",
        description="Trust fund administration",
        category="core",
    ),
    ComponentDefinition(
        id="trust.providers",
        name="Trust Providers",
        description="Management and tracking of trust providers",
        category="trust",
        manages_schema=True,
        schema_manifest=SchemaManifest(
            (
                _table("trust_providers", ColumnSpec("data", "text")),
                _table(
                    "trust_provider_contacts",
                    ColumnSpec("provider_id", "varchar", nullable=False),
                ),
            ),
            version=1,
        ),
    ),
    ComponentDefinition(
        id="trust.providers.login",
        name="Trust Provider Login",
        description="Ability for trust provider contacts to log in",
        category="authentication",
    ),
    ComponentDefinition(
        id="dispatch",
        name="Dispatch",
        description="Dispatch functionality",
        category="core",
        manages_schema=True,
        schema_manifest=SchemaManifest(
            (
                _table("dispatch_jobs", ColumnSpec("status", "varchar", nullable=False, default="draft")),
                _table("dispatches", ColumnSpec("accepted", "boolean", nullable=False, default=False)),
                _table("worker_dispatch_status", ColumnSpec("rank", "integer", default=0)),
            ),
            version=2,
        ),
    ),
    ComponentDefinition(
        id="dispatch.dnc",
        name="Dispatch Do Not Call",
        description="Do Not Call list management for dispatch",
        category="dispatch",
        manages_schema=True,
        schema_manifest=SchemaManifest(
            (
                TableManifest(
                    "worker_dispatch_dnc",
                    create_sql=(
                        'CREATE TABLE IF NOT EXISTS "worker_dispatch_dnc" '
                        '("id" VARCHAR PRIMARY KEY NOT NULL, "worker_id" VARCHAR NOT NULL)'
                    ),
                    drop_sql='DROP TABLE IF EXISTS "worker_dispatch_dnc"',
                ),
            ),
        ),
    ),
    ComponentDefinition(
        id="ledger",
        name="Ledger",
        description="Functionality for tracking charges and payments",
        enabled_by_default=True,
        category="core",
    ),
    ComponentDefinition(
        id="worker.steward",
        name="Shop Stewards",
        description="Schema flag set but manifest missing",
        category="core",
        manages_schema=True,
    ),
]


@pytest.fixture(scope="function")
def test_db_engine(tmp_path):
    """Create a test database engine with cleanup."""
    db_path = tmp_path / "test_component_schema.sqlite3"
    engine = create_engine(f"sqlite:///{db_path}")

    initialize_database(engine, reset_tables=True)

    yield engine

    engine.dispose()


@pytest.fixture
def registry():
    return ComponentRegistry(TEST_COMPONENTS)


@pytest.fixture
def variable_store(test_db_engine):
    return SqlVariableStore(test_db_engine)


@pytest.fixture
def state_repository(variable_store):
    return SchemaStateRepository(variable_store)


@pytest.fixture
def introspector(test_db_engine):
    return SqlAlchemyTableIntrospector(test_db_engine)


@pytest.fixture
def make_manager(registry, state_repository):
    """Factory: lifecycle manager over a given introspector."""

    def _make(introspector, operation_timeout=None):
        return ComponentLifecycleManager(
            registry,
            introspector,
            state_repository,
            operation_timeout=operation_timeout,
            clock=lambda: FIXED_NOW,
        )

    return _make


@pytest.fixture
def lifecycle(make_manager, introspector):
    return make_manager(introspector)


@pytest.fixture
def migration_runner(variable_store):
    return MigrationRunner(variable_store)
