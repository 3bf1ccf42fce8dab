# src/component_schema/bootstrap.py
"""
Wiring and startup routine.

`build_runtime` assembles the registry, stores and services around one
engine. `startup` must run once per process, from a single leader: it
ensures the variables table, applies pending migrations and reports
schema drift. A migration failure is fatal.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import sqlalchemy as sa

from component_schema.components.registry import ComponentRegistry, default_registry
from component_schema.config import AppSettings, settings as default_settings
from component_schema.db.access import get_engine
from component_schema.db.introspector import SqlAlchemyTableIntrospector
from component_schema.db.setup import initialize_database
from component_schema.db.variables import SqlVariableStore
from component_schema.errors import MigrationError
from component_schema.services.component_config import ComponentConfigService
from component_schema.services.lifecycle import ComponentLifecycleManager
from component_schema.services.migrations import (
    Migration,
    MigrationRunner,
    MigrationRunResult,
)
from component_schema.services.state_repository import SchemaStateRepository

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    engine: sa.Engine
    registry: ComponentRegistry
    store: SqlVariableStore
    introspector: SqlAlchemyTableIntrospector
    lifecycle: ComponentLifecycleManager
    migrations: MigrationRunner
    component_config: ComponentConfigService


def build_runtime(
    app_settings: AppSettings = default_settings,
    engine: Optional[sa.Engine] = None,
    registry: Optional[ComponentRegistry] = None,
    migrations: Iterable[Migration] = (),
) -> Runtime:
    if engine is None:
        engine = get_engine(app_settings.database)
    if registry is None:
        registry = default_registry()

    lifecycle_settings = app_settings.lifecycle
    timeout = lifecycle_settings.operation_timeout_seconds
    db_schema = getattr(app_settings.database, "db_schema", None)

    store = SqlVariableStore(engine)
    introspector = SqlAlchemyTableIntrospector(engine, schema=db_schema)
    lifecycle = ComponentLifecycleManager(
        registry,
        introspector,
        SchemaStateRepository(store, prefix=lifecycle_settings.state_variable_prefix),
        operation_timeout=timeout,
    )
    runner = MigrationRunner(
        store,
        version_variable_name=lifecycle_settings.migrations_variable_name,
        operation_timeout=timeout,
    )
    for migration in migrations:
        runner.register_migration(migration)

    return Runtime(
        engine=engine,
        registry=registry,
        store=store,
        introspector=introspector,
        lifecycle=lifecycle,
        migrations=runner,
        component_config=ComponentConfigService(registry, store, lifecycle),
    )


def startup(runtime: Runtime, app_settings: AppSettings = default_settings) -> MigrationRunResult:
    """
    Bring the database up to date. Raises MigrationError if any migration
    failed; callers must not continue starting the application.
    """
    initialize_database(runtime.engine)

    result = runtime.migrations.run_migrations()
    if result.ran > 0:
        logger.info(f"Database migrations completed: ran={result.ran} skipped={result.skipped}")
    else:
        logger.debug("No pending migrations")
    if result.errors:
        logger.critical(f"Migration errors occurred: {result.errors}")
        raise MigrationError(result.errors)

    if app_settings.lifecycle.check_drift_on_startup:
        for drift_result in runtime.lifecycle.check_all_drift():
            if drift_result.has_drift:
                logger.warning(
                    f"Component {drift_result.component_id} schema drift: "
                    f"{drift_result.drift.details}"
                )

    return result
