# src/component_schema/services/lifecycle.py
"""
Component schema lifecycle: enable, disable and drift-check the tables a
component owns.

DDL is not transactional across tables. The persisted schema state is
the single record of "fully applied": it is written only when every
table of the manifest succeeded and deleted only when every drop
succeeded. Partial physical changes are left in place and show up on the
next drift check.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Literal, Optional

from component_schema.components.registry import ComponentRegistry
from component_schema.components.types import (
    ComponentDefinition,
    ComponentSchemaDrift,
    ComponentSchemaState,
    ComponentTableState,
    TableManifest,
)
from component_schema.db.introspector import TableIntrospector
from component_schema.errors import OperationTimeoutError
from component_schema.schema.ddl import (
    compute_sql_checksum,
    render_create_sql,
    render_drop_sql,
)
from component_schema.services.state_repository import SchemaStateRepository
from component_schema.timeouts import run_with_timeout

logger = logging.getLogger(__name__)

ENABLE_FAILED = "Some schema operations failed - state not saved"
DISABLE_FAILED = "Some schema operations failed - state not deleted"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class SchemaOperationResult:
    """
    Outcome of one table operation. `skipped` means no DDL was needed
    (table already present on create, already absent on drop).
    """

    success: bool
    table_name: str
    operation: Literal["create", "drop", "retain"]
    error: Optional[str] = None
    skipped: bool = False
    timed_out: bool = False

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "tableName": self.table_name,
            "operation": self.operation,
            "error": self.error,
            "skipped": self.skipped,
            "timedOut": self.timed_out,
        }


@dataclass
class ComponentLifecycleResult:
    success: bool
    component_id: str
    schema_operations: List[SchemaOperationResult] = field(default_factory=list)
    schema_state: Optional[ComponentSchemaState] = None
    error: Optional[str] = None

    @property
    def failed_operations(self) -> List[SchemaOperationResult]:
        return [op for op in self.schema_operations if not op.success]

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "componentId": self.component_id,
            "schemaOperations": [op.to_dict() for op in self.schema_operations],
            "schemaState": self.schema_state.to_json() if self.schema_state else None,
            "error": self.error,
        }


@dataclass
class DriftCheckResult:
    component_id: str
    drift: ComponentSchemaDrift
    schema_state: Optional[ComponentSchemaState] = None

    @property
    def has_drift(self) -> bool:
        return self.drift.has_missing_tables or self.drift.has_unexpected_tables

    def to_dict(self) -> dict:
        return {
            "componentId": self.component_id,
            "drift": self.drift.model_dump(mode="json", by_alias=True),
            "schemaState": self.schema_state.to_json() if self.schema_state else None,
        }


@dataclass
class ComponentSchemaInfo:
    has_schema: bool
    tables: List[str] = field(default_factory=list)
    schema_state: Optional[ComponentSchemaState] = None
    tables_exist: List[bool] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "hasSchema": self.has_schema,
            "tables": self.tables,
            "schemaState": self.schema_state.to_json() if self.schema_state else None,
            "tablesExist": self.tables_exist,
        }


class ComponentLifecycleManager:
    def __init__(
        self,
        registry: ComponentRegistry,
        introspector: TableIntrospector,
        state_repository: SchemaStateRepository,
        operation_timeout: Optional[float] = None,
        clock: Callable[[], str] = _utc_now,
    ):
        self.registry = registry
        self.introspector = introspector
        self.state_repository = state_repository
        self.operation_timeout = operation_timeout
        self.clock = clock

    # --- Guarded collaborator calls ---

    def _call(self, fn, *args, description: str):
        return run_with_timeout(
            fn, *args, timeout=self.operation_timeout, description=description
        )

    def _table_exists(self, table_name: str) -> bool:
        return self._call(
            self.introspector.table_exists,
            table_name,
            description=f"table_exists({table_name})",
        )

    def _execute(self, sql: str, table_name: str) -> None:
        self._call(self.introspector.execute, sql, description=f"DDL for {table_name}")

    def _load_state(self, component_id: str) -> Optional[ComponentSchemaState]:
        return self._call(
            self.state_repository.get,
            component_id,
            description=f"load schema state for {component_id}",
        )

    def _save_state(self, component_id: str, state: ComponentSchemaState) -> None:
        self._call(
            self.state_repository.save,
            component_id,
            state,
            description=f"save schema state for {component_id}",
        )

    def _delete_state(self, component_id: str) -> None:
        self._call(
            self.state_repository.delete,
            component_id,
            description=f"delete schema state for {component_id}",
        )

    def _resolve(self, component_id: str):
        """
        Returns (component, early_result). early_result is set for unknown
        and non-schema components.
        """
        component = self.registry.get_by_id(component_id)
        if component is None:
            logger.warning(f"Component not found: {component_id}")
            return None, ComponentLifecycleResult(
                success=False,
                component_id=component_id,
                error=f"Component not found: {component_id}",
            )
        if not component.has_schema:
            return component, ComponentLifecycleResult(
                success=True, component_id=component_id
            )
        return component, None

    # --- Enable ---

    def _create_table(
        self,
        table: TableManifest,
        dialect_name: str,
        previous: Optional[ComponentSchemaState],
        now: str,
    ):
        """Returns (operation, table_state). table_state is None on failure."""
        name = table.table_name
        try:
            create_sql = render_create_sql(table, dialect_name)
            checksum = compute_sql_checksum(create_sql)

            exists = self._table_exists(name)
            if not exists:
                logger.info(f"Creating table {name}")
                self._execute(create_sql, name)
                if not self._table_exists(name):
                    return SchemaOperationResult(
                        success=False,
                        table_name=name,
                        operation="create",
                        error=f"Table {name} does not exist after CREATE",
                    ), None
        except OperationTimeoutError as e:
            logger.error(f"Create {name} timed out: {e}")
            return SchemaOperationResult(
                success=False, table_name=name, operation="create",
                error=str(e), timed_out=True,
            ), None
        except Exception as e:
            logger.error(f"Create {name} failed: {e}")
            return SchemaOperationResult(
                success=False, table_name=name, operation="create", error=str(e)
            ), None

        applied_at = now
        prior = previous.table(name) if previous else None
        if exists and prior is not None and prior.status == "active":
            applied_at = prior.applied_at or now
            if prior.checksum != checksum:
                logger.warning(
                    f"Table {name} definition changed since it was applied; "
                    "existing table left as is"
                )

        return SchemaOperationResult(
            success=True, table_name=name, operation="create", skipped=exists
        ), ComponentTableState(
            table_name=name,
            status="active",
            applied_at=applied_at,
            dropped_at=None,
            checksum=checksum,
        )

    def enable_component_schema(self, component_id: str) -> ComponentLifecycleResult:
        """
        Create every missing table of the component's manifest, in order.
        All tables are attempted even after a failure. State is saved
        only when every table succeeded.
        """
        component, early = self._resolve(component_id)
        if early is not None:
            return early

        manifest = component.schema_manifest
        dialect_name = self.introspector.dialect_name
        now = self.clock()
        logger.info(
            f"Enabling schema for {component_id} "
            f"(manifest v{manifest.version}, {len(manifest.tables)} tables)"
        )

        try:
            previous = self._load_state(component_id)
        except Exception as e:
            logger.error(f"Could not read schema state for {component_id}: {e}")
            previous = None

        operations: List[SchemaOperationResult] = []
        table_states: List[ComponentTableState] = []
        for table in manifest.tables:
            operation, table_state = self._create_table(
                table, dialect_name, previous, now
            )
            operations.append(operation)
            if table_state is not None:
                table_states.append(table_state)

        if not all(op.success for op in operations):
            failed = [op.table_name for op in operations if not op.success]
            logger.warning(f"Enable {component_id} incomplete, failed tables: {failed}")
            return ComponentLifecycleResult(
                success=False,
                component_id=component_id,
                schema_operations=operations,
                error=ENABLE_FAILED,
            )

        state = ComponentSchemaState(
            manifest_version=manifest.version,
            last_synced_at=now,
            tables=table_states,
            drift=None,
        )
        try:
            self._save_state(component_id, state)
        except Exception as e:
            logger.error(f"Failed to save schema state for {component_id}: {e}")
            return ComponentLifecycleResult(
                success=False,
                component_id=component_id,
                schema_operations=operations,
                error=f"Failed to save schema state: {e}",
            )

        logger.info(f"Schema enabled for {component_id}")
        return ComponentLifecycleResult(
            success=True,
            component_id=component_id,
            schema_operations=operations,
            schema_state=state,
        )

    # --- Disable ---

    def _drop_table(self, table: TableManifest, dialect_name: str) -> SchemaOperationResult:
        name = table.table_name
        try:
            if not self._table_exists(name):
                return SchemaOperationResult(
                    success=True, table_name=name, operation="drop", skipped=True
                )
            logger.info(f"Dropping table {name}")
            self._execute(render_drop_sql(table, dialect_name), name)
            if self._table_exists(name):
                return SchemaOperationResult(
                    success=False,
                    table_name=name,
                    operation="drop",
                    error=f"Table {name} still exists after DROP",
                )
        except OperationTimeoutError as e:
            logger.error(f"Drop {name} timed out: {e}")
            return SchemaOperationResult(
                success=False, table_name=name, operation="drop",
                error=str(e), timed_out=True,
            )
        except Exception as e:
            logger.error(f"Drop {name} failed: {e}")
            return SchemaOperationResult(
                success=False, table_name=name, operation="drop", error=str(e)
            )
        return SchemaOperationResult(success=True, table_name=name, operation="drop")

    def disable_component_schema(
        self, component_id: str, retain_data: bool = True
    ) -> ComponentLifecycleResult:
        """
        With retain_data (the default) nothing is touched: the tables and
        the state record stay, and one informational "retain" operation is
        reported per table. Without it every existing table is dropped and
        the state record is deleted only if all drops succeeded.
        """
        component, early = self._resolve(component_id)
        if early is not None:
            return early

        manifest = component.schema_manifest

        if retain_data:
            logger.info(f"Disabling {component_id}, retaining {len(manifest.tables)} tables")
            operations = [
                SchemaOperationResult(
                    success=True, table_name=name, operation="retain", skipped=True
                )
                for name in manifest.table_names
            ]
            return ComponentLifecycleResult(
                success=True,
                component_id=component_id,
                schema_operations=operations,
                schema_state=self._load_state(component_id),
            )

        logger.info(f"Disabling {component_id}, dropping {len(manifest.tables)} tables")
        dialect_name = self.introspector.dialect_name
        operations = [self._drop_table(table, dialect_name) for table in manifest.tables]

        if not all(op.success for op in operations):
            failed = [op.table_name for op in operations if not op.success]
            logger.warning(f"Disable {component_id} incomplete, failed tables: {failed}")
            return ComponentLifecycleResult(
                success=False,
                component_id=component_id,
                schema_operations=operations,
                error=DISABLE_FAILED,
            )

        try:
            self._delete_state(component_id)
        except Exception as e:
            logger.error(f"Failed to delete schema state for {component_id}: {e}")
            return ComponentLifecycleResult(
                success=False,
                component_id=component_id,
                schema_operations=operations,
                error=f"Failed to delete schema state: {e}",
            )

        logger.info(f"Schema removed for {component_id}")
        return ComponentLifecycleResult(
            success=True, component_id=component_id, schema_operations=operations
        )

    # --- Drift ---

    def check_component_schema_drift(self, component_id: str) -> DriftCheckResult:
        """
        Compare tracked table status with physical presence. Observational
        only: the drift is written back onto an existing state record and
        nothing else changes.
        """
        now = self.clock()
        component = self.registry.get_by_id(component_id)
        if component is None or not component.has_schema:
            return DriftCheckResult(
                component_id=component_id,
                drift=ComponentSchemaDrift(last_check_at=now),
            )

        state = self._load_state(component_id)
        details: List[str] = []
        has_missing = False
        has_unexpected = False

        for name in component.schema_manifest.table_names:
            exists = self._table_exists(name)
            entry = state.table(name) if state else None
            tracked_active = entry is not None and entry.status == "active"

            if tracked_active and not exists:
                has_missing = True
                details.append(f"Table {name} is marked active but does not exist in database")
            elif not tracked_active and exists:
                has_unexpected = True
                details.append(f"Table {name} exists in database but is not tracked as active")

        drift = ComponentSchemaDrift(
            last_check_at=now,
            has_unexpected_tables=has_unexpected,
            has_missing_tables=has_missing,
            details=details,
        )
        if details:
            logger.warning(f"Schema drift for {component_id}: {details}")

        if state is None:
            return DriftCheckResult(component_id=component_id, drift=drift)

        updated = state.model_copy(update={"drift": drift})
        self._save_state(component_id, updated)
        return DriftCheckResult(component_id=component_id, drift=drift, schema_state=updated)

    def check_all_drift(self) -> List[DriftCheckResult]:
        return [
            self.check_component_schema_drift(c.id)
            for c in self.registry.get_schema_managing()
        ]

    # --- Reporting ---

    def get_component_schema_info(self, component: ComponentDefinition) -> ComponentSchemaInfo:
        if not component.has_schema:
            return ComponentSchemaInfo(has_schema=False)

        tables = component.schema_manifest.table_names
        return ComponentSchemaInfo(
            has_schema=True,
            tables=tables,
            schema_state=self._load_state(component.id),
            tables_exist=[self._table_exists(name) for name in tables],
        )
