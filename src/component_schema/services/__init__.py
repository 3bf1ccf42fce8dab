"""
Component schema services: state persistence, lifecycle, migrations and
component enablement.
"""

from component_schema.services.state_repository import SchemaStateRepository
from component_schema.services.lifecycle import (
    ComponentLifecycleManager,
    ComponentLifecycleResult,
    ComponentSchemaInfo,
    DriftCheckResult,
    SchemaOperationResult,
)
from component_schema.services.migrations import (
    Migration,
    MigrationRunner,
    MigrationRunResult,
    MigrationStatus,
)
from component_schema.services.component_config import (
    ComponentConfigService,
    ComponentToggleResult,
)

__all__ = [
    "SchemaStateRepository",
    "ComponentLifecycleManager",
    "ComponentLifecycleResult",
    "ComponentSchemaInfo",
    "DriftCheckResult",
    "SchemaOperationResult",
    "Migration",
    "MigrationRunner",
    "MigrationRunResult",
    "MigrationStatus",
    "ComponentConfigService",
    "ComponentToggleResult",
]
