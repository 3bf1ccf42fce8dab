"""
Component definitions, schema manifests and the component registry.
"""

from component_schema.components.types import (
    ColumnSpec,
    TableManifest,
    SchemaManifest,
    ComponentDefinition,
    ComponentTableState,
    ComponentSchemaDrift,
    ComponentSchemaState,
)
from component_schema.components.registry import (
    ComponentRegistry,
    default_registry,
    get_parent_id,
    get_ancestor_ids,
    enabled_variable_name,
    schema_state_variable_name,
)

__all__ = [
    "ColumnSpec",
    "TableManifest",
    "SchemaManifest",
    "ComponentDefinition",
    "ComponentTableState",
    "ComponentSchemaDrift",
    "ComponentSchemaState",
    "ComponentRegistry",
    "default_registry",
    "get_parent_id",
    "get_ancestor_ids",
    "enabled_variable_name",
    "schema_state_variable_name",
]
