# src/component_schema/services/state_repository.py
import logging
from typing import Optional

from component_schema.components.registry import (
    SCHEMA_STATE_PREFIX,
    schema_state_variable_name,
)
from component_schema.components.types import ComponentSchemaState
from component_schema.db.variables import VariableStore

logger = logging.getLogger(__name__)


class SchemaStateRepository:
    """
    Persists one ComponentSchemaState per component in the variable store.
    No validation beyond parsing: this is a thin persistence shim.
    """

    def __init__(self, store: VariableStore, prefix: str = SCHEMA_STATE_PREFIX):
        self.store = store
        self.prefix = prefix

    def variable_name(self, component_id: str) -> str:
        return schema_state_variable_name(component_id, self.prefix)

    def get(self, component_id: str) -> Optional[ComponentSchemaState]:
        variable = self.store.get_by_name(self.variable_name(component_id))
        if variable is None or variable.value is None:
            return None
        return ComponentSchemaState.model_validate(variable.value)

    def save(self, component_id: str, state: ComponentSchemaState) -> None:
        name = self.variable_name(component_id)
        existing = self.store.get_by_name(name)
        if existing:
            self.store.update(existing.id, name, state.to_json())
        else:
            self.store.create(name, state.to_json())
        logger.debug(f"Saved schema state for {component_id}")

    def delete(self, component_id: str) -> None:
        existing = self.store.get_by_name(self.variable_name(component_id))
        if existing:
            self.store.delete(existing.id)
            logger.debug(f"Deleted schema state for {component_id}")
