# src/component_schema/components/registry.py
from typing import Iterable, List, Optional

from component_schema.components.types import ComponentDefinition
from component_schema.errors import DuplicateComponentError

SCHEMA_STATE_PREFIX = "component_schema_state:"


def get_parent_id(component_id: str) -> Optional[str]:
    """
    "trust.providers.login" -> "trust.providers"
    "ledger" -> None
    """
    head, sep, _ = component_id.rpartition(".")
    return head if sep else None


def get_ancestor_ids(component_id: str) -> List[str]:
    """ "a.b.c" -> ["a.b", "a"]. Ancestors need not be registered."""
    ancestors = []
    current = get_parent_id(component_id)
    while current is not None:
        ancestors.append(current)
        current = get_parent_id(current)
    return ancestors


def enabled_variable_name(component_id: str) -> str:
    return f"component_{component_id}"


def schema_state_variable_name(component_id: str, prefix: str = SCHEMA_STATE_PREFIX) -> str:
    return f"{prefix}{component_id}"


class ComponentRegistry:
    """Read-only lookup over a fixed list of component definitions."""

    def __init__(self, components: Iterable[ComponentDefinition]):
        self._components: List[ComponentDefinition] = []
        self._by_id = {}
        for component in components:
            if component.id in self._by_id:
                raise DuplicateComponentError(f"Duplicate component id: {component.id}")
            self._by_id[component.id] = component
            self._components.append(component)

    def __len__(self) -> int:
        return len(self._components)

    def __contains__(self, component_id: str) -> bool:
        return component_id in self._by_id

    def get_by_id(self, component_id: str) -> Optional[ComponentDefinition]:
        return self._by_id.get(component_id)

    def get_by_category(self, category: str) -> List[ComponentDefinition]:
        return [c for c in self._components if c.category == category]

    def get_all(self) -> List[ComponentDefinition]:
        return list(self._components)

    def get_schema_managing(self) -> List[ComponentDefinition]:
        return [c for c in self._components if c.has_schema]

    def get_descendant_ids(self, component_id: str) -> List[str]:
        prefix = component_id + "."
        return [c.id for c in self._components if c.id.startswith(prefix)]


def default_registry() -> ComponentRegistry:
    """Registry populated with the built-in component catalog."""
    from component_schema.components.catalog import BUILTIN_COMPONENTS

    return ComponentRegistry(BUILTIN_COMPONENTS)
