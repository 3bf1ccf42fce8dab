# src/component_schema/services/component_config.py
"""
Component enable/disable with hierarchy checks.

A component is effectively enabled only when it and every registered
ancestor are enabled. Schema-owning components run their schema
lifecycle before the enabled flag is written; if the lifecycle fails
the flag is left unchanged.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from component_schema.components.registry import (
    ComponentRegistry,
    enabled_variable_name,
    get_ancestor_ids,
)
from component_schema.components.types import ComponentDefinition
from component_schema.db.variables import VariableStore
from component_schema.errors import (
    ComponentNotFoundError,
    ConfirmationRequiredError,
    DependencyError,
    SchemaLifecycleError,
)
from component_schema.services.lifecycle import (
    ComponentLifecycleManager,
    ComponentLifecycleResult,
)

logger = logging.getLogger(__name__)

DESTRUCTIVE_CONFIRMATION = "DELETE"


@dataclass
class ComponentToggleResult:
    component_id: str
    requested_state: bool
    enabled: bool
    manages_schema: bool
    lifecycle: Optional[ComponentLifecycleResult] = None

    @property
    def message(self) -> str:
        action = "enabled" if self.requested_state else "disabled"
        suffix = ""
        if self.enabled != self.requested_state:
            suffix = " (but disabled due to parent component)"
        return f"Component {action} successfully{suffix}"

    def to_dict(self) -> dict:
        return {
            "componentId": self.component_id,
            "enabled": self.enabled,
            "requestedState": self.requested_state,
            "managesSchema": self.manages_schema,
            "message": self.message,
            "lifecycle": self.lifecycle.to_dict() if self.lifecycle else None,
        }


class ComponentConfigService:
    def __init__(
        self,
        registry: ComponentRegistry,
        store: VariableStore,
        lifecycle: ComponentLifecycleManager,
    ):
        self.registry = registry
        self.store = store
        self.lifecycle = lifecycle

    def _get_component(self, component_id: str) -> ComponentDefinition:
        component = self.registry.get_by_id(component_id)
        if component is None:
            raise ComponentNotFoundError(component_id)
        return component

    def is_explicitly_enabled(self, component_id: str) -> bool:
        """Stored flag, else the component's default. Ignores ancestors."""
        variable = self.store.get_by_name(enabled_variable_name(component_id))
        if variable is not None and variable.value is not None:
            return bool(variable.value)
        component = self.registry.get_by_id(component_id)
        return component.enabled_by_default if component else False

    def is_enabled(self, component_id: str) -> bool:
        if not self.is_explicitly_enabled(component_id):
            return False
        return all(
            self.is_explicitly_enabled(ancestor_id)
            for ancestor_id in get_ancestor_ids(component_id)
            if ancestor_id in self.registry
        )

    def list_configs(self) -> List[Tuple[ComponentDefinition, bool]]:
        return [(c, self.is_enabled(c.id)) for c in self.registry.get_all()]

    def _write_flag(self, component_id: str, enabled: bool) -> None:
        name = enabled_variable_name(component_id)
        existing = self.store.get_by_name(name)
        if existing:
            self.store.update(existing.id, name, enabled)
        else:
            self.store.create(name, enabled)

    def _check_dependencies(self, component: ComponentDefinition, enabled: bool) -> None:
        if enabled:
            disabled = [
                ancestor_id
                for ancestor_id in get_ancestor_ids(component.id)
                if ancestor_id in self.registry and not self.is_explicitly_enabled(ancestor_id)
            ]
            if disabled:
                names = [self.registry.get_by_id(i).name for i in disabled]
                raise DependencyError(
                    f'Cannot enable "{component.name}" because the following parent '
                    f"components are disabled: {', '.join(names)}. "
                    "Please enable them first.",
                    disabled,
                )
        else:
            still_enabled = [
                descendant_id
                for descendant_id in self.registry.get_descendant_ids(component.id)
                if self.is_enabled(descendant_id)
            ]
            if still_enabled:
                names = [self.registry.get_by_id(i).name for i in still_enabled]
                raise DependencyError(
                    f'Cannot disable "{component.name}" because the following dependent '
                    f"components are still enabled: {', '.join(names)}. "
                    "Please disable them first.",
                    still_enabled,
                )

    def set_enabled(
        self,
        component_id: str,
        enabled: bool,
        retain_data: bool = True,
        confirm_destructive: Optional[str] = None,
    ) -> ComponentToggleResult:
        component = self._get_component(component_id)
        self._check_dependencies(component, enabled)

        lifecycle_result = None
        if component.has_schema:
            if not enabled and not retain_data:
                info = self.lifecycle.get_component_schema_info(component)
                if any(info.tables_exist) and confirm_destructive != DESTRUCTIVE_CONFIRMATION:
                    raise ConfirmationRequiredError(
                        "This component has active database tables. Disabling it "
                        f"will DELETE all data. Confirm with '{DESTRUCTIVE_CONFIRMATION}'.",
                        info.tables,
                    )

            if enabled:
                lifecycle_result = self.lifecycle.enable_component_schema(component_id)
            else:
                lifecycle_result = self.lifecycle.disable_component_schema(
                    component_id, retain_data=retain_data
                )
            if not lifecycle_result.success:
                action = "create" if enabled else "process"
                raise SchemaLifecycleError(
                    f"Failed to {action} component tables: {lifecycle_result.error}",
                    lifecycle_result,
                )

        self._write_flag(component_id, enabled)
        effective = self.is_enabled(component_id)
        logger.info(
            f"Component {component_id} set to {'enabled' if enabled else 'disabled'} "
            f"(effective: {effective})"
        )
        return ComponentToggleResult(
            component_id=component_id,
            requested_state=enabled,
            enabled=effective,
            manages_schema=component.manages_schema,
            lifecycle=lifecycle_result,
        )
