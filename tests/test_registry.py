"""
Tests for the component registry and dotted-id hierarchy helpers.
"""
import pytest

from component_schema.components.registry import (
    ComponentRegistry,
    default_registry,
    enabled_variable_name,
    get_ancestor_ids,
    get_parent_id,
    schema_state_variable_name,
)
from component_schema.components.types import ComponentDefinition
from component_schema.errors import DuplicateComponentError


class TestHierarchyHelpers:
    def test_parent_of_nested_id(self):
        assert get_parent_id("a.b.c") == "a.b"
        assert get_parent_id("trust.providers.login") == "trust.providers"

    def test_parent_of_root_is_none(self):
        assert get_parent_id("ledger") is None

    def test_ancestors_nearest_first(self):
        assert get_ancestor_ids("a.b.c") == ["a.b", "a"]
        assert get_ancestor_ids("ledger.stripe") == ["ledger"]
        assert get_ancestor_ids("ledger") == []

    def test_ancestors_need_not_be_registered(self, registry):
        """Pure string operation: 'trust.benefits' is not in the test registry."""
        assert get_ancestor_ids("trust.benefits.scan") == ["trust.benefits", "trust"]
        assert registry.get_by_id("trust.benefits") is None

    def test_variable_names(self):
        assert enabled_variable_name("sitespecific.btu") == "component_sitespecific.btu"
        assert (
            schema_state_variable_name("sitespecific.btu")
            == "component_schema_state:sitespecific.btu"
        )


class TestComponentRegistry:
    def test_get_by_id(self, registry):
        component = registry.get_by_id("trust.providers")
        assert component.name == "Trust Providers"
        assert registry.get_by_id("does.not.exist") is None

    def test_get_by_category(self, registry):
        ids = [c.id for c in registry.get_by_category("core")]
        assert ids == ["trust", "dispatch", "ledger", "worker.steward"]
        assert registry.get_by_category("nonexistent") == []

    def test_get_all_returns_copy(self, registry):
        all_components = registry.get_all()
        all_components.clear()
        assert len(registry.get_all()) == len(registry)

    def test_schema_managing_requires_manifest(self, registry):
        """worker.steward sets manages_schema but has no manifest."""
        ids = [c.id for c in registry.get_schema_managing()]
        assert ids == ["trust.providers", "dispatch", "dispatch.dnc"]

    def test_descendant_ids(self, registry):
        assert registry.get_descendant_ids("trust") == [
            "trust.providers",
            "trust.providers.login",
        ]
        assert registry.get_descendant_ids("dispatch") == ["dispatch.dnc"]
        assert registry.get_descendant_ids("ledger") == []

    def test_duplicate_ids_rejected(self):
        component = ComponentDefinition(id="x", name="X", description="")
        with pytest.raises(DuplicateComponentError):
            ComponentRegistry([component, component])


class TestBuiltinCatalog:
    def test_table_names_unique_across_components(self):
        registry = default_registry()
        names = [
            name
            for component in registry.get_schema_managing()
            for name in component.schema_manifest.table_names
        ]
        assert len(names) == len(set(names))

    def test_trust_providers_manifest(self):
        component = default_registry().get_by_id("trust.providers")
        assert component.has_schema
        assert component.schema_manifest.table_names == [
            "trust_providers",
            "trust_provider_contacts",
        ]
