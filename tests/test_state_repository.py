"""
Tests for schema state persistence in the variable store.
"""
from component_schema.components.types import (
    ComponentSchemaDrift,
    ComponentSchemaState,
    ComponentTableState,
)
from component_schema.services.state_repository import SchemaStateRepository
from tests.conftest import FIXED_NOW


def _state(version=1):
    return ComponentSchemaState(
        manifest_version=version,
        last_synced_at=FIXED_NOW,
        tables=[
            ComponentTableState(
                table_name="trust_providers",
                status="active",
                applied_at=FIXED_NOW,
                checksum="a" * 64,
            )
        ],
    )


class TestSchemaStateRepository:
    def test_get_missing_returns_none(self, state_repository):
        assert state_repository.get("trust.providers") is None

    def test_save_then_get(self, state_repository):
        state_repository.save("trust.providers", _state())
        assert state_repository.get("trust.providers") == _state()

    def test_stored_value_is_camel_case_json(self, state_repository, variable_store):
        state_repository.save("trust.providers", _state())

        record = variable_store.get_by_name("component_schema_state:trust.providers")

        assert record.value["manifestVersion"] == 1
        assert record.value["lastSyncedAt"] == FIXED_NOW
        assert record.value["tables"][0] == {
            "tableName": "trust_providers",
            "status": "active",
            "appliedAt": FIXED_NOW,
            "droppedAt": None,
            "checksum": "a" * 64,
        }

    def test_save_overwrites_single_record(self, state_repository, variable_store):
        state_repository.save("trust.providers", _state(1))
        first_id = variable_store.get_by_name("component_schema_state:trust.providers").id

        state_repository.save("trust.providers", _state(2))

        record = variable_store.get_by_name("component_schema_state:trust.providers")
        assert record.id == first_id
        assert state_repository.get("trust.providers").manifest_version == 2

    def test_drift_round_trips(self, state_repository):
        state = _state().model_copy(
            update={
                "drift": ComponentSchemaDrift(
                    last_check_at=FIXED_NOW,
                    has_missing_tables=True,
                    details=["Table trust_providers is marked active but does not exist in database"],
                )
            }
        )
        state_repository.save("trust.providers", state)

        loaded = state_repository.get("trust.providers")
        assert loaded.drift.has_missing_tables is True
        assert loaded.drift.has_unexpected_tables is False

    def test_delete(self, state_repository):
        state_repository.save("trust.providers", _state())
        state_repository.delete("trust.providers")
        assert state_repository.get("trust.providers") is None

    def test_delete_missing_is_noop(self, state_repository):
        state_repository.delete("never.saved")

    def test_custom_prefix(self, variable_store):
        repository = SchemaStateRepository(variable_store, prefix="schema:")
        repository.save("dispatch", _state())
        assert variable_store.get_by_name("schema:dispatch") is not None
        assert variable_store.get_by_name("component_schema_state:dispatch") is None
