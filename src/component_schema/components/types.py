# src/component_schema/components/types.py
"""
Component data model.

Definitions and manifests are static, compiled-in dataclasses. Schema
state is persisted as JSON in the variable store, so its models are
pydantic with camelCase aliases.
"""
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from component_schema.errors import ManifestError

COLUMN_TYPES = ("varchar", "text", "timestamp", "integer", "serial", "boolean")


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    name: str
    type: str
    nullable: bool = True
    primary_key: bool = False
    default: Optional[Union[str, int, bool]] = None

    def __post_init__(self):
        if self.type not in COLUMN_TYPES:
            raise ManifestError(
                f"Column {self.name}: unsupported type {self.type!r}, "
                f"expected one of {', '.join(COLUMN_TYPES)}"
            )
        # Only a key column gets a generated sequence.
        if self.type == "serial" and not self.primary_key:
            raise ManifestError(
                f"Column {self.name}: serial is only supported on primary key columns"
            )


@dataclass(frozen=True, slots=True)
class TableManifest:
    """
    One component-owned table.

    Declares either literal `create_sql` (with optional `drop_sql`) or a
    `columns` list from which DDL is generated. Never both.
    """

    table_name: str
    columns: Tuple[ColumnSpec, ...] = ()
    create_sql: Optional[str] = None
    drop_sql: Optional[str] = None

    def __post_init__(self):
        if bool(self.columns) == bool(self.create_sql):
            raise ManifestError(
                f"Table {self.table_name}: declare exactly one of columns or create_sql"
            )


@dataclass(frozen=True, slots=True)
class SchemaManifest:
    tables: Tuple[TableManifest, ...]
    version: int = 1

    @property
    def table_names(self) -> List[str]:
        return [t.table_name for t in self.tables]


@dataclass(frozen=True, slots=True)
class ComponentDefinition:
    id: str
    name: str
    description: str
    enabled_by_default: bool = False
    category: Optional[str] = None
    manages_schema: bool = False
    schema_manifest: Optional[SchemaManifest] = field(default=None)

    @property
    def has_schema(self) -> bool:
        return self.manages_schema and self.schema_manifest is not None


# --- Persisted state ---


class _StateModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ComponentTableState(_StateModel):
    table_name: str
    status: Literal["active", "dropped"]
    applied_at: Optional[str] = None
    dropped_at: Optional[str] = None
    checksum: str


class ComponentSchemaDrift(_StateModel):
    last_check_at: str
    has_unexpected_tables: bool = False
    has_missing_tables: bool = False
    details: List[str] = []


class ComponentSchemaState(_StateModel):
    manifest_version: int
    last_synced_at: str
    tables: List[ComponentTableState]
    drift: Optional[ComponentSchemaDrift] = None

    def table(self, table_name: str) -> Optional[ComponentTableState]:
        return next((t for t in self.tables if t.table_name == table_name), None)

    def to_json(self) -> dict:
        """JSON value as stored in the variable store."""
        return self.model_dump(mode="json", by_alias=True)
