"""
Exceptions raised at the service, startup and CLI seams.

Per-table and per-migration failures are reported as data in result
objects; these exceptions cover the cases that abort a whole call.
"""
from typing import List, Optional


class ComponentSchemaError(Exception):
    """Base class for all component schema errors."""
    pass


class ComponentNotFoundError(ComponentSchemaError):
    """Raised when a component id has no registry entry."""

    def __init__(self, component_id: str):
        self.component_id = component_id
        super().__init__(f"Component not found: {component_id}")


class DuplicateComponentError(ComponentSchemaError):
    """Raised when a registry is built with two components sharing an id."""
    pass


class ManifestError(ComponentSchemaError):
    """Raised when a table manifest cannot produce DDL."""
    pass


class OperationTimeoutError(ComponentSchemaError):
    """Raised when a DDL statement or store call exceeds its time bound."""

    def __init__(self, description: str, timeout: float):
        self.description = description
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout:g}s: {description}")


class SchemaLifecycleError(ComponentSchemaError):
    """Raised when an enable/disable call did not fully succeed."""

    def __init__(self, message: str, result=None):
        self.result = result
        super().__init__(message)


class MigrationError(ComponentSchemaError):
    """Raised by the startup routine when migrations did not all apply."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class DependencyError(ComponentSchemaError):
    """Raised when a component toggle conflicts with its ancestors or descendants."""

    def __init__(self, message: str, component_ids: List[str]):
        self.component_ids = component_ids
        super().__init__(message)


class ConfirmationRequiredError(ComponentSchemaError):
    """Raised when a destructive disable was requested without confirmation."""

    def __init__(self, message: str, tables: Optional[List[str]] = None):
        self.tables = tables or []
        super().__init__(message)
