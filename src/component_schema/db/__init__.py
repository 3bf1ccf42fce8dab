"""
Database access for the component schema subsystem.
"""

from component_schema.db.base_session import Base, SessionLocal
from component_schema.db.models import Variable
from component_schema.db.introspector import (
    TableIntrospector,
    SqlAlchemyTableIntrospector,
)
from component_schema.db.variables import (
    VariableRecord,
    VariableStore,
    SqlVariableStore,
)

__all__ = [
    "Base",
    "SessionLocal",
    "Variable",
    "TableIntrospector",
    "SqlAlchemyTableIntrospector",
    "VariableRecord",
    "VariableStore",
    "SqlVariableStore",
]
