# src/component_schema/db/variables.py
"""
Variable Store: durable named JSON values.

The lifecycle manager and migration runner only see the VariableStore
protocol. SqlVariableStore backs it with the `variables` table.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from sqlalchemy import Engine, select

from component_schema.db.base_session import SessionLocal
from component_schema.db.models import Variable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariableRecord:
    id: int
    name: str
    value: Any


class VariableStore(Protocol):
    def get_by_name(self, name: str) -> Optional[VariableRecord]: ...

    def create(self, name: str, value: Any) -> VariableRecord: ...

    def update(self, variable_id: int, name: str, value: Any) -> VariableRecord: ...

    def delete(self, variable_id: int) -> None: ...


def _to_record(variable: Variable) -> VariableRecord:
    return VariableRecord(id=variable.id, name=variable.name, value=variable.value)


class SqlVariableStore:
    """VariableStore backed by the `variables` table. One transaction per call."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def get_by_name(self, name: str) -> Optional[VariableRecord]:
        with SessionLocal(bind=self.engine) as session:
            variable = session.execute(
                select(Variable).where(Variable.name == name)
            ).scalar_one_or_none()
            return _to_record(variable) if variable else None

    def create(self, name: str, value: Any) -> VariableRecord:
        with SessionLocal(bind=self.engine) as session:
            variable = Variable(name=name, value=value)
            session.add(variable)
            session.commit()
            logger.debug(f"Created variable {name}")
            return _to_record(variable)

    def update(self, variable_id: int, name: str, value: Any) -> VariableRecord:
        with SessionLocal(bind=self.engine) as session:
            variable = session.get(Variable, variable_id)
            if variable is None:
                raise KeyError(f"Variable {variable_id} does not exist")
            variable.name = name
            variable.value = value
            session.commit()
            logger.debug(f"Updated variable {name}")
            return _to_record(variable)

    def delete(self, variable_id: int) -> None:
        with SessionLocal(bind=self.engine) as session:
            variable = session.get(Variable, variable_id)
            if variable is not None:
                name = variable.name
                session.delete(variable)
                session.commit()
                logger.debug(f"Deleted variable {name}")
