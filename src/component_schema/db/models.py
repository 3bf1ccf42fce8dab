# src/component_schema/db/models.py
"""
Database models owned by the component schema subsystem.

Component tables themselves are never mapped here: they are created and
dropped from manifests at runtime. The only mapped table is the generic
variables store that persists schema state and migration progress.
"""
from sqlalchemy import Column, Integer, String, JSON, DateTime, func

from component_schema.db.base_session import Base


class Variable(Base):
    """
    Named JSON value. Schema state records, the migration version and
    component enabled flags all live here.
    """

    __tablename__ = "variables"
    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
