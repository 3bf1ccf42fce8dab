from sqlalchemy.orm import declarative_base, sessionmaker
from component_schema.config import settings

# PostgreSQL keeps the variables table in the configured schema.
if settings.database.type == "postgres" and settings.database.db_schema:
    DEFAULT_SCHEMA = settings.database.db_schema

    class ComponentSchemaBase:
        __table_args__ = {"schema": DEFAULT_SCHEMA}

    Base = declarative_base(cls=ComponentSchemaBase)
else:
    DEFAULT_SCHEMA = None
    Base = declarative_base()


# A factory for creating new Session objects.
SessionLocal = sessionmaker(autocommit=False, autoflush=False)
