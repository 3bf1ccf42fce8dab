import logging
import sqlalchemy as sa
from sqlalchemy import inspect
from sqlalchemy.schema import CreateSchema

from component_schema.db.base_session import Base, DEFAULT_SCHEMA
import component_schema.db.models  # noqa: F401

logger = logging.getLogger(__name__)


def verify_database_state(eng: sa.Engine):
    """
    Check that every table and column mapped by this package exists.
    Component tables are not checked here; drift-check covers them.
    """
    inspector = inspect(eng)
    db_tables = set(inspector.get_table_names(schema=DEFAULT_SCHEMA))

    missing_tables = []
    missing_columns = []

    for table in Base.metadata.tables.values():
        table_name = table.name

        if table_name not in db_tables:
            missing_tables.append(table_name)
            continue

        db_cols = {
            c["name"] for c in inspector.get_columns(table_name, schema=DEFAULT_SCHEMA)
        }
        for column in table.columns:
            if column.name not in db_cols:
                missing_columns.append(f"{table_name}.{column.name}")

    if missing_tables or missing_columns:
        logger.critical("CRITICAL: Database schema drift detected!")
        if missing_tables:
            logger.critical(f"Missing Tables: {missing_tables}")
        if missing_columns:
            logger.critical(f"Missing Columns: {missing_columns}")

        raise RuntimeError(
            "Database integrity violation. Schema does not match application version."
        )
    else:
        logger.info("Database schema validated successfully.")


def initialize_database(eng: sa.Engine, reset_tables: bool = False):
    """
    Ensures the variables table (and, on PostgreSQL, its schema) exists,
    optionally resetting it.
    """
    # 1. Schema creation (PostgreSQL only)
    if DEFAULT_SCHEMA and eng.dialect.name == "postgresql":
        logger.info(f"Ensuring schema '{DEFAULT_SCHEMA}' exists...")
        with eng.connect() as conn:
            if not conn.dialect.has_schema(conn, DEFAULT_SCHEMA):
                conn.execute(CreateSchema(DEFAULT_SCHEMA))
                logger.info(f"Schema '{DEFAULT_SCHEMA}' created.")
            conn.commit()

    # 2. Table creation / reset
    if reset_tables:
        logger.info("Resetting and creating database tables...")
        Base.metadata.drop_all(eng)
        Base.metadata.create_all(eng)
    else:
        logger.info("Ensuring all tables exist (create if not present)...")
        Base.metadata.create_all(eng)

    # 3. Integrity check
    verify_database_state(eng)
