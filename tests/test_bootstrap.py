"""
Tests for settings, engine creation and the startup routine.
"""
import logging
from logging.handlers import RotatingFileHandler
from types import SimpleNamespace

import pytest
from sqlalchemy import inspect

from component_schema.bootstrap import build_runtime, startup
from component_schema.config import AppSettings, PostgresConfig, SQLiteConfig
from component_schema.db.access import get_engine
from component_schema.errors import MigrationError
from component_schema.logging_setup import setup_logging
from component_schema.services.migrations import Migration


@pytest.fixture
def app_settings(tmp_path):
    return AppSettings(
        database={"type": "sqlite3", "db_location": str(tmp_path / "startup.sqlite3")},
        lifecycle={"operation_timeout_seconds": None},
    )


def _migration(version, name, fail=False, calls=None):
    def up():
        if fail:
            raise RuntimeError("boom")
        calls.append(version)

    return Migration(version=version, name=name, description="", up=up)


class TestSettings:
    def test_database_discriminator(self, app_settings):
        assert isinstance(app_settings.database, SQLiteConfig)
        postgres = AppSettings(database={"type": "postgres", "db_name": "sirius"})
        assert isinstance(postgres.database, PostgresConfig)
        assert postgres.database.db_schema == "public"

    def test_lifecycle_defaults(self, app_settings):
        assert app_settings.lifecycle.state_variable_prefix == "component_schema_state:"
        assert app_settings.lifecycle.migrations_variable_name == "migrations_version"
        assert app_settings.lifecycle.operation_timeout_seconds is None


class TestGetEngine:
    def test_sqlite_file(self, tmp_path):
        engine = get_engine(SQLiteConfig(db_location=str(tmp_path / "x.sqlite3")))
        assert engine.dialect.name == "sqlite"

    def test_sqlite_memory(self):
        engine = get_engine(SQLiteConfig(in_memory=True))
        assert engine.url.database == ":memory:"

    def test_sqlite_memory_shared_across_threads(self):
        """Timed calls run on worker threads and must see the caller's tables."""
        app_settings = AppSettings(
            database={"type": "sqlite3", "in_memory": True},
            lifecycle={"operation_timeout_seconds": 5.0},
        )
        runtime = build_runtime(app_settings)

        startup(runtime, app_settings)
        result = runtime.lifecycle.enable_component_schema("cardcheck")

        assert result.success is True
        assert runtime.lifecycle.state_repository.get("cardcheck") is not None

    def test_unsupported_type(self):
        with pytest.raises(ValueError, match="Unsupported DB type"):
            get_engine(SimpleNamespace(type="mssql"))


class TestStartup:
    def test_creates_variables_table_and_runs_migrations(self, app_settings):
        calls = []
        runtime = build_runtime(
            app_settings,
            migrations=[_migration(2, "b", calls=calls), _migration(1, "a", calls=calls)],
        )

        result = startup(runtime, app_settings)

        assert "variables" in inspect(runtime.engine).get_table_names()
        assert result.ran == 2
        assert calls == [1, 2]
        assert runtime.migrations.get_migration_status().current_version == 2

    def test_migration_failure_is_fatal(self, app_settings):
        calls = []
        runtime = build_runtime(
            app_settings,
            migrations=[_migration(1, "a", calls=calls), _migration(2, "create_y", fail=True)],
        )

        with pytest.raises(MigrationError) as exc_info:
            startup(runtime, app_settings)

        assert exc_info.value.errors == ["Migration 2 (create_y) failed: boom"]
        assert runtime.migrations.get_migration_status().current_version == 1

    def test_reports_drift_on_startup(self, app_settings, caplog):
        runtime = build_runtime(app_settings)
        startup(runtime, app_settings)
        runtime.lifecycle.enable_component_schema("cardcheck")
        runtime.introspector.execute("DROP TABLE cardchecks")

        with caplog.at_level(logging.WARNING):
            startup(runtime, app_settings)

        assert "cardcheck schema drift" in caplog.text

    def test_runtime_uses_configured_names(self, tmp_path):
        app_settings = AppSettings(
            database={"type": "sqlite3", "db_location": str(tmp_path / "names.sqlite3")},
            lifecycle={
                "operation_timeout_seconds": None,
                "state_variable_prefix": "schema:",
                "migrations_variable_name": "app_version",
            },
        )
        runtime = build_runtime(app_settings)

        assert runtime.lifecycle.state_repository.variable_name("dispatch") == "schema:dispatch"
        assert runtime.migrations.version_variable_name == "app_version"


class TestSetupLogging:
    def test_console_and_rotating_file_handlers(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        log_file = tmp_path / "logs" / "component_schema.log"
        app_settings = AppSettings(
            logging={"level": "debug", "log_to_file": True, "log_file": str(log_file)}
        )

        try:
            setup_logging(app_settings)

            assert root.level == logging.DEBUG
            assert [type(h) for h in root.handlers] == [
                logging.StreamHandler,
                RotatingFileHandler,
            ]
            assert log_file.parent.is_dir()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
