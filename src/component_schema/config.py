"""
Component Schema Configuration.

Settings are loaded from `global_config.toml` at the repository root,
then environment variables, then a .env file.
"""
import sys
from typing import Union, Literal, Tuple, Callable, Type
from pathlib import Path

from pydantic import BaseModel, Field
from typing import Optional

from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    TomlConfigSettingsSource,
    InitSettingsSource,
    EnvSettingsSource,
    DotEnvSettingsSource,
    SecretsSettingsSource,
)

# Absolute path to the config file at the repository root.
BASE_DIR = Path(__file__).resolve().parent.parent.parent
TOML_PATH = BASE_DIR / "global_config.toml"

if not TOML_PATH.is_file():
    print(f"WARNING: Config file not found at path: {TOML_PATH}", file=sys.stderr)
    print(f"WARNING: Current working directory: {Path.cwd()}", file=sys.stderr)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_to_file: bool = False
    log_file: str = "component_schema.log"
    rotation_size_mb: int = 10
    rotation_backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Discriminated union for database configurations.
# Pydantic uses the 'type' field to select the correct model.


class SQLiteConfig(BaseModel):
    type: Literal["sqlite3"] = "sqlite3"
    db_location: str = "component_schema.sqlite3"
    in_memory: bool = False


class PostgresConfig(BaseModel):
    type: Literal["postgres"] = "postgres"
    host: str = "localhost"
    port: int = 5432
    db_name: str = "YOUR_DATABASE_NAME"
    driver: str = "psycopg"

    # Optional, for trust/peer authentication
    username: Optional[str] = None
    password: Optional[str] = None

    # Schema searched by the table introspector
    db_schema: Optional[str] = "public"


DatabaseConfig = Union[SQLiteConfig, PostgresConfig]


class LifecycleConfig(BaseModel):
    """
    Component schema lifecycle settings.

    operation_timeout_seconds bounds every DDL statement and every
    variable store call. None means calls may block indefinitely.
    """

    operation_timeout_seconds: Optional[float] = None
    state_variable_prefix: str = "component_schema_state:"
    migrations_variable_name: str = "migrations_version"
    check_drift_on_startup: bool = True


class AppSettings(BaseSettings):
    """
    Main settings class that loads configuration from various sources.
    Uses defaults if the file or keys are missing.
    """

    logging: LoggingConfig = LoggingConfig()
    database: DatabaseConfig = Field(default=SQLiteConfig(), discriminator="type")
    lifecycle: LifecycleConfig = LifecycleConfig()

    model_config = SettingsConfigDict(
        extra="forbid",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: InitSettingsSource,
        env_settings: EnvSettingsSource,
        dotenv_settings: DotEnvSettingsSource,
        file_secret_settings: SecretsSettingsSource,
    ) -> Tuple[Callable, ...]:
        """
        Define the priority order for loading settings sources.
        Our custom TOML file is inserted with high priority.
        """
        return (
            init_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=TOML_PATH),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )


# Singleton instance of the settings used throughout the app.
settings = AppSettings()
