# src/component_schema/services/migrations.py
"""
Sequential one-shot startup migrations.

Migrations are registered at process start and applied in ascending
version order. The last applied version is a single integer in the
variable store, advanced after each successful migration, so a failed
run resumes from the failing migration on the next call.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from component_schema.db.variables import VariableStore
from component_schema.timeouts import run_with_timeout

logger = logging.getLogger(__name__)

MIGRATIONS_VERSION_VARIABLE = "migrations_version"


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    description: str
    up: Callable[[], None]


@dataclass
class MigrationRunResult:
    ran: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass
class MigrationStatus:
    current_version: int
    total_migrations: int
    pending_migrations: int


class MigrationRunner:
    def __init__(
        self,
        store: VariableStore,
        version_variable_name: str = MIGRATIONS_VERSION_VARIABLE,
        operation_timeout: Optional[float] = None,
    ):
        self.store = store
        self.version_variable_name = version_variable_name
        self.operation_timeout = operation_timeout
        self._migrations: List[Migration] = []

    def register_migration(self, migration: Migration) -> None:
        """
        Append and re-sort by version. Sorting is stable, so migrations
        sharing a version keep their registration order.
        """
        if any(m.version == migration.version for m in self._migrations):
            logger.warning(
                f"Migration version {migration.version} ({migration.name}) "
                "is already registered"
            )
        self._migrations.append(migration)
        self._migrations.sort(key=lambda m: m.version)

    def get_migrations(self) -> List[Migration]:
        return list(self._migrations)

    # --- Version record ---

    def _read_version(self) -> int:
        variable = run_with_timeout(
            self.store.get_by_name,
            self.version_variable_name,
            timeout=self.operation_timeout,
            description="read migration version",
        )
        if variable is None or variable.value is None:
            return 0
        return int(variable.value)

    def _write_version(self, version: int) -> None:
        def write():
            existing = self.store.get_by_name(self.version_variable_name)
            if existing is None:
                self.store.create(self.version_variable_name, version)
                return
            current = int(existing.value or 0)
            if version < current:
                raise ValueError(
                    f"Refusing to lower migration version from {current} to {version}"
                )
            self.store.update(existing.id, self.version_variable_name, version)

        run_with_timeout(
            write,
            timeout=self.operation_timeout,
            description=f"record migration version {version}",
        )

    # --- Execution ---

    def run_migrations(self) -> MigrationRunResult:
        current_version = self._read_version()
        pending = [m for m in self._migrations if m.version > current_version]
        result = MigrationRunResult(skipped=len(self._migrations) - len(pending))

        if not pending:
            logger.debug(f"No pending migrations (version {current_version})")
            return result

        logger.info(
            f"Running {len(pending)} migration(s) from version {current_version}"
        )
        for migration in pending:
            try:
                logger.info(f"Applying migration {migration.version} ({migration.name})")
                run_with_timeout(
                    migration.up,
                    timeout=self.operation_timeout,
                    description=f"migration {migration.version} ({migration.name})",
                )
                self._write_version(migration.version)
            except Exception as e:
                message = f"Migration {migration.version} ({migration.name}) failed: {e}"
                logger.error(message)
                result.errors.append(message)
                break
            result.ran += 1

        return result

    def get_migration_status(self) -> MigrationStatus:
        current_version = self._read_version()
        return MigrationStatus(
            current_version=current_version,
            total_migrations=len(self._migrations),
            pending_migrations=sum(
                1 for m in self._migrations if m.version > current_version
            ),
        )
