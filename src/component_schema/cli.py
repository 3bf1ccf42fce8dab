# src/component_schema/cli.py
"""
Operator CLI for component schemas and startup migrations.

Usage:
    component-schema list
    component-schema info dispatch
    component-schema enable dispatch
    component-schema disable dispatch --drop-data --confirm DELETE
    component-schema drift [dispatch]
    component-schema migrate --migrations-module myapp.migrations
    component-schema migration-status --migrations-module myapp.migrations

Migrations modules expose a MIGRATIONS list of Migration objects.
"""
import argparse
import importlib
import json
import logging
import sys
from typing import List, Optional

from component_schema.bootstrap import build_runtime
from component_schema.config import settings
from component_schema.db.setup import initialize_database
from component_schema.errors import ComponentNotFoundError, ComponentSchemaError
from component_schema.logging_setup import setup_logging
from component_schema.services.migrations import Migration

logger = logging.getLogger(__name__)


def load_migrations(module_path: Optional[str]) -> List[Migration]:
    if not module_path:
        return []
    module = importlib.import_module(module_path)
    migrations = getattr(module, "MIGRATIONS", None)
    if migrations is None:
        raise ComponentSchemaError(f"{module_path} does not define MIGRATIONS")
    return list(migrations)


def _print(payload) -> None:
    print(json.dumps(payload, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="component-schema",
        description="Manage component-owned database tables and startup migrations",
    )
    parser.add_argument(
        "--migrations-module",
        help="Python module exposing a MIGRATIONS list",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List components and their enabled state")

    info = sub.add_parser("info", help="Show schema info for a component")
    info.add_argument("component_id")

    enable = sub.add_parser("enable", help="Enable a component and create its tables")
    enable.add_argument("component_id")

    disable = sub.add_parser("disable", help="Disable a component")
    disable.add_argument("component_id")
    disable.add_argument(
        "--drop-data",
        action="store_true",
        help="Drop the component's tables instead of retaining them",
    )
    disable.add_argument("--confirm", help="Type DELETE to confirm --drop-data")

    drift = sub.add_parser("drift", help="Check schema drift")
    drift.add_argument("component_id", nargs="?", help="Default: all schema components")

    sub.add_parser("migrate", help="Apply pending migrations")
    sub.add_parser("migration-status", help="Show migration status")

    return parser


def run_command(args, runtime) -> int:
    if args.command == "list":
        _print([
            {
                "id": component.id,
                "name": component.name,
                "category": component.category,
                "managesSchema": component.manages_schema,
                "enabled": enabled,
            }
            for component, enabled in runtime.component_config.list_configs()
        ])
        return 0

    if args.command == "info":
        component = runtime.registry.get_by_id(args.component_id)
        if component is None:
            raise ComponentNotFoundError(args.component_id)
        _print(runtime.lifecycle.get_component_schema_info(component).to_dict())
        return 0

    if args.command == "enable":
        result = runtime.component_config.set_enabled(args.component_id, True)
        _print(result.to_dict())
        return 0

    if args.command == "disable":
        result = runtime.component_config.set_enabled(
            args.component_id,
            False,
            retain_data=not args.drop_data,
            confirm_destructive=args.confirm,
        )
        _print(result.to_dict())
        return 0

    if args.command == "drift":
        if args.component_id:
            results = [runtime.lifecycle.check_component_schema_drift(args.component_id)]
        else:
            results = runtime.lifecycle.check_all_drift()
        _print([r.to_dict() for r in results])
        return 1 if any(r.has_drift for r in results) else 0

    if args.command == "migrate":
        result = runtime.migrations.run_migrations()
        _print({"ran": result.ran, "skipped": result.skipped, "errors": result.errors})
        return 0 if result.success else 1

    if args.command == "migration-status":
        status = runtime.migrations.get_migration_status()
        _print({
            "currentVersion": status.current_version,
            "totalMigrations": status.total_migrations,
            "pendingMigrations": status.pending_migrations,
        })
        return 0

    raise ComponentSchemaError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None, runtime=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if runtime is None:
        setup_logging(settings)
        runtime = build_runtime(
            settings, migrations=load_migrations(args.migrations_module)
        )
        initialize_database(runtime.engine)

    try:
        return run_command(args, runtime)
    except ComponentSchemaError as e:
        logger.error(str(e))
        payload = {"error": str(e)}
        result = getattr(e, "result", None)
        if result is not None:
            payload["lifecycle"] = result.to_dict()
        tables = getattr(e, "tables", None)
        if tables:
            payload["tables"] = tables
        _print(payload)
        return 1


if __name__ == "__main__":
    sys.exit(main())
