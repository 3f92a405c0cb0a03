#!/usr/bin/env python3
"""
StoreLedger management CLI.

Usage:
    python manage.py serve               Start the API server (foreground)
    python manage.py migrate             Apply pending database migrations
    python manage.py status              Show migration status
    python manage.py verify              Check schema integrity
    python manage.py reconcile STORE_ID  Compare stock with the stock ledger
"""

import argparse
import asyncio
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent


def cmd_serve(args: argparse.Namespace) -> None:
    """Run uvicorn in the foreground."""
    import uvicorn

    from storeledger.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "storeledger.api.main:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload,
        workers=None if args.reload else args.workers,
    )


def cmd_migrate(args: argparse.Namespace) -> None:
    from storeledger.infrastructure.storage.sqlite.migrations import initialize_database

    results = asyncio.run(
        initialize_database(args.db_path, create_backup_before=not args.no_backup)
    )
    if not results:
        print("Database is up to date.")
    for result in results:
        state = "SUCCESS" if result.success else "FAILED"
        print(f"[{state}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")


def cmd_status(args: argparse.Namespace) -> None:
    from storeledger.infrastructure.storage.sqlite.migrations import get_migration_status

    status = asyncio.run(get_migration_status(args.db_path))
    print(f"Database exists: {status['exists']}")
    print(f"Current version: {status.get('current_version') or 'N/A'}")
    print(f"Applied migrations: {status.get('applied_migrations', [])}")
    print(f"Pending migrations: {status.get('pending_migrations', [])}")


def cmd_verify(args: argparse.Namespace) -> None:
    from storeledger.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    checks = asyncio.run(verify_schema_integrity(args.db_path))
    failed = False
    for check in checks:
        print(f"[{check['status']}] {check['check']}")
        if check["status"] != "PASS":
            failed = True
            for key, value in check.items():
                if key not in ("check", "status"):
                    print(f"       {key}: {value}")
    if failed:
        sys.exit(1)


def cmd_reconcile(args: argparse.Namespace) -> None:
    """Report products whose stock differs from the sum of their ledger entries."""
    from storeledger.application.use_cases import ReconcileStockUseCase
    from storeledger.infrastructure.storage.sqlite import close_storage, get_uow_factory

    async def run():
        try:
            use_case = ReconcileStockUseCase(await get_uow_factory())
            return await use_case.execute(args.store_id)
        finally:
            await close_storage()

    result = asyncio.run(run())
    print(f"Store {result.store_id}: {len(result.lines)} products checked.")
    if not result.mismatches:
        print("Stock matches the ledger.")
        return
    for line in result.mismatches:
        print(
            f"  product {line.product_id} ({line.sku or line.title}): "
            f"stock={line.stock} ledger={line.ledger_total} diff={line.difference:+d}"
        )
    sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="StoreLedger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", default=None, help="Bind host (default from settings)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default from settings)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.add_argument("--workers", type=int, default=1, help="Number of uvicorn workers")
    p_serve.set_defaults(func=cmd_serve)

    # migrate / status / verify
    for name, func, help_text in (
        ("migrate", cmd_migrate, "Apply pending migrations"),
        ("status", cmd_status, "Show migration status"),
        ("verify", cmd_verify, "Verify schema integrity"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--db-path", type=Path, default=None, help="Database path (default from settings)")
        p.set_defaults(func=func)
    sub.choices["migrate"].add_argument(
        "--no-backup", action="store_true", help="Skip backup before migrations"
    )

    # reconcile
    p_reconcile = sub.add_parser("reconcile", help="Compare product stock with the stock ledger")
    p_reconcile.add_argument("store_id", type=int, help="Store to reconcile")
    p_reconcile.set_defaults(func=cmd_reconcile)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
