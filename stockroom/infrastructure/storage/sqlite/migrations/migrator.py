"""
Versioned schema migrations for the stock database.

Files named ``v<version>_<name>.sql`` in this package are applied in
version order. Each applied file is recorded in ``schema_migrations``
together with a checksum of its text. An existing database file is copied
aside before anything runs and restored if the run blows up.

    python -m stockroom.infrastructure.storage.sqlite.migrations.migrator --status
"""

import asyncio
import hashlib
import re
import shutil
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from stockroom.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
FILENAME_PATTERN = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = [
    "products",
    "stock_movements",
    "invoices",
    "invoice_items",
    "inventories",
    "inventory_items",
    "sales",
    "sale_items",
    "schema_migrations",
]

# The ledger is only consistent while all of these exist
REQUIRED_TRIGGERS = [
    "trg_movement_insert_stock",
    "trg_movement_delete_stock",
    "trg_movement_update_stock",
    "trg_purchase_price",
]


@dataclass(frozen=True)
class Migration:
    """One migration file."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def load(cls, path: Path) -> "Migration":
        match = FILENAME_PATTERN.fullmatch(path.name)
        if match is None:
            raise ValueError(f"not a migration file name: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest[:16])


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations() -> list[Migration]:
    """Migration files in this package, lowest version first."""
    found = []
    for path in MIGRATIONS_DIR.glob("v*.sql"):
        try:
            found.append(Migration.load(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


@asynccontextmanager
async def _connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA foreign_keys=ON")
        yield conn


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # fresh database, v001 creates the table
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        # executescript commits any open transaction first; the explicit BEGIN
        # keeps the script and its schema_migrations row in one transaction
        await conn.executescript("BEGIN;\n" + migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except Exception as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(migration.version, migration.name, False, elapsed_ms(), str(e))

    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed_ms())
    return MigrationResult(migration.version, migration.name, True, elapsed_ms())


def _backup(db_path: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def _restore(backup_path: Path | None, db_path: Path) -> None:
    """Put the pre-run copy back. The copy itself is kept for inspection."""
    if backup_path is None:
        return
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring a database file up to the latest schema.

    Stops at the first failed migration, or at the first one that leaves
    foreign key violations behind, and then puts the backup copy back.

    Returns:
        Results for the migrations that were attempted, empty when the
        schema was already current.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = _backup(db_path) if create_backup_before and db_path.exists() else None
    results: list[MigrationResult] = []
    healthy = True

    try:
        async with _connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            applied = await _applied_checksums(conn)

            for migration in discover_migrations():
                if migration.version in applied:
                    if applied[migration.version] != migration.checksum:
                        logger.warning("migration_checksum_changed", version=migration.version)
                    continue

                result = await _apply(conn, migration)
                results.append(result)
                if not result.success:
                    healthy = False
                    break

                cursor = await conn.execute("PRAGMA foreign_key_check")
                violations = await cursor.fetchall()
                if violations:
                    logger.error(
                        "foreign_key_violations_after_migration",
                        version=migration.version,
                        violations=len(violations),
                    )
                    healthy = False
                    break
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        _restore(backup_path, db_path)
        raise

    if not healthy:
        _restore(backup_path, db_path)
    elif backup_path is not None:
        backup_path.unlink()
    return results


# Name used by the application lifespan
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending versions for a database file."""
    db_path = db_path or get_settings().storage.db_path
    known = [m.version for m in discover_migrations()]

    if not db_path.exists():
        return {"exists": False, "applied_migrations": [], "pending_migrations": known}

    async with _connect(db_path) as conn:
        applied = await _applied_checksums(conn)

    return {
        "exists": True,
        "applied_migrations": sorted(applied, key=int),
        "pending_migrations": [v for v in known if v not in applied],
        "total_migrations": len(known),
    }


async def _check_foreign_keys(conn: aiosqlite.Connection) -> dict:
    cursor = await conn.execute("PRAGMA foreign_key_check")
    violations = len(await cursor.fetchall())
    return {"check": "foreign_keys", "status": "PASS" if violations == 0 else "FAIL", "violations": violations}


async def _check_schema_objects(conn: aiosqlite.Connection) -> list[dict]:
    cursor = await conn.execute("SELECT type, name FROM sqlite_master")
    present = {(kind, name) for kind, name in await cursor.fetchall()}

    missing_tables = [t for t in REQUIRED_TABLES if ("table", t) not in present]
    missing_triggers = [t for t in REQUIRED_TRIGGERS if ("trigger", t) not in present]
    return [
        {"check": "required_tables", "status": "FAIL" if missing_tables else "PASS", "missing": missing_tables},
        {"check": "stock_triggers", "status": "FAIL" if missing_triggers else "PASS", "missing": missing_triggers},
    ]


async def _check_ledger(conn: aiosqlite.Connection) -> dict:
    """Products whose stored stock differs from the sum of their movements."""
    cursor = await conn.execute(
        """
        SELECT COUNT(*) FROM products p
        LEFT JOIN (
            SELECT product_id, SUM(quantity) AS total
            FROM stock_movements GROUP BY product_id
        ) ledger ON ledger.product_id = p.id
        WHERE ABS(p.current_stock - COALESCE(ledger.total, 0)) > 1e-9
        """
    )
    drifted = (await cursor.fetchone())[0]
    return {"check": "stock_matches_ledger", "status": "PASS" if drifted == 0 else "FAIL", "drifted_products": drifted}


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Foreign keys, required tables and triggers, and ledger drift."""
    db_path = db_path or get_settings().storage.db_path
    async with _connect(db_path) as conn:
        return [
            await _check_foreign_keys(conn),
            *await _check_schema_objects(conn),
            await _check_ledger(conn),
        ]


def main() -> None:
    """Command line entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Stockroom database migrations")
    parser.add_argument("--db-path", type=Path, help="Database file (default from settings)")
    parser.add_argument("--status", action="store_true", help="Show applied and pending versions")
    parser.add_argument("--verify", action="store_true", help="Run integrity checks")
    parser.add_argument("--no-backup", action="store_true", help="Do not copy the database first")
    args = parser.parse_args()

    async def run() -> None:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Database exists: {status['exists']}")
            print(f"Applied: {', '.join(status['applied_migrations']) or '-'}")
            print(f"Pending: {', '.join(status['pending_migrations']) or '-'}")
            return

        if args.verify:
            for check in await verify_schema_integrity(args.db_path):
                extra = {k: v for k, v in check.items() if k not in ("check", "status")}
                print(f"[{check['status']}] {check['check']} {extra if check['status'] != 'PASS' else ''}")
            return

        results = await initialize_database(args.db_path, create_backup_before=not args.no_backup)
        if not results:
            print("Schema is up to date")
        for result in results:
            outcome = "OK" if result.success else "FAILED"
            print(f"[{outcome}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"    {result.error}")

    asyncio.run(run())


if __name__ == "__main__":
    main()
