"""Tests for the database migrator."""

import shutil
from pathlib import Path

import aiosqlite
import pytest

from stockroom.infrastructure.storage.sqlite.migrations import initialize_database, migrator
from stockroom.infrastructure.storage.sqlite.migrations.migrator import (
    MIGRATIONS_DIR,
    REQUIRED_TABLES,
    REQUIRED_TRIGGERS,
    discover_migrations,
    get_migration_status,
    verify_schema_integrity,
)


class TestDiscovery:
    def test_migrations_ordered(self):
        versions = [m.version for m in discover_migrations()]
        assert versions == sorted(versions)
        assert versions[:2] == ["001", "002"]

    def test_checksums_stable(self):
        first = {m.version: m.checksum for m in discover_migrations()}
        second = {m.version: m.checksum for m in discover_migrations()}
        assert first == second


class TestInitializeDatabase:
    async def test_fresh_database(self, temp_db_path: Path):
        results = await initialize_database(temp_db_path, create_backup_before=False)
        assert results
        assert all(r.success for r in results)

        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT type, name FROM sqlite_master")
            names = {name for _, name in await cursor.fetchall()}
        assert set(REQUIRED_TABLES) <= names
        assert set(REQUIRED_TRIGGERS) <= names

    async def test_second_run_is_noop(self, initialized_db: Path):
        results = await initialize_database(initialized_db, create_backup_before=False)
        assert results == []

    async def test_backup_removed_after_success(self, initialized_db: Path):
        await initialize_database(initialized_db, create_backup_before=True)
        assert list(initialized_db.parent.glob("*.backup_*.db")) == []


class TestStatusAndIntegrity:
    async def test_status_missing_database(self, tmp_path: Path):
        status = await get_migration_status(tmp_path / "absent.db")
        assert status["exists"] is False
        assert "001" in status["pending_migrations"]

    async def test_status_after_migration(self, initialized_db: Path):
        status = await get_migration_status(initialized_db)
        assert status["exists"] is True
        assert status["pending_migrations"] == []
        assert "002" in status["applied_migrations"]

    async def test_integrity_passes(self, initialized_db: Path):
        checks = await verify_schema_integrity(initialized_db)
        assert {c["check"]: c["status"] for c in checks} == {
            "foreign_keys": "PASS",
            "required_tables": "PASS",
            "stock_triggers": "PASS",
            "stock_matches_ledger": "PASS",
        }

    async def test_integrity_detects_drift(self, initialized_db: Path):
        async with aiosqlite.connect(initialized_db) as conn:
            await conn.execute("INSERT INTO products (name, current_stock) VALUES ('Dryf', 5)")
            await conn.commit()
        checks = {c["check"]: c for c in await verify_schema_integrity(initialized_db)}
        assert checks["stock_matches_ledger"]["status"] == "FAIL"
        assert checks["stock_matches_ledger"]["drifted_products"] == 1


@pytest.fixture
def broken_migrations(initialized_db: Path, tmp_path: Path, monkeypatch) -> Path:
    """Applied real migrations, then a pending v003 that fails halfway through."""
    directory = tmp_path / "migrations"
    directory.mkdir()
    for path in MIGRATIONS_DIR.glob("v*.sql"):
        shutil.copy(path, directory / path.name)
    (directory / "v003_broken.sql").write_text(
        "CREATE TABLE half_done (id INTEGER PRIMARY KEY);\n"
        "DELETE FROM products;\n"
        "INSERT INTO no_such_table VALUES (1);\n",
        encoding="utf-8",
    )
    monkeypatch.setattr(migrator, "MIGRATIONS_DIR", directory)
    return directory


async def table_names(db_path: Path) -> set[str]:
    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        return {name for (name,) in await cursor.fetchall()}


class TestFailedMigration:
    async def test_failed_script_is_rolled_back(self, initialized_db: Path, broken_migrations):
        async with aiosqlite.connect(initialized_db) as conn:
            await conn.execute("INSERT INTO products (name) VALUES ('Cement')")
            await conn.commit()

        results = await initialize_database(initialized_db, create_backup_before=False)

        assert [(r.version, r.success) for r in results] == [("003", False)]
        assert "no_such_table" in results[0].error
        assert "half_done" not in await table_names(initialized_db)
        status = await get_migration_status(initialized_db)
        assert "003" in status["pending_migrations"]
        async with aiosqlite.connect(initialized_db) as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM products")
            assert (await cursor.fetchone())[0] == 1

    async def test_backup_restored_and_kept(self, initialized_db: Path, broken_migrations):
        results = await initialize_database(initialized_db, create_backup_before=True)

        assert not results[-1].success
        backups = list(initialized_db.parent.glob("*.backup_*.db"))
        assert len(backups) == 1
        assert initialized_db.read_bytes() == backups[0].read_bytes()
