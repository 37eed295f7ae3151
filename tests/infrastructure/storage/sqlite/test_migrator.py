"""Unit tests for database migrator."""

from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from orderdesk.infrastructure.storage.sqlite.migrations import migrator
from orderdesk.infrastructure.storage.sqlite.migrations.migrator import (
    REQUIRED_TABLES,
    MigrationInfo,
    discover_migrations,
    get_migration_status,
    run_migrations,
    verify_schema_integrity,
)


class TestMigrationInfo:
    """Tests for MigrationInfo dataclass."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        migration_file = tmp_path / "v001_initial_schema.sql"
        migration_file.write_text("-- Test migration\nSELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "001"
        assert info.name == "initial_schema"
        assert info.path == migration_file
        assert len(info.checksum) == 16

    def test_from_file_invalid_filename_raises(self, tmp_path: Path):
        invalid_file = tmp_path / "invalid_migration.sql"
        invalid_file.write_text("SELECT 1;")

        with pytest.raises(ValueError, match="Invalid migration filename"):
            MigrationInfo.from_file(invalid_file)


class TestDiscoverMigrations:
    def test_bundled_migrations_in_order(self):
        versions = [m.version for m in discover_migrations()]
        assert versions
        assert versions == sorted(versions)
        assert versions[0] == "001"


class TestRunMigrations:
    @pytest.mark.asyncio
    async def test_creates_schema(self, temp_db_path: Path):
        results = await run_migrations(temp_db_path)

        assert all(r.success for r in results)
        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
            assert set(REQUIRED_TABLES) <= tables

            cursor = await conn.execute("SELECT stale FROM accounting_state WHERE id = 1")
            assert (await cursor.fetchone())[0] == 0

    @pytest.mark.asyncio
    async def test_second_run_is_noop(self, temp_db_path: Path):
        await run_migrations(temp_db_path)
        assert await run_migrations(temp_db_path) == []

    @pytest.mark.asyncio
    async def test_failed_migration_stops(self, temp_db_path: Path, tmp_path: Path):
        migrations_dir = tmp_path / "migrations"
        migrations_dir.mkdir()
        (migrations_dir / "v001_ok.sql").write_text("CREATE TABLE a (id INTEGER);")
        (migrations_dir / "v002_broken.sql").write_text("CREATE TABLE (;")
        (migrations_dir / "v003_never.sql").write_text("CREATE TABLE c (id INTEGER);")

        with patch.object(migrator, "MIGRATIONS_DIR", migrations_dir):
            results = await run_migrations(temp_db_path)

        assert [(r.version, r.success) for r in results] == [("001", True), ("002", False)]
        assert results[1].error


class TestMigrationStatus:
    @pytest.mark.asyncio
    async def test_status_before_and_after(self, temp_db_path: Path):
        status = await get_migration_status(temp_db_path)
        assert status["exists"] is False
        assert "001" in status["pending_migrations"]

        await run_migrations(temp_db_path)
        status = await get_migration_status(temp_db_path)

        assert status["exists"] is True
        assert status["pending_migrations"] == []
        assert status["current_version"] == status["applied_migrations"][-1]


class TestVerifySchemaIntegrity:
    @pytest.mark.asyncio
    async def test_all_checks_pass(self, temp_db_path: Path):
        await run_migrations(temp_db_path)

        checks = await verify_schema_integrity(temp_db_path)

        assert {c["check"]: c["status"] for c in checks} == {
            "foreign_keys": "PASS",
            "integrity": "PASS",
            "required_tables": "PASS",
        }

    @pytest.mark.asyncio
    async def test_missing_tables_reported(self, temp_db_path: Path):
        async with aiosqlite.connect(temp_db_path) as conn:
            await conn.execute("CREATE TABLE unrelated (id INTEGER)")
            await conn.commit()

        checks = await verify_schema_integrity(temp_db_path)

        [tables] = [c for c in checks if c["check"] == "required_tables"]
        assert tables["status"] == "FAIL"
        assert "orders" in tables["missing"]
