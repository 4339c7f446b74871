"""Tests for the schema migrator."""

from pathlib import Path

import aiosqlite
import pytest

from rentrack.infrastructure.storage.sqlite.migrations import (
    MigrationInfo,
    discover_migrations,
    get_migration_status,
    initialize_database,
    verify_schema_integrity,
)


class TestDiscovery:
    """Tests for migration discovery."""

    def test_discovers_initial_migration(self):
        migrations = discover_migrations()
        assert migrations
        assert migrations[0].version == "001"
        assert migrations[0].name == "initial"
        assert len(migrations[0].checksum) == 16

    def test_invalid_filename(self, tmp_path: Path):
        path = tmp_path / "initial.sql"
        path.write_text("SELECT 1;")
        with pytest.raises(ValueError):
            MigrationInfo.from_file(path)

    def test_skips_invalid_files(self, tmp_path: Path):
        (tmp_path / "v002_add_index.sql").write_text("SELECT 1;")
        (tmp_path / "vX_broken.sql").write_text("SELECT 1;")
        assert [m.version for m in discover_migrations(tmp_path)] == ["002"]


class TestInitializeDatabase:
    """Tests for applying migrations."""

    async def test_fresh_database(self, tmp_path: Path):
        db_path = tmp_path / "fresh.db"

        results = await initialize_database(db_path)

        assert [r.version for r in results] == ["001"]
        assert all(r.success for r in results)
        assert db_path.exists()

    async def test_second_run_is_noop(self, tmp_path: Path):
        db_path = tmp_path / "again.db"
        await initialize_database(db_path)

        results = await initialize_database(db_path)

        assert results == []
        assert list(tmp_path.glob("*.backup_*")) == []

    async def test_changed_checksum_not_reapplied(self, tmp_path: Path):
        db_path = tmp_path / "drift.db"
        await initialize_database(db_path, create_backup_before=False)
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("UPDATE schema_migrations SET checksum = 'tampered'")
            await conn.commit()

        results = await initialize_database(db_path, create_backup_before=False)

        assert results == []

    async def test_status(self, tmp_path: Path):
        db_path = tmp_path / "status.db"

        before = await get_migration_status(db_path)
        assert before["exists"] is False
        assert before["pending_migrations"] == ["001"]

        await initialize_database(db_path)
        after = await get_migration_status(db_path)
        assert after["exists"] is True
        assert after["current_version"] == "001"
        assert after["pending_migrations"] == []

    async def test_verify_schema(self, tmp_path: Path):
        db_path = tmp_path / "verify.db"
        await initialize_database(db_path)

        checks = {c["check"]: c for c in await verify_schema_integrity(db_path)}

        assert set(checks) == {"integrity", "foreign_keys", "required_tables", "ledger_immutability"}
        assert all(c["status"] == "PASS" for c in checks.values())

    async def test_verify_detects_missing_trigger(self, tmp_path: Path):
        db_path = tmp_path / "tampered.db"
        await initialize_database(db_path)
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("DROP TRIGGER movement_events_no_delete")
            await conn.commit()

        checks = {c["check"]: c for c in await verify_schema_integrity(db_path)}

        assert checks["ledger_immutability"]["status"] == "FAIL"
        assert checks["ledger_immutability"]["missing"] == ["movement_events_no_delete"]
