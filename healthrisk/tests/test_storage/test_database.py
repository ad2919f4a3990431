"""Tests for connection setup and the migration runner."""

import sqlite3
from pathlib import Path

import pytest

from healthrisk.storage.database import connect, run_migrations


@pytest.fixture
def conn(tmp_path: Path):
    c = connect(tmp_path / "data" / "hr.db")
    yield c
    c.close()


class TestConnect:
    def test_parent_directory_created(self, tmp_path: Path, conn):
        assert (tmp_path / "data" / "hr.db").exists()

    def test_pragmas(self, conn):
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_rows_by_column_name(self, conn):
        row = conn.execute("SELECT 'Harbour' AS region_name").fetchone()
        assert row["region_name"] == "Harbour"


class TestMigrations:
    def test_schema(self, conn):
        assert run_migrations(conn) == ["v001_initial"]

        tables = {
            r["name"]
            for r in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }
        assert {"schema_versions", "config_snapshots", "runs", "region_scores", "alerts"} <= tables

    def test_second_run_applies_nothing(self, conn):
        run_migrations(conn)
        assert run_migrations(conn) == []
        versions = [r["version"] for r in conn.execute("SELECT version FROM schema_versions")]
        assert versions == ["v001_initial"]

    def test_region_scores_reference_runs(self, conn):
        run_migrations(conn)
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO region_scores (run_id, region_name, latitude, longitude, "
                "day_index, hsi, csi, aqri, composite, confidence) "
                "VALUES ('missing', 'X', 0, 0, 0, 0, 0, 0, 0, 0)"
            )
