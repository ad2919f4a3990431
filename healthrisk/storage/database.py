"""SQLite access: connection setup and the numbered migration runner.

Overlapping evaluation runs may write to the same file, so connections use
WAL journaling and wait on locks instead of failing immediately.
"""

import importlib
import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_PACKAGE = "healthrisk.storage.migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"
BUSY_TIMEOUT_SECONDS = 30.0


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open ``db_path`` (creating its directory) with rows addressable by name."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT_SECONDS)
    conn.row_factory = sqlite3.Row
    for pragma in ("journal_mode=WAL", "foreign_keys=ON"):
        conn.execute(f"PRAGMA {pragma}")
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply every ``v###_*.py`` module not yet recorded, oldest first.

    Returns the names applied by this call.
    """
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_versions ("
        "version TEXT PRIMARY KEY, "
        "applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP)"
    )
    conn.commit()
    done = {r["version"] for r in conn.execute("SELECT version FROM schema_versions")}

    pending = [name for name in _migration_names() if name not in done]
    for name in pending:
        importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}").up(conn)
        conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        conn.commit()
        logger.info("Applied migration %s", name)
    return pending


def _migration_names() -> list[str]:
    return sorted(p.stem for p in MIGRATIONS_DIR.glob("v[0-9]*_*.py"))
