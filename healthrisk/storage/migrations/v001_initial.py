"""Initial schema: config snapshots, evaluation runs, region scores, alerts."""

import sqlite3

DDL = [
    # Config snapshots
    """
    CREATE TABLE IF NOT EXISTS config_snapshots (
        config_hash TEXT PRIMARY KEY,
        config_json TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Evaluation run log
    """
    CREATE TABLE IF NOT EXISTS runs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT UNIQUE NOT NULL,
        triggered_by TEXT NOT NULL,
        config_hash TEXT,
        started_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        completed_at TEXT,
        status TEXT NOT NULL DEFAULT 'running',
        regions_total INTEGER NOT NULL DEFAULT 0,
        regions_scored INTEGER NOT NULL DEFAULT 0,
        regions_failed INTEGER NOT NULL DEFAULT 0,
        alerts_emitted INTEGER NOT NULL DEFAULT 0,
        highest_composite REAL,
        summary_json TEXT,
        error_message TEXT
    )
    """,

    # Per-region scores for a run
    """
    CREATE TABLE IF NOT EXISTS region_scores (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT NOT NULL REFERENCES runs(run_id),
        region_name TEXT NOT NULL,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        day_index INTEGER NOT NULL,
        hsi REAL NOT NULL,
        csi REAL NOT NULL,
        aqri REAL NOT NULL,
        composite REAL NOT NULL,
        confidence REAL NOT NULL,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_region_scores_run ON region_scores(run_id)",

    # Emitted alerts
    """
    CREATE TABLE IF NOT EXISTS alerts (
        id TEXT PRIMARY KEY,
        kind TEXT NOT NULL,
        severity TEXT NOT NULL,
        region_key TEXT NOT NULL,
        region_names_json TEXT NOT NULL,
        message TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    (
        "CREATE INDEX IF NOT EXISTS idx_alerts_dedup "
        "ON alerts(kind, severity, region_key, created_at)"
    ),
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
