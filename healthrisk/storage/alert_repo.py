"""SQLite-backed alert sink with time-window deduplication."""

import json
import logging
import sqlite3
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta

from healthrisk.models.common import utc_now
from healthrisk.models.risk import AlertRecord, IndexKind, Severity

logger = logging.getLogger(__name__)


def _region_key(region_names: list[str]) -> str:
    return "|".join(sorted(set(region_names)))


def _row_to_record(row: sqlite3.Row) -> AlertRecord:
    return AlertRecord(
        id=row["id"],
        kind=IndexKind(row["kind"]),
        severity=Severity(row["severity"]),
        region_names=json.loads(row["region_names_json"]),
        message=row["message"],
        created_at=row["created_at"],
    )


class SqliteAlertSink:
    """Persists alerts, returning the existing record for a repeat alert.

    An alert repeats when the same kind, severity and region set was recorded
    within ``dedup_window_hours``.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        dedup_window_hours: float = 24.0,
        now_fn: Callable[[], datetime] = utc_now,
    ):
        self.conn = conn
        self.dedup_window = timedelta(hours=dedup_window_hours)
        self._now = now_fn

    def record_alert(
        self,
        kind: IndexKind,
        severity: Severity,
        region_names: list[str],
        message: str,
    ) -> AlertRecord:
        now = self._now()
        key = _region_key(region_names)
        cutoff = (now - self.dedup_window).isoformat()

        row = self.conn.execute(
            "SELECT * FROM alerts WHERE kind = ? AND severity = ? AND region_key = ? "
            "AND created_at >= ? ORDER BY created_at DESC LIMIT 1",
            (kind.value, severity.value, key, cutoff),
        ).fetchone()
        if row is not None:
            logger.info("Duplicate %s alert suppressed (existing %s)", kind, row["id"])
            return _row_to_record(row)

        record = AlertRecord(
            id=str(uuid.uuid4()),
            kind=kind,
            severity=severity,
            region_names=list(region_names),
            message=message,
            created_at=now.isoformat(),
        )
        self.conn.execute(
            "INSERT INTO alerts "
            "(id, kind, severity, region_key, region_names_json, message, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                record.id,
                kind.value,
                severity.value,
                key,
                json.dumps(record.region_names),
                message,
                record.created_at,
            ),
        )
        self.conn.commit()
        return record


def list_alerts(conn: sqlite3.Connection, limit: int = 20) -> list[AlertRecord]:
    """Most recent alerts first."""
    rows = conn.execute(
        "SELECT * FROM alerts ORDER BY created_at DESC LIMIT ?", (limit,)
    ).fetchall()
    return [_row_to_record(r) for r in rows]


def remove_alert(conn: sqlite3.Connection, alert_id: str) -> bool:
    cursor = conn.execute("DELETE FROM alerts WHERE id = ?", (alert_id,))
    conn.commit()
    return cursor.rowcount > 0
