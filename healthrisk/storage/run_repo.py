"""Repository for evaluation runs and their per-region scores."""

import sqlite3

from healthrisk.models.risk import RegionRisk


def create_run(
    conn: sqlite3.Connection, run_id: str, trigger: str, config_hash: str | None = None
) -> None:
    """Record the start of an evaluation run."""
    conn.execute(
        "INSERT INTO runs (run_id, triggered_by, config_hash) VALUES (?, ?, ?)",
        (run_id, trigger, config_hash),
    )
    conn.commit()


def complete_run(
    conn: sqlite3.Connection,
    run_id: str,
    status: str,
    summary_json: str | None = None,
    error_message: str | None = None,
    **metrics: int | float | None,
) -> None:
    """Record run completion with metrics."""
    sets = ["completed_at = CURRENT_TIMESTAMP", "status = ?"]
    params: list = [status]

    if summary_json is not None:
        sets.append("summary_json = ?")
        params.append(summary_json)
    if error_message is not None:
        sets.append("error_message = ?")
        params.append(error_message)
    for key, val in metrics.items():
        if val is not None:
            sets.append(f"{key} = ?")
            params.append(val)

    params.append(run_id)
    conn.execute(f"UPDATE runs SET {', '.join(sets)} WHERE run_id = ?", params)
    conn.commit()


def get_latest_run(conn: sqlite3.Connection) -> dict | None:
    """Get the most recent run."""
    row = conn.execute(
        "SELECT * FROM runs ORDER BY started_at DESC, id DESC LIMIT 1"
    ).fetchone()
    if row is None:
        return None
    return dict(row)


def get_run(conn: sqlite3.Connection, run_id: str) -> dict | None:
    row = conn.execute(
        "SELECT * FROM runs WHERE run_id = ?", (run_id,)
    ).fetchone()
    if row is None:
        return None
    return dict(row)


def save_region_score(conn: sqlite3.Connection, run_id: str, rr: RegionRisk) -> int:
    """Persist one region's scores for a run. Returns the row id."""
    cursor = conn.execute(
        "INSERT INTO region_scores "
        "(run_id, region_name, latitude, longitude, day_index, "
        "hsi, csi, aqri, composite, confidence) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (
            run_id,
            rr.region_name,
            rr.latitude,
            rr.longitude,
            rr.day_index,
            rr.result.hsi,
            rr.result.csi,
            rr.result.aqri,
            rr.result.composite,
            rr.result.confidence,
        ),
    )
    conn.commit()
    assert cursor.lastrowid is not None
    return cursor.lastrowid


def get_region_scores_for_run(conn: sqlite3.Connection, run_id: str) -> list[dict]:
    """Get all region scores for a run, highest composite first."""
    rows = conn.execute(
        "SELECT * FROM region_scores WHERE run_id = ? ORDER BY composite DESC",
        (run_id,),
    ).fetchall()
    return [dict(r) for r in rows]
