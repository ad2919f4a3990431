"""Engine config: YAML loading, snapshots in SQLite, dotted-key get/set."""

import hashlib
import json
import sqlite3
from pathlib import Path
from typing import Any

import yaml

from healthrisk.config.defaults import DEFAULT_REGIONS
from healthrisk.config.schema import EngineConfig

_TRUE_WORDS = ("1", "true", "yes", "on")


def load_config(path: str | Path) -> EngineConfig:
    """Validate the YAML at ``path`` into an EngineConfig.

    A missing or empty file gives the defaults. When the file lists no
    regions the built-in DEFAULT_REGIONS are used.
    """
    raw = _read_yaml(Path(path))
    if not raw.get("regions"):
        raw["regions"] = [r.model_dump() for r in DEFAULT_REGIONS]
    return EngineConfig(**raw)


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def config_hash(config: EngineConfig) -> str:
    """Short SHA256 of the canonical JSON form; equal configs hash equal."""
    canonical = json.dumps(config.model_dump(mode="json"), sort_keys=True)
    return hashlib.sha256(canonical.encode()).hexdigest()[:16]


def snapshot_config(config: EngineConfig, conn: sqlite3.Connection) -> str:
    """Store the config under its hash (once) so runs can reference it."""
    h = config_hash(config)
    conn.execute(
        "INSERT OR IGNORE INTO config_snapshots (config_hash, config_json) VALUES (?, ?)",
        (h, config.model_dump_json()),
    )
    conn.commit()
    return h


def get_config_value(config: EngineConfig, dotted_key: str) -> Any:
    """Look up e.g. ``risk.thresholds.hsi`` or ``regions.0.name``."""
    container, last = _walk(config.model_dump(mode="json"), dotted_key)
    return container[_index(container, last)]


def set_config_value(config: EngineConfig, dotted_key: str, value: Any) -> EngineConfig:
    """Return a revalidated copy of ``config`` with one value replaced.

    String values are coerced to the type of the value they replace, so the
    CLI can pass ``batch.max_workers=8`` or ``batch.serialize_runs=true``.
    """
    data = config.model_dump(mode="json")
    container, last = _walk(data, dotted_key)
    key = _index(container, last)
    if isinstance(value, str):
        value = _coerce(container[key], value)
    container[key] = value
    return EngineConfig(**data)


def _walk(data: Any, dotted_key: str) -> tuple[Any, str]:
    """Follow all but the last path segment; return (container, last segment)."""
    *parents, last = dotted_key.split(".")
    node = data
    for part in parents:
        node = node[_index(node, part)]
    if not isinstance(node, (dict, list)):
        raise KeyError(f"Config key not found: {dotted_key}")
    return node, last


def _index(node: Any, part: str) -> Any:
    if isinstance(node, list):
        return int(part)
    if not isinstance(node, dict) or part not in node:
        raise KeyError(f"Config key not found: {part}")
    return part


def _coerce(old: Any, raw: str) -> Any:
    # bool before int: bool is an int subclass
    if isinstance(old, bool):
        return raw.lower() in _TRUE_WORDS
    if isinstance(old, int):
        return int(raw)
    if isinstance(old, float):
        return float(raw)
    return raw


def save_config(config: EngineConfig, path: str | Path) -> None:
    """Write ``config`` back to YAML in the layout ``load_config`` reads."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, sort_keys=False)
