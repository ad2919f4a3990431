"""Command line interface: evaluate, ad-hoc risk queries, alerts, config, health."""

import argparse
import logging
from collections.abc import Callable

from healthrisk.config.loader import (
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from healthrisk.config.schema import EngineConfig, VulnerabilityInputs
from healthrisk.ingest.demographics_client import DemographicsClient
from healthrisk.ingest.region_store import ConfigRegionStore, GeoJsonRegionStore
from healthrisk.ingest.weather_fetcher import WeatherSourceError
from healthrisk.pipeline.evaluation_pipeline import EvaluationPipeline
from healthrisk.pipeline.risk_query import RegionNotFoundError, build_risk_query
from healthrisk.reporting.formatters import format_summary_json, format_summary_text
from healthrisk.reporting.health_checker import HealthChecker
from healthrisk.risk.engine import InvalidSnapshotError
from healthrisk.storage import alert_repo
from healthrisk.storage.database import connect, run_migrations

DEFAULT_CONFIG = "ops/configs/default.yaml"
DEFAULT_DB = "data/healthrisk.db"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="healthrisk",
        description="Climate health risk scoring and alerting engine",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Engine config YAML")
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite database file")
    parser.add_argument(
        "--regions-file", help="GeoJSON FeatureCollection to use instead of config regions"
    )
    sub = parser.add_subparsers(dest="command")

    evaluate = sub.add_parser("evaluate", help="Score every region and emit alerts now")
    evaluate.add_argument("--json", action="store_true", help="Print the summary as JSON")

    risk = sub.add_parser("risk", help="Score one region or coordinate")
    risk.add_argument("--region", help="Region name (case-insensitive)")
    risk.add_argument("--lat", type=float)
    risk.add_argument("--lon", type=float)
    risk.add_argument("--day", type=int, default=0, help="Forecast day, 0 = today")
    risk.add_argument(
        "--country", help="ISO country code; looks up the elderly share for a coordinate"
    )

    alerts = sub.add_parser("alerts", help="Show recent alerts")
    alerts.add_argument("--limit", type=int, default=20)

    config = sub.add_parser("config", help="Inspect or change the engine config")
    config_sub = config.add_subparsers(dest="config_command")
    show = config_sub.add_parser("show", help="Print the config, or one dotted key")
    show.add_argument("key", nargs="?")
    set_p = config_sub.add_parser("set", help="Change a dotted key and save the YAML")
    set_p.add_argument("assignment", metavar="KEY=VALUE")

    sub.add_parser("health", help="Check the database and upstream sources")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    handler = _COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    return handler(load_config(args.config), args)


def _region_store(config: EngineConfig, args):
    if args.regions_file:
        return GeoJsonRegionStore(args.regions_file)
    return ConfigRegionStore(config)


def _cmd_evaluate(config: EngineConfig, args) -> int:
    summary = EvaluationPipeline(
        config, args.db, trigger="manual", regions=_region_store(config, args)
    ).run()
    print(format_summary_json(summary) if args.json else format_summary_text(summary))
    return 1 if summary.regions_failed or summary.errors else 0


def _cmd_risk(config: EngineConfig, args) -> int:
    if not args.region and (args.lat is None or args.lon is None):
        print("Error: give --region or both --lat and --lon")
        return 1

    query = build_risk_query(config, _region_store(config, args))
    try:
        if args.region:
            rr = query.assess_region(query.find_region(args.region), args.day)
        else:
            rr = query.assess_point(
                args.lat, args.lon, args.day, vulnerability=_country_vulnerability(config, args)
            )
    except RegionNotFoundError as e:
        print(f"Error: unknown region {e}")
        return 1
    except (WeatherSourceError, InvalidSnapshotError) as e:
        print(f"Error: risk could not be computed: {e}")
        return 1

    r = rr.result
    print(f"{rr.region_name or f'{rr.latitude:.4f}, {rr.longitude:.4f}'} (day {rr.day_index})")
    print(f"  Heat Stress Index:      {r.hsi:5.1f}")
    print(f"  Cold Stress Index:      {r.csi:5.1f}")
    print(f"  Air Quality Risk Index: {r.aqri:5.1f}")
    print(f"  Composite risk:         {r.composite:5.1f}")
    print(f"  Confidence:             {r.confidence:.0%}")
    return 0


def _country_vulnerability(config: EngineConfig, args) -> VulnerabilityInputs | None:
    if not args.country:
        return None
    src = config.sources
    senior = DemographicsClient(
        src.demographics_url, src.user_agent, src.timeout_seconds
    ).elderly_percent(args.country)
    return VulnerabilityInputs(senior_percent=senior) if senior is not None else None


def _cmd_alerts(config: EngineConfig, args) -> int:
    conn = connect(args.db)
    try:
        run_migrations(conn)
        records = alert_repo.list_alerts(conn, args.limit)
    finally:
        conn.close()

    if not records:
        print("No alerts")
    for a in records:
        print(f"{a.created_at} [{a.severity}] {a.kind}: {a.message}")
        print(f"  Regions: {', '.join(a.region_names)}")
    return 0


def _cmd_config(config: EngineConfig, args) -> int:
    if args.config_command == "show":
        if args.key:
            try:
                print(get_config_value(config, args.key))
            except (KeyError, ValueError, IndexError) as e:
                print(f"Error: {e}")
                return 1
        else:
            print(config.model_dump_json(indent=2))
        return 0

    if args.config_command == "set":
        key, sep, value = args.assignment.partition("=")
        if not sep:
            print("Error: expected KEY=VALUE")
            return 1
        key = key.strip()
        try:
            updated = set_config_value(config, key, value.strip())
        except (KeyError, ValueError, IndexError) as e:
            print(f"Error: {e}")
            return 1
        save_config(updated, args.config)
        print(f"{key} = {get_config_value(updated, key)}")
        return 0

    print("Use: config show [KEY] | config set KEY=VALUE")
    return 1


def _cmd_health(config: EngineConfig, args) -> int:
    conn = connect(args.db)
    try:
        run_migrations(conn)
        status = HealthChecker(conn, config.sources).check()
    finally:
        conn.close()

    def ok(flag: bool) -> str:
        return "OK" if flag else "FAIL"

    print(f"Database:   {ok(status.db_connected)}")
    print(f"Open-Meteo: {ok(status.primary_weather_reachable)}")
    print(f"NASA POWER: {ok(status.secondary_weather_reachable)}")
    print(f"OpenAQ:     {ok(status.air_quality_reachable)}")
    if status.last_run_age_minutes is None:
        print("Last run:   never")
    else:
        print(
            f"Last run:   {status.last_run_age_minutes:.0f} min ago ({status.last_run_status})"
        )
    return 0 if status.db_connected else 1


_COMMANDS: dict[str, Callable[[EngineConfig, argparse.Namespace], int]] = {
    "evaluate": _cmd_evaluate,
    "risk": _cmd_risk,
    "alerts": _cmd_alerts,
    "config": _cmd_config,
    "health": _cmd_health,
}
