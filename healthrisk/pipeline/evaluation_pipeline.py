"""Evaluation pipeline: one persisted batch evaluation per trigger.

``EvaluationPipeline.run()`` takes no arguments so an external timer or a
manual trigger can invoke it directly.
"""

import json
import logging
import threading
import uuid

from healthrisk.config.loader import snapshot_config
from healthrisk.config.schema import EngineConfig
from healthrisk.ingest.region_store import ConfigRegionStore
from healthrisk.models.reporting import EvaluationSummary
from healthrisk.pipeline.batch_evaluator import BatchEvaluator, RegionStore
from healthrisk.pipeline.risk_query import RiskQuery, build_risk_query
from healthrisk.reporting.formatters import format_summary_text
from healthrisk.reporting.run_summarizer import RunSummarizer
from healthrisk.storage import run_repo
from healthrisk.storage.alert_repo import SqliteAlertSink
from healthrisk.storage.database import connect, run_migrations

logger = logging.getLogger(__name__)

_RUN_LOCK = threading.Lock()


class EvaluationPipeline:
    def __init__(
        self,
        config: EngineConfig,
        db_path: str = "data/healthrisk.db",
        trigger: str = "scheduled",
        query: RiskQuery | None = None,
        regions: RegionStore | None = None,
    ):
        self.config = config
        self.db_path = db_path
        self.trigger = trigger
        self.regions = regions if regions is not None else ConfigRegionStore(config)
        self.query = query if query is not None else build_risk_query(config, self.regions)

    def run(self) -> EvaluationSummary:
        """Execute one evaluation run now."""
        if self.config.batch.serialize_runs:
            with _RUN_LOCK:
                return self._run()
        return self._run()

    def _run(self) -> EvaluationSummary:
        run_id = str(uuid.uuid4())
        conn = connect(self.db_path)
        try:
            run_migrations(conn)
            c_hash = snapshot_config(self.config, conn)
            run_repo.create_run(conn, run_id, self.trigger, c_hash)
            logger.info("Evaluation run %s started (%s)", run_id[:8], self.trigger)

            sink = SqliteAlertSink(conn, self.config.alerts.dedup_window_hours)
            evaluator = BatchEvaluator(self.config, self.query, self.regions, sink)

            try:
                summary = evaluator.evaluate(run_id)
            except Exception as e:
                logger.exception("Evaluation run %s failed", run_id[:8])
                failed = RunSummarizer(run_id)
                failed.record_error(str(e))
                run_repo.complete_run(conn, run_id, "failed", error_message=str(e))
                return failed.finalize()

            for rr in summary.region_risks:
                run_repo.save_region_score(conn, run_id, rr)

            run_repo.complete_run(
                conn,
                run_id,
                "completed",
                summary_json=json.dumps({
                    "alerts": [a.id for a in summary.alerts],
                    "errors": summary.errors,
                }),
                regions_total=summary.regions_total,
                regions_scored=summary.regions_scored,
                regions_failed=summary.regions_failed,
                alerts_emitted=len(summary.alerts),
                highest_composite=summary.highest_composite,
            )
            logger.info("\n%s", format_summary_text(summary))
            return summary
        finally:
            conn.close()
