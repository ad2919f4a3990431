"""Batch evaluation: score every region, then decide alerts once per index."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from healthrisk.config.schema import EngineConfig, RegionConfig, RiskConfig, RiskThresholds
from healthrisk.models.reporting import EvaluationSummary
from healthrisk.models.risk import (
    AlertCandidate,
    AlertRecord,
    IndexKind,
    RegionRisk,
    Severity,
)
from healthrisk.pipeline.risk_query import RiskQuery
from healthrisk.reporting.run_summarizer import RunSummarizer

logger = logging.getLogger(__name__)

EXTREME_REGION_COUNT = 3


class RegionStore(Protocol):
    def list_regions(self) -> list[RegionConfig]: ...


class AlertSink(Protocol):
    def record_alert(
        self,
        kind: IndexKind,
        severity: Severity,
        region_names: list[str],
        message: str,
    ) -> AlertRecord: ...


def _threshold(thresholds: RiskThresholds, kind: IndexKind) -> float:
    if kind == IndexKind.HEAT:
        return thresholds.hsi
    if kind == IndexKind.COLD:
        return thresholds.csi
    return thresholds.aqri


def decide_alerts(
    region_risks: list[RegionRisk],
    thresholds: RiskThresholds,
    extreme_region_count: int = EXTREME_REGION_COUNT,
) -> list[AlertCandidate]:
    """At most one candidate per index, listing regions at or over threshold.

    Region order follows ``region_risks``. Indices with no affected region
    produce no candidate.
    """
    candidates: list[AlertCandidate] = []
    for kind in IndexKind:
        threshold = _threshold(thresholds, kind)
        affected = [
            rr.region_name
            for rr in region_risks
            if rr.result.index_score(kind) >= threshold
        ]
        if not affected:
            continue
        severity = (
            Severity.EXTREME if len(affected) >= extreme_region_count else Severity.HIGH
        )
        candidates.append(
            AlertCandidate(
                kind=kind, region_names=affected, severity=severity, threshold=threshold
            )
        )
    return candidates


class BatchEvaluator:
    def __init__(
        self,
        config: EngineConfig,
        query: RiskQuery,
        regions: RegionStore,
        sink: AlertSink,
    ):
        self.config = config
        self.query = query
        self.regions = regions
        self.sink = sink

    def evaluate(
        self, run_id: str, risk_config: RiskConfig | None = None
    ) -> EvaluationSummary:
        """Run one evaluation over all regions.

        A region store failure propagates and no alerts are emitted. A
        single region's failure is logged and that region is left out.
        """
        start_time = time.monotonic()
        risk_config = risk_config or self.config.risk
        summarizer = RunSummarizer(run_id)

        regions = self.regions.list_regions()
        summarizer.record_regions(len(regions))
        logger.info("Evaluating %d region(s)", len(regions))

        region_risks = self._score_regions(regions, risk_config, summarizer)

        # Only reached once every region has been scored or has failed.
        candidates = decide_alerts(
            region_risks, risk_config.thresholds, self.config.batch.extreme_region_count
        )
        for candidate in candidates:
            record = self.sink.record_alert(
                candidate.kind,
                candidate.severity,
                candidate.region_names,
                candidate.message,
            )
            summarizer.record_alert(record)
            logger.info(
                "%s %s alert for %s",
                candidate.severity, candidate.kind, ", ".join(candidate.region_names),
            )

        summarizer.record_duration(time.monotonic() - start_time)
        return summarizer.finalize()

    def _score_regions(
        self,
        regions: list[RegionConfig],
        risk_config: RiskConfig,
        summarizer: RunSummarizer,
    ) -> list[RegionRisk]:
        if not regions:
            return []

        day_index = self.config.batch.day_index
        workers = min(self.config.batch.max_workers, len(regions))
        with ThreadPoolExecutor(max_workers=workers) as ex:
            futures = [
                ex.submit(self.query.assess_region, region, day_index, risk_config)
                for region in regions
            ]

        region_risks: list[RegionRisk] = []
        for region, future in zip(regions, futures):
            try:
                rr = future.result()
            except Exception as e:
                logger.exception("Error processing region %s", region.name)
                summarizer.record_region_failure(region.name, str(e))
                continue
            region_risks.append(rr)
            summarizer.record_region_risk(rr)
        return region_risks
