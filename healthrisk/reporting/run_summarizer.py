"""Run summarizer: aggregates evaluation outputs into an EvaluationSummary."""

from healthrisk.models.reporting import EvaluationSummary
from healthrisk.models.risk import AlertRecord, RegionRisk


class RunSummarizer:
    def __init__(self, run_id: str):
        self.summary = EvaluationSummary(run_id=run_id)

    def record_regions(self, regions_total: int) -> None:
        self.summary.regions_total = regions_total

    def record_region_risk(self, rr: RegionRisk) -> None:
        self.summary.regions_scored += 1
        self.summary.region_risks.append(rr)
        s = self.summary
        if rr.result.composite > s.highest_composite or not s.highest_composite_region:
            s.highest_composite = rr.result.composite
            s.highest_composite_region = rr.region_name

    def record_region_failure(self, region_name: str, error: str) -> None:
        self.summary.regions_failed += 1
        self.summary.errors.append(f"{region_name}: {error}")

    def record_alert(self, alert: AlertRecord) -> None:
        self.summary.alerts.append(alert)

    def record_duration(self, seconds: float) -> None:
        self.summary.duration_seconds = seconds

    def record_error(self, error: str) -> None:
        self.summary.errors.append(error)

    def finalize(self) -> EvaluationSummary:
        return self.summary
