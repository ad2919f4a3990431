"""Tests for summary formatting and the run summarizer."""

import json

from healthrisk.models.risk import AlertRecord, IndexKind, RegionRisk, RiskResult, Severity
from healthrisk.reporting.formatters import format_summary_json, format_summary_text
from healthrisk.reporting.run_summarizer import RunSummarizer


def _rr(name: str, composite: float) -> RegionRisk:
    return RegionRisk(
        region_name=name,
        latitude=43.7,
        longitude=-79.4,
        day_index=0,
        result=RiskResult(hsi=72.0, csi=5.0, aqri=12.5, composite=composite, confidence=0.889),
    )


def _alert() -> AlertRecord:
    return AlertRecord(
        id="a1",
        kind=IndexKind.HEAT,
        severity=Severity.HIGH,
        region_names=["Harbour", "Lakeside"],
        message="High heat stress detected in 2 region(s). Heat Stress Index above 70.",
        created_at="2026-10-16T12:00:00+00:00",
    )


def _summary():
    s = RunSummarizer("0123456789abcdef")
    s.record_regions(3)
    s.record_region_risk(_rr("Harbour", 33.0))
    s.record_region_risk(_rr("Lakeside", 41.5))
    s.record_region_failure("Hills", "weather down")
    s.record_alert(_alert())
    s.record_duration(2.34)
    return s.finalize()


class TestRunSummarizer:
    def test_counts_and_highest(self):
        summary = _summary()
        assert summary.regions_total == 3
        assert summary.regions_scored == 2
        assert summary.regions_failed == 1
        assert summary.highest_composite == 41.5
        assert summary.highest_composite_region == "Lakeside"
        assert summary.errors == ["Hills: weather down"]

    def test_run_level_error(self):
        s = RunSummarizer("r")
        s.record_error("regions.geojson unreadable")
        summary = s.finalize()
        assert summary.errors == ["regions.geojson unreadable"]
        assert summary.regions_failed == 0

    def test_all_zero_scores_still_name_a_region(self):
        s = RunSummarizer("r")
        s.record_region_risk(_rr("Calm", 0.0))
        assert s.finalize().highest_composite_region == "Calm"


class TestFormatters:
    def test_text(self):
        text = format_summary_text(_summary())
        assert "=== Evaluation Complete | Run 01234567 ===" in text
        assert "Regions: 3 total, 2 scored, 1 failed" in text
        assert "Highest risk: Lakeside (composite 41.5)" in text
        assert "Harbour: HSI 72.0 | CSI 5.0 | AQRI 12.5 | risk 33.0 | confidence 89%" in text
        assert "[high] heat: Harbour, Lakeside" in text
        assert "Duration: 2.3s" in text

    def test_text_without_alerts(self):
        s = RunSummarizer("r")
        s.record_regions(0)
        assert "Alerts: none" in format_summary_text(s.finalize())

    def test_json(self):
        data = json.loads(format_summary_json(_summary()))
        assert data["regions_failed"] == 1
        assert data["highest_composite"] == 41.5
        assert data["alerts"] == [
            {"id": "a1", "kind": "heat", "severity": "high", "regions": ["Harbour", "Lakeside"]}
        ]

    def test_scores_rounded_for_display(self):
        s = RunSummarizer("r")
        s.record_region_risk(_rr("Harbour", 69.99712))
        summary = s.finalize()

        assert "(composite 70.0)" in format_summary_text(summary)
        assert json.loads(format_summary_json(summary))["highest_composite"] == 70.0
