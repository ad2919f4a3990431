"""Output formatters for evaluation summaries."""

import json

from healthrisk.models.reporting import EvaluationSummary


def format_summary_text(s: EvaluationSummary) -> str:
    """Plain text summary for logging and the CLI."""
    lines = [
        f"=== Evaluation Complete | Run {s.run_id[:8]} ===",
        f"Regions: {s.regions_total} total, {s.regions_scored} scored, "
        f"{s.regions_failed} failed",
    ]
    if s.highest_composite_region:
        lines.append(
            f"Highest risk: {s.highest_composite_region} "
            f"(composite {s.highest_composite:.1f})"
        )
    for rr in s.region_risks:
        r = rr.result
        lines.append(
            f"  {rr.region_name}: HSI {r.hsi:.1f} | CSI {r.csi:.1f} | "
            f"AQRI {r.aqri:.1f} | risk {r.composite:.1f} | "
            f"confidence {r.confidence:.0%}"
        )
    if s.alerts:
        lines.append(f"Alerts: {len(s.alerts)}")
        for a in s.alerts:
            lines.append(f"  [{a.severity}] {a.kind}: {', '.join(a.region_names)}")
    else:
        lines.append("Alerts: none")
    if s.errors:
        lines.append(f"Errors: {len(s.errors)}")
    lines.append(f"Duration: {s.duration_seconds:.1f}s")
    return "\n".join(lines)


def format_summary_json(s: EvaluationSummary) -> str:
    """JSON summary for programmatic consumption."""
    data = {
        "run_id": s.run_id,
        "regions_total": s.regions_total,
        "regions_scored": s.regions_scored,
        "regions_failed": s.regions_failed,
        "highest_composite": round(s.highest_composite, 2),
        "highest_composite_region": s.highest_composite_region,
        "alerts": [
            {
                "id": a.id,
                "kind": a.kind.value,
                "severity": a.severity.value,
                "regions": a.region_names,
            }
            for a in s.alerts
        ],
        "duration_seconds": s.duration_seconds,
        "errors": s.errors,
    }
    return json.dumps(data, indent=2)
