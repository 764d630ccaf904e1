import logging
from typing import Any, Dict, List, Optional

from rightshield.core.config import Settings
from rightshield.models.schemas import Benchmark, BenchmarkView
from rightshield.utils.store_client import select_rows, store_enabled

logger = logging.getLogger(__name__)

METRIC_DESCRIPTIONS: Dict[str, str] = {
    "termination_notice_days": "How much advance notice is typically required to terminate",
    "security_deposit_months": "How many months of payment are held as security deposit",
    "notice_period_days": "Standard notice period for employment termination",
    "non_compete_months": "Duration of typical non-compete restrictions",
    "cancellation_fee_percent": "Percentage fee charged for early cancellation",
}

DEFAULT_DESCRIPTION = "Community average for this metric"

def _num(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)

def format_metric_value(value: Optional[float], metric_name: str) -> Optional[str]:
    if value is None:
        return None
    if "days" in metric_name:
        return f"{_num(value)} days"
    if "months" in metric_name:
        return f"{_num(value)} months"
    if "percent" in metric_name:
        return f"{_num(value)}%"
    if "fee" in metric_name or "deposit" in metric_name:
        return f"${_num(value)}"
    return _num(value)

def metric_description(metric_name: str) -> str:
    return METRIC_DESCRIPTIONS.get(metric_name, DEFAULT_DESCRIPTION)

def percentile_label(value: float, benchmark: Benchmark) -> Optional[str]:
    """
    Places `value` within the benchmark's quartiles. Returns None when the
    row is missing any of the quartile cut points.
    """
    cuts = (benchmark.percentile_25, benchmark.percentile_50, benchmark.percentile_75)
    if any(c is None for c in cuts):
        return None
    p25, p50, p75 = cuts
    if value <= p25:
        return "Bottom 25%"
    if value <= p50:
        return "Below Average"
    if value <= p75:
        return "Above Average"
    return "Top 25%"

def to_view(benchmark: Benchmark) -> BenchmarkView:
    name = benchmark.metric_name
    return BenchmarkView(
        metric_name=name,
        category=benchmark.category,
        description=metric_description(name),
        average=format_metric_value(benchmark.metric_value, name),
        percentiles={
            "25": format_metric_value(benchmark.percentile_25, name),
            "50": format_metric_value(benchmark.percentile_50, name),
            "75": format_metric_value(benchmark.percentile_75, name),
            "90": format_metric_value(benchmark.percentile_90, name),
        },
        sample_size=benchmark.sample_size or 0,
    )

async def fetch_benchmarks(config: Settings, document_type: Optional[str] = None) -> List[Benchmark]:
    if not store_enabled(config):
        logger.info("[BENCH] store not configured; no benchmarks available")
        return []
    match = {"category": document_type} if document_type else None
    rows = await select_rows(config, "community_benchmarks", match=match, order="metric_name")
    return [Benchmark.model_validate(r) for r in rows]

def summarize_benchmarks(
    benchmarks: List[Benchmark],
    value: Optional[float] = None,
    metric: Optional[str] = None,
) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "success": True,
        "benchmarks": [to_view(b).model_dump() for b in benchmarks],
        "totalSamples": sum(b.sample_size or 0 for b in benchmarks),
        "percentileLabel": None,
    }
    if value is not None and metric:
        row = next((b for b in benchmarks if b.metric_name == metric), None)
        if row is not None:
            out["percentileLabel"] = percentile_label(value, row)
    return out
