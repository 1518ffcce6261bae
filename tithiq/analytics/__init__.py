"""Analytics package: record aggregation and insight generation."""

from tithiq.analytics.aggregation import (
    CSV_HEADER,
    AggregationEngine,
    shift_month,
)
from tithiq.analytics.insights import InsightEngine

__all__ = ["CSV_HEADER", "AggregationEngine", "InsightEngine", "shift_month"]
