"""
Aggregation Engine

DESIGN DECISION: Summaries are always recomputed from the raw record
list. Nothing is maintained incrementally, so there is no incremental
state to drift out of sync. The record store is capped (20 by default),
which keeps the O(n) recomputation per query negligible.

GUARANTEES:
- Every query reads one immutable snapshot of the record store
- Empty input yields zero totals and empty mappings, never an error
- Category keys are the raw stored labels; composite labels such as
  "Tithe, Offering" are NOT split into their constituents
"""

import csv
import io
from datetime import datetime
from typing import Callable, Iterable, Optional, Protocol

import structlog

from tithiq.config import get_settings
from tithiq.models.giving import MonthSummary, TitheRecord, YearlyBreakdown


logger = structlog.get_logger(__name__)

CSV_HEADER = ["Date", "Category", "Percentage", "Amount", "Frequency"]


class RecordSource(Protocol):
    """Anything exposing a snapshot of records, most recent first."""

    @property
    def records(self) -> tuple[TitheRecord, ...]:
        ...


def shift_month(month: int, year: int, months_back: int) -> tuple[int, int]:
    """(month, year) that lies `months_back` whole months before (month, year)."""
    index = year * 12 + (month - 1) - months_back
    return index % 12 + 1, index // 12


class AggregationEngine:
    """
    Pure queries over the record store.

    Results are derived views (MonthSummary, YearlyBreakdown) that are
    never persisted.
    """

    def __init__(
        self,
        records: RecordSource,
        clock: Optional[Callable[[], datetime]] = None,
        csv_date_format: Optional[str] = None,
    ):
        self._source = records
        self._clock = clock or datetime.now
        self._csv_date_format = csv_date_format or get_settings().app.csv_date_format

    def _snapshot(self) -> tuple[TitheRecord, ...]:
        return tuple(self._source.records)

    # =========================================================================
    # Monthly queries
    # =========================================================================

    def records_for_month(self, month: int, year: int) -> list[TitheRecord]:
        """Records dated in (month, year), store order preserved."""
        return _filter_month(self._snapshot(), month, year)

    def total_for_month(self, month: int, year: int) -> float:
        """Sum of giving amounts in (month, year). 0.0 when nothing matches."""
        return _total(self.records_for_month(month, year))

    def category_breakdown_for_month(self, month: int, year: int) -> dict[str, float]:
        """Category label -> amount. Categories not given to are absent."""
        return _group_by_category(self.records_for_month(month, year))

    def monthly_summary(self, month: int, year: int) -> MonthSummary:
        """
        Records, total and breakdown for (month, year).

        Raises:
            ValueError: if month is outside 1-12. The plain queries above
                simply match nothing for such a month.
        """
        if not 1 <= month <= 12:
            raise ValueError(f"month must be in 1..12, got {month}")
        month_records = self.records_for_month(month, year)
        return MonthSummary(
            month=month,
            year=year,
            total_giving=_total(month_records),
            category_breakdown=_group_by_category(month_records),
            given_dates=[record.date for record in month_records],
        )

    # =========================================================================
    # Yearly queries
    # =========================================================================

    def yearly_breakdown(self, year: int) -> YearlyBreakdown:
        """
        Totals for a calendar year.

        Only months with at least one record get a key in
        `monthly_totals`; readers default missing months to 0.
        """
        year_records = [r for r in self._snapshot() if r.date.year == year]

        monthly_totals: dict[int, float] = {}
        for record in year_records:
            month = record.date.month
            monthly_totals[month] = monthly_totals.get(month, 0.0) + record.giving_amount

        return YearlyBreakdown(
            year=year,
            # Summed from the monthly totals so both always agree exactly.
            total_giving=sum(monthly_totals.values(), 0.0),
            monthly_totals=monthly_totals,
            category_totals=_group_by_category(year_records),
        )

    def recent_months(self, count: int = 12) -> list[tuple[int, int]]:
        """
        The last `count` calendar months as (month, year), newest first,
        starting with the current month.
        """
        now = self._clock()
        return [shift_month(now.month, now.year, i) for i in range(max(count, 0))]

    def recent_summaries(self, count: int = 12) -> list[MonthSummary]:
        return [
            self.monthly_summary(month, year)
            for month, year in self.recent_months(count)
        ]

    # =========================================================================
    # Export
    # =========================================================================

    def export_csv(self) -> str:
        """
        Render every record as CSV, most recent first.

        Header: Date,Category,Percentage,Amount,Frequency. Fields holding
        commas (composite category labels) are quoted.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        records = self._snapshot()
        for record in records:
            writer.writerow([
                record.date.strftime(self._csv_date_format),
                record.category_name,
                f"{record.category_percentage}%",
                repr(record.giving_amount),
                record.frequency.value,
            ])

        logger.debug("records_exported", count=len(records))
        return buffer.getvalue()


def _filter_month(records: Iterable[TitheRecord], month: int, year: int) -> list[TitheRecord]:
    return [
        record for record in records
        if record.date.month == month and record.date.year == year
    ]


def _total(records: Iterable[TitheRecord]) -> float:
    return sum((record.giving_amount for record in records), 0.0)


def _group_by_category(records: Iterable[TitheRecord]) -> dict[str, float]:
    groups: dict[str, float] = {}
    for record in records:
        key = record.category_name
        groups[key] = groups.get(key, 0.0) + record.giving_amount
    return groups
