"""
Insight Engine

DESIGN DECISION: Insights are derived on demand and fully recomputed on
every run from three inputs only:
1. The current year's YearlyBreakdown
2. The giving goal
3. The category registry

Nothing is cached between runs. Degenerate input (no records, no
goals) yields an empty or partial report, never an error.

Each analysis is a public method taking explicit inputs, so it can be
exercised without stores; `generate` wires them to the live stores.
"""

from datetime import datetime
from typing import Callable, Optional, Protocol

import structlog

from tithiq.analytics.aggregation import AggregationEngine
from tithiq.config import InsightSettings, get_settings
from tithiq.models.giving import GivingCategory, GivingGoal, YearlyBreakdown
from tithiq.models.insights import (
    CategorySuggestion,
    GivingInsight,
    InsightReport,
    InsightType,
    YearEndProjection,
)


logger = structlog.get_logger(__name__)


class GoalSource(Protocol):
    @property
    def goals(self) -> GivingGoal:
        ...


class CategorySource(Protocol):
    @property
    def categories(self) -> list[GivingCategory]:
        ...


class InsightEngine:
    """
    Turns the current year's giving into patterns, achievements,
    suggestions and a year-end projection.
    """

    def __init__(
        self,
        aggregation: AggregationEngine,
        goals: GoalSource,
        categories: CategorySource,
        settings: Optional[InsightSettings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._aggregation = aggregation
        self._goals = goals
        self._categories = categories
        self._settings = settings or get_settings().insights
        self._clock = clock or datetime.now

    def generate(self) -> InsightReport:
        """Run every analysis for the current year."""
        now = self._clock()
        year, month = now.year, now.month

        breakdown = self._aggregation.yearly_breakdown(year)
        insights = self.analyze_patterns(breakdown, month)
        suggestions = self.analyze_category_balance(
            breakdown, self._categories.categories
        )
        projection, goal_insight = self.project_year_end(
            breakdown, month, self._goals.goals.yearly_target
        )
        if goal_insight is not None:
            insights.append(goal_insight)

        logger.info(
            "insights_generated",
            year=year,
            month=month,
            insight_count=len(insights),
            suggestion_count=len(suggestions),
            has_projection=projection is not None,
        )
        return InsightReport(
            year=year,
            month=month,
            insights=insights,
            category_suggestions=suggestions,
            year_end_projection=projection,
        )

    # =========================================================================
    # Patterns
    # =========================================================================

    def analyze_patterns(
        self,
        breakdown: YearlyBreakdown,
        current_month: int,
    ) -> list[GivingInsight]:
        """Consistency, trend and favorite-category insights, in that order."""
        insights = []

        consistency = self.consistency_insight(breakdown, current_month)
        if consistency is not None:
            insights.append(consistency)

        trend = self.trend_insight(breakdown, current_month)
        if trend is not None:
            insights.append(trend)

        favorite = self.favorite_category_insight(breakdown)
        if favorite is not None:
            insights.append(favorite)

        return insights

    def consistency_rate(self, breakdown: YearlyBreakdown, current_month: int) -> tuple[int, float]:
        """
        (active_months, rate): months 1..current_month with a nonzero
        total, and that count over current_month.
        """
        if current_month < 1:
            return 0, 0.0
        active_months = sum(
            1 for month in range(1, current_month + 1)
            if breakdown.total_for_month(month) > 0
        )
        return active_months, active_months / current_month

    def consistency_insight(
        self,
        breakdown: YearlyBreakdown,
        current_month: int,
    ) -> Optional[GivingInsight]:
        active_months, rate = self.consistency_rate(breakdown, current_month)

        if rate >= self._settings.consistent_threshold:
            return GivingInsight(
                title="Consistent Giver",
                description=(
                    f"You've given consistently in {active_months} out of "
                    f"{current_month} months this year. Great job maintaining "
                    "regular giving!"
                ),
                type=InsightType.ACHIEVEMENT,
            )
        if rate >= self._settings.building_threshold:
            return GivingInsight(
                title="Building Consistency",
                description=(
                    f"You've given in {active_months} out of {current_month} months. "
                    "Setting up regular giving can help build consistency."
                ),
                type=InsightType.PATTERN,
            )
        if active_months > 0:
            return GivingInsight(
                title="Occasional Giving",
                description=(
                    f"You've given in {active_months} out of {current_month} months. "
                    "Consider scheduling regular contributions."
                ),
                type=InsightType.SUGGESTION,
            )
        return None

    def trend_insight(
        self,
        breakdown: YearlyBreakdown,
        current_month: int,
    ) -> Optional[GivingInsight]:
        """
        Compare the trailing window of months ending at current_month.

        Months with a zero total are dropped from the window rather than
        counted as zero, so a window with a gap never yields a trend.
        """
        window = self._settings.trend_window
        if current_month < window:
            return None

        totals = [
            breakdown.total_for_month(month)
            for month in range(current_month - window + 1, current_month + 1)
        ]
        totals = [total for total in totals if total > 0]
        if len(totals) != window:
            return None

        pairs = list(zip(totals, totals[1:]))
        if all(a < b for a, b in pairs):
            return GivingInsight(
                title="Increasing Generosity",
                description=(
                    f"Your giving has increased each month for the last {window} "
                    "months. Your growing generosity is making an impact!"
                ),
                type=InsightType.ACHIEVEMENT,
            )
        if all(a > b for a, b in pairs):
            return GivingInsight(
                title="Decreasing Giving",
                description=(
                    f"Your giving has decreased over the last {window} months. "
                    "Consider setting a minimum monthly giving goal."
                ),
                type=InsightType.PATTERN,
            )
        return None

    @staticmethod
    def favorite_category(breakdown: YearlyBreakdown) -> Optional[tuple[str, float]]:
        """
        The category label with the largest yearly amount.

        Ties go to the lexicographically smallest label.
        """
        if not breakdown.category_totals:
            return None
        return min(
            breakdown.category_totals.items(),
            key=lambda item: (-item[1], item[0]),
        )

    def favorite_category_insight(self, breakdown: YearlyBreakdown) -> Optional[GivingInsight]:
        favorite = self.favorite_category(breakdown)
        if favorite is None:
            return None

        name, amount = favorite
        share = amount / breakdown.total_giving * 100 if breakdown.total_giving > 0 else 0.0
        return GivingInsight(
            title=f"Favorite Category: {name}",
            description=(
                f"{int(share)}% of your giving goes toward {name}. "
                "You're making a significant impact in this area!"
            ),
            type=InsightType.PATTERN,
        )

    # =========================================================================
    # Category balance
    # =========================================================================

    def analyze_category_balance(
        self,
        breakdown: YearlyBreakdown,
        categories: list[GivingCategory],
    ) -> list[CategorySuggestion]:
        """
        Compare each registered category's actual share of the year with
        its configured percentage.

        Skipped entirely when nothing was given this year. At most one
        suggestion per category.
        """
        if breakdown.total_giving <= 0 or not breakdown.category_totals:
            return []

        suggestions = []
        for category in categories:
            actual_amount = breakdown.category_totals.get(category.name, 0.0)
            actual = actual_amount / breakdown.total_giving * 100
            configured = category.percentage

            if actual < configured * self._settings.under_ratio:
                suggestions.append(CategorySuggestion(
                    category_name=category.name,
                    current_percentage=actual,
                    suggested_percentage=configured,
                    reason=(
                        f"You've allocated {int(actual)}% to {category.name} "
                        f"vs. your target of {int(configured)}%"
                    ),
                    color=category.color,
                ))
            elif (
                actual > configured * self._settings.over_ratio
                and actual > self._settings.over_floor_percentage
            ):
                suggestions.append(CategorySuggestion(
                    category_name=category.name,
                    current_percentage=actual,
                    suggested_percentage=configured,
                    reason=(
                        f"Consider diversifying from {category.name} to increase "
                        "impact across multiple areas"
                    ),
                    color=category.color,
                ))

        return suggestions

    # =========================================================================
    # Year-end projection
    # =========================================================================

    @staticmethod
    def project_year_end(
        breakdown: YearlyBreakdown,
        current_month: int,
        yearly_goal: float,
    ) -> tuple[Optional[YearEndProjection], Optional[GivingInsight]]:
        """
        Extrapolate the year from the year-to-date monthly average.

        Returns (None, None) once the year is complete (December). The
        goal insight is only produced when a yearly goal is set.
        """
        months_remaining = 12 - current_month
        if months_remaining <= 0 or current_month < 1:
            return None, None

        current_total = breakdown.total_giving
        monthly_average = current_total / current_month
        projected_total = current_total + monthly_average * months_remaining
        suggested_monthly = max(0.0, yearly_goal - current_total) / months_remaining

        projection = YearEndProjection(
            current_total=current_total,
            monthly_average=monthly_average,
            projected_total=projected_total,
            goal_amount=yearly_goal,
            months_remaining=months_remaining,
            suggested_monthly_amount=suggested_monthly,
        )

        if yearly_goal <= 0:
            return projection, None

        if projection.is_on_track:
            insight = GivingInsight(
                title="On Track to Meet Goal",
                description=(
                    "You're projected to meet or exceed your yearly goal of "
                    f"${yearly_goal:.2f}!"
                ),
                type=InsightType.ACHIEVEMENT,
            )
        else:
            percentage_of_goal = projected_total / yearly_goal * 100
            insight = GivingInsight(
                title="Year-End Goal Projection",
                description=(
                    f"You're on track to reach {int(percentage_of_goal)}% of your "
                    f"yearly goal. Consider giving ${suggested_monthly:.2f} monthly "
                    "to finish strong."
                ),
                type=InsightType.SUGGESTION,
            )
        return projection, insight
