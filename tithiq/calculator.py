"""
Giving Calculator

Turns user-entered income into recommended giving amounts.

IMPORTANT: Text input is coerced at this boundary, never rejected.
Empty, non-numeric, NaN or infinite income reads as 0.0 so that every
downstream computation stays total.
"""

import math
from typing import Optional

from pydantic import BaseModel, Field

from tithiq.models.giving import Frequency, GivingCategory, GivingGoal


# Average number of pay periods per month.
PERIODS_PER_MONTH = {
    Frequency.WEEKLY: 4.33,
    Frequency.BI_WEEKLY: 2.17,
    Frequency.MONTHLY: 1.0,
    Frequency.ANNUALLY: 1 / 12,
}

PERIODS_PER_YEAR = {
    Frequency.WEEKLY: 52,
    Frequency.BI_WEEKLY: 26,
    Frequency.MONTHLY: 12,
    Frequency.ANNUALLY: 1,
}

COMPOSITE_LABEL_SEPARATOR = ", "


def parse_income(text: Optional[str]) -> float:
    """Parse income text, coercing anything unusable to 0.0."""
    if text is None:
        return 0.0
    try:
        value = float(str(text).strip())
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


class GivingCalculation(BaseModel):
    """
    Giving for one income figure and a set of selected categories.

    All derived figures are read-only properties.
    """

    income: float = Field(default=0.0, allow_inf_nan=False)
    frequency: Frequency = Frequency.MONTHLY
    categories: list[GivingCategory] = Field(default_factory=list)

    @property
    def total_percentage(self) -> float:
        return sum((category.percentage for category in self.categories), 0.0)

    @property
    def giving_amount(self) -> float:
        return self.income * (self.total_percentage / 100.0)

    @property
    def monthly_income(self) -> float:
        return self.income * PERIODS_PER_MONTH[self.frequency]

    @property
    def monthly_giving(self) -> float:
        return self.monthly_income * (self.total_percentage / 100.0)

    @property
    def annual_giving(self) -> float:
        return self.giving_amount * PERIODS_PER_YEAR[self.frequency]

    @property
    def category_names(self) -> list[str]:
        return [category.name for category in self.categories]

    @property
    def category_label(self) -> str:
        """Label stored on the record; composite when several are selected."""
        return COMPOSITE_LABEL_SEPARATOR.join(self.category_names)

    @property
    def category_distribution(self) -> dict[str, float]:
        """Each category's share of the total percentage (0-100)."""
        total = self.total_percentage
        return {
            category.name: (category.percentage / total * 100.0 if total > 0 else 0.0)
            for category in self.categories
        }

    def goal_progress(self, goal: GivingGoal) -> tuple[float, float]:
        """
        (monthly, yearly) progress toward the goal, each capped at 1.0.

        A zero target reads as no progress.
        """
        monthly = (
            min(self.monthly_giving / goal.monthly_target, 1.0)
            if goal.monthly_target > 0 else 0.0
        )
        yearly = (
            min(self.annual_giving / goal.yearly_target, 1.0)
            if goal.yearly_target > 0 else 0.0
        )
        return monthly, yearly
