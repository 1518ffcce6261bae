"""
Insight Models

Derived, ephemeral results of the insight engine. They are regenerated
on demand and never persisted.
"""

from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from tithiq.models.giving import ColorTag


class InsightType(str, Enum):
    """How an insight should be presented."""
    PATTERN = "pattern"
    SUGGESTION = "suggestion"
    ACHIEVEMENT = "achievement"


class GivingInsight(BaseModel):
    """A single observation about the user's giving."""

    id: UUID = Field(default_factory=uuid4)
    title: str
    description: str
    type: InsightType


class CategorySuggestion(BaseModel):
    """
    A category whose actual share of yearly giving is far from its
    configured percentage.
    """

    id: UUID = Field(default_factory=uuid4)
    category_name: str
    current_percentage: float = Field(
        ...,
        description="Actual share of the yearly total, 0-100"
    )
    suggested_percentage: float = Field(
        ...,
        description="The category's configured percentage"
    )
    reason: str
    color: ColorTag


class YearEndProjection(BaseModel):
    """Linear extrapolation of the remaining year from the monthly average."""

    current_total: float
    monthly_average: float
    projected_total: float
    goal_amount: float
    months_remaining: int = Field(..., ge=1, le=11)
    suggested_monthly_amount: float

    @property
    def is_on_track(self) -> bool:
        return self.projected_total >= self.goal_amount

    @property
    def percent_to_goal(self) -> float:
        """Projected fraction of the goal, capped at 1.0."""
        if self.goal_amount <= 0:
            return 0.0
        return min(self.projected_total / self.goal_amount, 1.0)


class InsightReport(BaseModel):
    """Everything one insight run produces."""

    year: int
    month: int
    insights: list[GivingInsight] = Field(default_factory=list)
    category_suggestions: list[CategorySuggestion] = Field(default_factory=list)
    year_end_projection: Optional[YearEndProjection] = None

    def titles(self) -> list[str]:
        return [insight.title for insight in self.insights]
