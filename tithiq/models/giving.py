"""
Core Data Models for Tithiq

These models define the schemas for everything the stores persist and
everything the aggregation engine derives. They are designed to:
1. Reject out-of-domain values at construction
2. Round-trip through JSON unchanged
3. Stay immutable once a giving record is written

DESIGN DECISION: A TitheRecord is a frozen snapshot. Its percentage and
amount are captured at save time and never re-derived from the category
registry, so later category edits do not rewrite history.
"""

import calendar
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ColorTag(str, Enum):
    """Display color attached to a category."""
    GREEN = "green"
    BLUE = "blue"
    ORANGE = "orange"
    PURPLE = "purple"
    RED = "red"


class Frequency(str, Enum):
    """
    How often the entered income is received.

    Values are the labels users see, and the labels stored on records.
    """
    WEEKLY = "Weekly"
    BI_WEEKLY = "Bi-Weekly"
    MONTHLY = "Monthly"
    ANNUALLY = "Annually"


class ReminderFrequency(str, Enum):
    """How often the user wants to be reminded to give."""
    WEEKLY = "Weekly"
    BI_WEEKLY = "Bi-Weekly"
    MONTHLY = "Monthly"
    CUSTOM = "Custom"

    @property
    def description(self) -> str:
        return {
            ReminderFrequency.WEEKLY: "Every week",
            ReminderFrequency.BI_WEEKLY: "Every two weeks",
            ReminderFrequency.MONTHLY: "Monthly",
            ReminderFrequency.CUSTOM: "Custom schedule",
        }[self]


# =============================================================================
# CATEGORY REGISTRY
# =============================================================================

class GivingCategory(BaseModel):
    """
    A named giving bucket with a target percentage of income.

    Names are expected to be unique within the registry, but this is
    not enforced: lookups by name return the first match.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique category ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name, used as the key on giving records"
    )
    percentage: float = Field(
        ...,
        ge=0,
        le=50,
        allow_inf_nan=False,
        description="Target percentage of income"
    )
    color: ColorTag = Field(
        default=ColorTag.GREEN,
        description="Display color"
    )
    description: str = Field(
        default="",
        max_length=500,
    )

    @field_validator('color', mode='before')
    @classmethod
    def unknown_color_is_green(cls, v: Any) -> Any:
        """Unrecognised color names fall back to green."""
        if isinstance(v, ColorTag):
            return v
        if isinstance(v, str) and v.lower() in {c.value for c in ColorTag}:
            return v.lower()
        return ColorTag.GREEN


DEFAULT_CATEGORIES: tuple[GivingCategory, ...] = (
    GivingCategory(
        name="Tithe",
        percentage=10.0,
        color=ColorTag.GREEN,
        description="Traditional 10% giving based on biblical principles.",
    ),
    GivingCategory(
        name="Offering",
        percentage=5.0,
        color=ColorTag.BLUE,
        description="Additional giving beyond the tithe to support special needs.",
    ),
    GivingCategory(
        name="Missions",
        percentage=3.0,
        color=ColorTag.ORANGE,
        description="Support for missionaries and outreach programs.",
    ),
)


def default_categories() -> list[GivingCategory]:
    """Fresh copies of the built-in categories (new IDs each call)."""
    return [
        category.model_copy(update={"id": uuid4()})
        for category in DEFAULT_CATEGORIES
    ]


# =============================================================================
# HISTORY
# =============================================================================

class TitheRecord(BaseModel):
    """
    One saved calculation.

    CRITICAL: Records are immutable. `category_name` is the raw label the
    user saved, which is a comma-joined composite when several categories
    were selected. Aggregation never splits it.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the record was saved"
    )
    income: float = Field(..., ge=0, allow_inf_nan=False)
    frequency: Frequency
    category_name: str = Field(
        ...,
        description="Category label, possibly a composite like 'Tithe, Offering'"
    )
    category_percentage: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Sum of the selected categories' percentages"
    )
    giving_amount: float = Field(..., ge=0, allow_inf_nan=False)

    @property
    def formatted_giving(self) -> str:
        return f"${self.giving_amount:.2f}"

    @property
    def formatted_percentage(self) -> str:
        return f"{self.category_percentage:.1f}%"


class ProgressEntry(BaseModel):
    """A single contribution counted toward yearly progress."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    date: datetime = Field(default_factory=datetime.now)
    amount: float = Field(..., ge=0, allow_inf_nan=False)

    @property
    def month(self) -> int:
        return self.date.month


# =============================================================================
# GOALS, PRESETS, REMINDERS
# =============================================================================

class GivingGoal(BaseModel):
    """Monthly and yearly giving targets. Zero means no target."""

    monthly_target: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    yearly_target: float = Field(default=0.0, ge=0, allow_inf_nan=False)


class GivingPreset(BaseModel):
    """
    A reusable template for the calculator.

    `category_distribution` maps category name to its share of the total
    percentage (shares sum to 100 when any category had a percentage).
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    frequency: Frequency
    categories: list[str] = Field(default_factory=list)
    category_distribution: dict[str, float] = Field(default_factory=dict)

    # Organization information
    organization_name: Optional[str] = None
    organization_details: Optional[str] = None

    @property
    def formatted_amount(self) -> str:
        return f"${self.amount:.2f}"


LAST_GIVING_PRESET_NAME = "Last Time"


def default_presets() -> list[GivingPreset]:
    """Presets seeded when none have been saved yet."""
    return [
        GivingPreset(
            name="Weekly Tithe",
            amount=100,
            frequency=Frequency.WEEKLY,
            categories=["Tithe"],
            category_distribution={"Tithe": 100.0},
        ),
        GivingPreset(
            name="Monthly Giving",
            amount=500,
            frequency=Frequency.MONTHLY,
            categories=["Tithe", "Offering"],
            category_distribution={"Tithe": 80.0, "Offering": 20.0},
        ),
    ]


class ReminderPreferences(BaseModel):
    """
    When the user wants to be nudged to give.

    `day_of_week` is 0-6 with 0 = Sunday.
    """

    is_enabled: bool = False
    frequency: ReminderFrequency = ReminderFrequency.MONTHLY
    day_of_week: int = Field(default=5, ge=0, le=6)
    day_of_month: int = Field(default=15, ge=1, le=31)
    hour: int = Field(default=9, ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    last_notification_date: Optional[datetime] = None

    def __eq__(self, other: object) -> bool:
        # The last notification timestamp is bookkeeping, not a preference.
        if not isinstance(other, ReminderPreferences):
            return NotImplemented
        return self.model_dump(exclude={"last_notification_date"}) == other.model_dump(
            exclude={"last_notification_date"}
        )



# =============================================================================
# DERIVED VIEWS (never persisted)
# =============================================================================

class MonthSummary(BaseModel):
    """Everything given in one calendar month."""

    month: int = Field(..., ge=1, le=12)
    year: int
    total_giving: float = 0.0
    category_breakdown: dict[str, float] = Field(default_factory=dict)
    given_dates: list[datetime] = Field(default_factory=list)

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]

    @property
    def giving_count(self) -> int:
        return len(self.given_dates)

    @property
    def formatted_total(self) -> str:
        return f"${self.total_giving:.2f}"


class YearlyBreakdown(BaseModel):
    """
    Totals for one calendar year.

    Only months and categories with at least one record appear as keys.
    """

    year: int
    total_giving: float = 0.0
    monthly_totals: dict[int, float] = Field(default_factory=dict)
    category_totals: dict[str, float] = Field(default_factory=dict)

    def total_for_month(self, month: int) -> float:
        """Monthly total, 0.0 for months without records."""
        return self.monthly_totals.get(month, 0.0)

    @property
    def formatted_total(self) -> str:
        return f"${self.total_giving:.2f}"
