"""
Tests for Tithiq

Test strategy:
1. Unit tests for individual components (models, events, settings)
2. Store and flow tests against in-memory storage
3. A fixed clock everywhere; nothing depends on the real date
"""

from datetime import datetime
from uuid import uuid4

import pytest
from pydantic import ValidationError

from tithiq.config import AppSettings, InsightSettings
from tithiq.models.events import (
    EventSeverity,
    StoreEvent,
    StoreEventBuilder,
    StoreEventType,
)
from tithiq.models.giving import (
    DEFAULT_CATEGORIES,
    ColorTag,
    Frequency,
    GivingCategory,
    GivingPreset,
    MonthSummary,
    ProgressEntry,
    ReminderFrequency,
    TitheRecord,
    YearlyBreakdown,
    default_categories,
    default_presets,
)
from tithiq.models.insights import InsightReport, GivingInsight, InsightType, YearEndProjection


class TestGivingModels:
    """Tests for giving-related Pydantic models."""

    def test_category_creation(self):
        """Test GivingCategory model creation."""
        category = GivingCategory(name="Tithe", percentage=10, color=ColorTag.GREEN)
        assert category.name == "Tithe"
        assert category.percentage == 10.0
        assert category.description == ""

    def test_category_strips_whitespace(self):
        """Test that whitespace is stripped from category names."""
        assert GivingCategory(name="  Missions  ", percentage=3).name == "Missions"

    @pytest.mark.parametrize("percentage", [-1, 50.5, float("nan"), float("inf")])
    def test_category_percentage_bounds(self, percentage):
        """Test that percentages must be finite and within 0-50."""
        with pytest.raises(ValidationError):
            GivingCategory(name="Tithe", percentage=percentage)

    def test_category_boundary_percentages(self):
        """Test that 0 and 50 are both accepted."""
        assert GivingCategory(name="A", percentage=0).percentage == 0.0
        assert GivingCategory(name="B", percentage=50).percentage == 50.0

    def test_empty_category_name_rejected(self):
        """Test that a blank name is invalid."""
        with pytest.raises(ValidationError):
            GivingCategory(name="   ", percentage=5)

    def test_unknown_color_becomes_green(self):
        """Test that unrecognized color tags fall back to green."""
        assert GivingCategory(name="X", percentage=1, color="teal").color == ColorTag.GREEN
        assert GivingCategory(name="X", percentage=1, color="red").color == ColorTag.RED

    def test_default_categories(self):
        """Test the first-run categories and their fresh IDs."""
        first, second = default_categories(), default_categories()
        assert [(c.name, c.percentage) for c in first] == [
            ("Tithe", 10.0), ("Offering", 5.0), ("Missions", 3.0),
        ]
        assert {c.id for c in first}.isdisjoint({c.id for c in second})
        assert {c.id for c in first}.isdisjoint({c.id for c in DEFAULT_CATEGORIES})

    def test_record_is_frozen(self):
        """Test that a saved record cannot be edited."""
        record = TitheRecord(
            income=1000,
            frequency=Frequency.MONTHLY,
            category_name="Tithe",
            category_percentage=10,
            giving_amount=100,
        )
        with pytest.raises(ValidationError):
            record.giving_amount = 5.0

    def test_record_formatting(self):
        """Test display helpers on TitheRecord."""
        record = TitheRecord(
            date=datetime(2025, 6, 1),
            income=1234.5,
            frequency=Frequency.WEEKLY,
            category_name="Tithe, Offering",
            category_percentage=15,
            giving_amount=185.5,
        )
        assert record.formatted_giving == "$185.50"
        assert record.formatted_percentage == "15.0%"

    def test_record_rejects_negative_amount(self):
        """Test that giving amounts cannot be negative."""
        with pytest.raises(ValidationError):
            TitheRecord(
                income=100,
                frequency=Frequency.MONTHLY,
                category_name="Tithe",
                category_percentage=10,
                giving_amount=-1,
            )

    def test_frequency_values(self):
        """Test the persisted frequency labels."""
        assert [f.value for f in Frequency] == ["Weekly", "Bi-Weekly", "Monthly", "Annually"]
        assert ReminderFrequency.CUSTOM.description

    def test_progress_entry_month(self):
        """Test that progress entries expose their month."""
        assert ProgressEntry(date=datetime(2025, 3, 9), amount=5).month == 3

    def test_default_presets(self):
        """Test the first-run presets."""
        presets = default_presets()
        assert [p.name for p in presets] == ["Weekly Tithe", "Monthly Giving"]
        assert presets[1].category_distribution == {"Tithe": 80.0, "Offering": 20.0}
        assert presets[0].formatted_amount == "$100.00"

    def test_preset_requires_name(self):
        """Test that presets need a name."""
        with pytest.raises(ValidationError):
            GivingPreset(name="", amount=10, frequency=Frequency.MONTHLY)


class TestDerivedModels:
    """Tests for summaries and insight models."""

    def test_month_summary_helpers(self):
        """Test MonthSummary display properties."""
        summary = MonthSummary(
            month=2,
            year=2025,
            total_giving=42.0,
            category_breakdown={"Tithe": 42.0},
            given_dates=[datetime(2025, 2, 3)],
        )
        assert summary.month_name == "February"
        assert summary.giving_count == 1
        assert summary.formatted_total == "$42.00"

    def test_yearly_breakdown_missing_month(self):
        """Test that absent months read as zero."""
        breakdown = YearlyBreakdown(year=2025, total_giving=10.0, monthly_totals={4: 10.0})
        assert breakdown.total_for_month(4) == 10.0
        assert breakdown.total_for_month(5) == 0.0

    def test_projection_without_goal(self):
        """Test that no goal means no progress toward it."""
        projection = YearEndProjection(
            current_total=100.0,
            monthly_average=50.0,
            projected_total=600.0,
            goal_amount=0.0,
            months_remaining=10,
            suggested_monthly_amount=0.0,
        )
        assert projection.percent_to_goal == 0.0

    def test_projection_months_remaining_bounds(self):
        """Test that a projection always has 1-11 months left."""
        with pytest.raises(ValidationError):
            YearEndProjection(
                current_total=0.0,
                monthly_average=0.0,
                projected_total=0.0,
                goal_amount=0.0,
                months_remaining=0,
                suggested_monthly_amount=0.0,
            )

    def test_report_titles(self):
        """Test InsightReport.titles keeps insight order."""
        report = InsightReport(
            year=2025,
            month=6,
            insights=[
                GivingInsight(title="A", description="", type=InsightType.PATTERN),
                GivingInsight(title="B", description="", type=InsightType.ACHIEVEMENT),
            ],
        )
        assert report.titles() == ["A", "B"]


class TestStoreEvents:
    """Tests for store event models."""

    def test_event_creation(self):
        """Test StoreEvent model creation."""
        event = StoreEvent(
            event_type=StoreEventType.RECORD_ADDED,
            store="titheRecords",
            description="Test event",
        )
        assert event.event_id is not None
        assert event.severity == EventSeverity.INFO

    def test_event_to_log_dict(self):
        """Test conversion to a log-friendly dict."""
        record_id = uuid4()
        event = StoreEventBuilder.record_added("titheRecords", record_id, 12.5)
        log_dict = event.to_log_dict()

        assert log_dict["event_type"] == "record_added"
        assert log_dict["entity_id"] == str(record_id)
        assert log_dict["details"] == {"giving_amount": 12.5}
        assert "timestamp" in log_dict

    def test_failure_severities(self):
        """Test that load failures warn and save failures error."""
        load = StoreEventBuilder.load_failed("givingGoals", "bad json")
        save = StoreEventBuilder.save_failed("givingGoals", "disk full")

        assert load.severity == EventSeverity.WARNING
        assert save.severity == EventSeverity.ERROR
        assert save.error_message == "disk full"

    def test_eviction_details(self):
        """Test the eviction event payload."""
        event = StoreEventBuilder.records_evicted("titheRecords", 2, 20)
        assert event.details == {"evicted": 2, "limit": 20}


class TestSettings:
    """Tests for configuration defaults and validation."""

    def test_app_defaults(self, monkeypatch):
        """Test AppSettings defaults."""
        monkeypatch.delenv("TITHIQ_MAX_RECORDS", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.max_records == 20
        assert settings.csv_date_format == "%Y-%m-%d"
        assert settings.resolved_storage_path.name == "store.json"

    def test_env_override(self, monkeypatch):
        """Test that TITHIQ_ variables override defaults."""
        monkeypatch.setenv("TITHIQ_MAX_RECORDS", "5")
        monkeypatch.setenv("TITHIQ_LOG_LEVEL", "debug")
        settings = AppSettings(_env_file=None)
        assert settings.max_records == 5
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, log_level="LOUD")

    def test_insight_defaults(self):
        """Test InsightSettings defaults."""
        settings = InsightSettings(_env_file=None)
        assert settings.consistent_threshold == 0.8
        assert settings.building_threshold == 0.5
        assert settings.trend_window == 3
