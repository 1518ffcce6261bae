"""
Tests for component wiring and the calculator flow.
"""

from datetime import datetime

import pytest

from tithiq.models.events import StoreEventType
from tithiq.models.giving import Frequency, GivingPreset
from tithiq.orchestrator import CalculatorSession, create_app_components
from tithiq.services.storage import JsonFileKeyValueStorage


@pytest.fixture
def session(app):
    return CalculatorSession(app)


class TestCreateAppComponents:
    """Tests for create_app_components."""

    def test_first_run_defaults(self, app):
        """Test the defaults a new install starts with."""
        assert app.categories.names() == ["Tithe", "Offering", "Missions"]
        assert len(app.presets.presets) == 2
        assert app.records.records == ()
        assert app.goals.goals.yearly_target == 0.0

    def test_shared_event_stream(self, app, captured):
        """Test that every store reports through one event logger."""
        app.goals.update(monthly_target=100.0)
        app.progress.add_contribution(5.0)
        assert [e.event_type for e in captured] == [
            StoreEventType.GOALS_UPDATED,
            StoreEventType.CONTRIBUTION_ADDED,
        ]

    def test_json_file_backend(self, tmp_path, clock):
        """Test that components persist through the JSON file."""
        path = tmp_path / "store.json"
        first = create_app_components(storage=JsonFileKeyValueStorage(path=path), clock=clock)
        first.goals.update(yearly_target=5000.0)

        second = create_app_components(storage=JsonFileKeyValueStorage(path=path), clock=clock)
        assert second.goals.goals.yearly_target == 5000.0
        assert second.categories.names() == ["Tithe", "Offering", "Missions"]


class TestCalculatorSession:
    """Tests for the calculate-and-save flow."""

    def test_initial_state(self, session):
        """Test the calculator's starting values."""
        assert session.income == 0.0
        assert session.frequency == Frequency.MONTHLY
        assert [c.name for c in session.selected_categories] == ["Tithe"]

    def test_calculation(self, session):
        """Test a calculation over two selected categories."""
        session.income_text = "1000"
        session.select_categories(["Tithe", "Offering"])
        calc = session.calculation()
        assert calc.giving_amount == pytest.approx(150.0)
        assert calc.category_label == "Tithe, Offering"

    def test_unknown_selection_is_ignored(self, session):
        """Test that an unmatched selection keeps the current one."""
        session.select_categories(["Nonexistent"])
        assert [c.name for c in session.selected_categories] == ["Tithe"]

    def test_save_writes_record_progress_and_last_giving(self, app, session, clock):
        """Test that saving updates records, progress and last giving."""
        session.income_text = "2000"
        session.frequency = Frequency.BI_WEEKLY
        session.select_categories(["Tithe", "Offering"])

        record = session.save_calculation()

        assert app.records.records == (record,)
        assert record.date == clock.now
        assert record.category_name == "Tithe, Offering"
        assert record.category_percentage == 15.0
        assert record.giving_amount == pytest.approx(300.0)
        assert record.frequency == Frequency.BI_WEEKLY

        assert app.progress.total_contributions() == pytest.approx(300.0)

        last = app.presets.last_giving
        assert last.name == "Last Time"
        assert last.amount == 2000.0
        assert last.frequency == Frequency.BI_WEEKLY
        assert last.categories == ["Tithe", "Offering"]

    def test_save_without_income_is_skipped(self, app, session, captured):
        """Test that nothing is saved without a positive income."""
        session.income_text = "not a number"
        assert session.save_calculation() is None
        assert app.records.records == ()
        assert app.presets.last_giving is None
        assert captured == []

    def test_saved_record_visible_to_queries(self, app, session):
        """Test that aggregation sees a saved calculation."""
        session.income_text = "500"
        session.save_calculation()
        assert app.aggregation.total_for_month(6, 2025) == pytest.approx(50.0)

    def test_clear(self, session):
        """Test that clear resets the income text."""
        session.income_text = "123"
        session.clear()
        assert session.income == 0.0


class TestApplyPreset:
    """Tests for loading presets into the calculator."""

    def test_apply_default_preset(self, app, session):
        """Test applying a default preset."""
        preset = app.presets.presets[1]
        assert session.apply_preset(preset)
        assert session.income_text == "500.00"
        assert session.frequency == Frequency.MONTHLY
        assert [c.name for c in session.selected_categories] == ["Tithe", "Offering"]

    def test_unmatched_categories_keep_selection(self, session):
        """Test that a preset with unknown categories keeps the selection."""
        preset = GivingPreset(
            name="Retired",
            amount=75.5,
            frequency=Frequency.WEEKLY,
            category_distribution={"Building Fund": 100.0},
        )
        session.select_categories(["Missions"])

        assert not session.apply_preset(preset)
        assert session.income_text == "75.50"
        assert session.frequency == Frequency.WEEKLY
        assert [c.name for c in session.selected_categories] == ["Missions"]

    def test_partially_matched_categories(self, session):
        """Test that unknown preset categories are dropped."""
        preset = GivingPreset(
            name="Mixed",
            amount=100.0,
            frequency=Frequency.MONTHLY,
            category_distribution={"Gone": 50.0, "Missions": 50.0},
        )
        assert session.apply_preset(preset)
        assert [c.name for c in session.selected_categories] == ["Missions"]

    def test_last_giving_round_trip(self, app, session):
        """Test that the last giving preset restores the calculator."""
        session.income_text = "1200"
        session.select_categories(["Offering", "Missions"])
        session.save_calculation()

        fresh = CalculatorSession(app)
        assert fresh.apply_preset(app.presets.last_giving)
        assert fresh.income == 1200.0
        assert [c.name for c in fresh.selected_categories] == ["Offering", "Missions"]

    def test_records_capped_through_session(self, app, session):
        """Test the record cap through repeated saves."""
        session.income_text = "10"
        for _ in range(25):
            session.save_calculation()
        assert len(app.records) == 20
        assert len(app.progress.entries) == 25

    def test_evicted_records_still_count_toward_progress(self, app, session):
        """Test that progress outlives record eviction."""
        session.income_text = "100"
        for _ in range(21):
            session.save_calculation()
        assert app.aggregation.total_for_month(6, 2025) == pytest.approx(200.0)
        assert app.progress.total_contributions() == pytest.approx(210.0)

    def test_saved_preset_uses_its_frequency(self, app, session):
        """Test that a saved preset keeps its frequency and the clock date."""
        preset = app.presets.presets[0]
        session.apply_preset(preset)
        record = session.save_calculation()
        assert record.date == datetime(2025, 6, 15, 12, 0)
        assert record.frequency == Frequency.WEEKLY
