"""
Main Orchestrator for Tithiq

This module ties together all the components and defines the
end-to-end flows for:
1. Calculate → Save (income text → giving amount → record, progress, last giving)
2. Preset → Calculator (apply a saved template)
3. History → Insights (aggregation and insight engines over the stores)

DESIGN DECISION: There are no ambient singletons. Every store is created
here against one storage backend and passed explicitly to the engines,
so tests can inject in-memory storage and a fixed clock.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

import structlog

from tithiq.analytics import AggregationEngine, InsightEngine
from tithiq.audit import EventLogger
from tithiq.calculator import GivingCalculation, parse_income
from tithiq.config import Settings, get_settings
from tithiq.models.giving import (
    Frequency,
    GivingCategory,
    GivingPreset,
    TitheRecord,
)
from tithiq.services.storage import JsonFileKeyValueStorage, KeyValueStorage
from tithiq.stores import (
    CategoryRegistry,
    GoalStore,
    PresetStore,
    ProgressTracker,
    RecordStore,
    ReminderStore,
)


logger = structlog.get_logger(__name__)


@dataclass
class AppComponents:
    """Everything a presentation layer needs, wired to one storage backend."""

    storage: KeyValueStorage
    events: EventLogger
    categories: CategoryRegistry
    records: RecordStore
    goals: GoalStore
    presets: PresetStore
    reminders: ReminderStore
    progress: ProgressTracker
    aggregation: AggregationEngine
    insights: InsightEngine


def create_app_components(
    storage: Optional[KeyValueStorage] = None,
    settings: Optional[Settings] = None,
    clock: Optional[Callable[[], datetime]] = None,
    events: Optional[EventLogger] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        storage: Persistence backend. Defaults to the JSON file named
                 in AppSettings.storage_path.
        settings: Settings to use. Defaults to get_settings().
        clock: Source of "now". Defaults to datetime.now.
        events: Shared event logger. A new one is created if omitted.

    Returns:
        AppComponents with every store loaded
    """
    settings = settings or get_settings()
    app_settings = settings.app
    clock = clock or datetime.now
    events = events or EventLogger()
    storage = storage or JsonFileKeyValueStorage(
        path=app_settings.resolved_storage_path,
        write_attempts=app_settings.storage_write_attempts,
    )

    categories = CategoryRegistry(storage, events, clock)
    records = RecordStore(storage, events, clock, max_records=app_settings.max_records)
    goals = GoalStore(storage, events, clock)
    presets = PresetStore(storage, events, clock)
    reminders = ReminderStore(storage, events, clock)
    progress = ProgressTracker(storage, events, clock)

    aggregation = AggregationEngine(
        records,
        clock=clock,
        csv_date_format=app_settings.csv_date_format,
    )
    insights = InsightEngine(
        aggregation,
        goals,
        categories,
        settings=settings.insights,
        clock=clock,
    )

    logger.info(
        "app_components_created",
        storage=type(storage).__name__,
        records=len(records),
        categories=len(categories.categories),
    )
    return AppComponents(
        storage=storage,
        events=events,
        categories=categories,
        records=records,
        goals=goals,
        presets=presets,
        reminders=reminders,
        progress=progress,
        aggregation=aggregation,
        insights=insights,
    )


class CalculatorSession:
    """
    Orchestrates the calculator flow.

    Flow:
    1. Enter → income text, frequency, selected categories
    2. Calculate → GivingCalculation (percentage x income)
    3. Save → record + progress entry + "last giving" preset

    Saving is only possible with a positive income.
    """

    def __init__(self, components: AppComponents):
        self._app = components
        self.income_text = ""
        self.frequency = Frequency.MONTHLY
        registered = components.categories.categories
        self._selected: list[GivingCategory] = registered[:1]

    @property
    def income(self) -> float:
        return parse_income(self.income_text)

    @property
    def selected_categories(self) -> list[GivingCategory]:
        return [category.model_copy() for category in self._selected]

    def select_categories(self, names: Iterable[str]) -> list[GivingCategory]:
        """
        Select registered categories by name, in the given order.

        Unknown names are dropped; if none match, the selection is kept.
        """
        matched = self._app.categories.match(names)
        if matched:
            self._selected = matched
        return self.selected_categories

    def calculation(self) -> GivingCalculation:
        return GivingCalculation(
            income=self.income,
            frequency=self.frequency,
            categories=self._selected,
        )

    def clear(self) -> None:
        self.income_text = ""

    def apply_preset(self, preset: GivingPreset) -> bool:
        """
        Load a preset into the calculator.

        Income and frequency are always applied. Categories are matched
        by name against the current registry; names no longer registered
        are dropped, and an empty match leaves the selection unchanged.

        Returns:
            True if the category selection was replaced
        """
        self.income_text = f"{preset.amount:.2f}"
        self.frequency = preset.frequency

        matched = self._app.categories.match(preset.category_distribution.keys())
        if not matched:
            logger.debug("preset_categories_unmatched", preset=preset.name)
            return False
        self._selected = matched
        return True

    def save_calculation(self) -> Optional[TitheRecord]:
        """
        Persist the current calculation.

        Returns:
            The new record, or None when income is not positive
        """
        calc = self.calculation()
        if calc.income <= 0:
            logger.debug("save_skipped_non_positive_income", income=calc.income)
            return None

        record = self._app.records.add_record(
            income=calc.income,
            frequency=calc.frequency,
            category_name=calc.category_label,
            category_percentage=calc.total_percentage,
            giving_amount=calc.giving_amount,
        )
        self._app.progress.add_contribution(calc.giving_amount, date=record.date)
        self._app.presets.update_last_giving(
            amount=calc.income,
            frequency=calc.frequency,
            categories=calc.category_names,
            category_distribution=calc.category_distribution,
        )
        return record
