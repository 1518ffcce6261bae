"""
Shared pytest fixtures for Tithiq tests.

Everything runs against in-memory storage and a fixed clock.
"""

from datetime import datetime
from typing import Optional

import pytest

from tithiq.audit import EventLogger
from tithiq.models.giving import Frequency, TitheRecord
from tithiq.orchestrator import create_app_components
from tithiq.services.storage import InMemoryKeyValueStorage, StorageWriteError


class FixedClock:
    """Callable returning a settable 'now'."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class StaticRecords:
    """Minimal record source for the aggregation engine."""

    def __init__(self, records):
        self.records = tuple(records)


class FailingStorage(InMemoryKeyValueStorage):
    """Reads work, every write fails."""

    def set(self, key: str, value: bytes) -> None:
        raise StorageWriteError(f"disk full while writing {key}")


def make_record(
    date: datetime,
    amount: float,
    category: str = "Tithe",
    percentage: float = 10.0,
    frequency: Frequency = Frequency.MONTHLY,
    income: Optional[float] = None,
) -> TitheRecord:
    if income is None:
        income = amount * 100 / percentage if percentage else 0.0
    return TitheRecord(
        date=date,
        income=income,
        frequency=frequency,
        category_name=category,
        category_percentage=percentage,
        giving_amount=amount,
    )


@pytest.fixture
def clock():
    # Sunday, 15 June 2025, noon
    return FixedClock(datetime(2025, 6, 15, 12, 0))


@pytest.fixture
def storage():
    return InMemoryKeyValueStorage()


@pytest.fixture
def events():
    return EventLogger()


@pytest.fixture
def captured(events):
    """Every event logged through the `events` fixture."""
    received = []
    events.subscribe(received.append)
    return received


@pytest.fixture
def app(storage, clock, events):
    return create_app_components(storage=storage, clock=clock, events=events)
