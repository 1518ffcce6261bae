"""
Store Event Models for Tithiq

Every mutation of a store produces an event. Events are:
1. Written to the structured local log
2. Delivered to subscribers (the presentation layer re-reads the store)

DESIGN DECISION: Stores do not expose observable state. A subscriber
is told WHAT changed and re-queries; the analytics stay notification-free.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class StoreEventType(str, Enum):
    """
    Types of store changes.
    """
    # Categories
    CATEGORIES_REPLACED = "categories_replaced"
    CATEGORIES_RESET = "categories_reset"

    # History
    RECORD_ADDED = "record_added"
    RECORDS_EVICTED = "records_evicted"
    RECORDS_DELETED = "records_deleted"
    RECORDS_CLEARED = "records_cleared"

    # Goals
    GOALS_UPDATED = "goals_updated"

    # Presets
    PRESET_ADDED = "preset_added"
    PRESET_REMOVED = "preset_removed"
    LAST_GIVING_UPDATED = "last_giving_updated"

    # Reminders
    REMINDERS_UPDATED = "reminders_updated"

    # Progress
    CONTRIBUTION_ADDED = "contribution_added"
    PROGRESS_CLEARED = "progress_cleared"

    # Persistence
    DEFAULTS_SEEDED = "defaults_seeded"
    LOAD_FAILED = "load_failed"
    SAVE_FAILED = "save_failed"


class EventSeverity(str, Enum):
    """Severity level for store events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class StoreEvent(BaseModel):
    """
    A single store change.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred"
    )

    # Classification
    event_type: StoreEventType
    severity: EventSeverity = EventSeverity.INFO

    # Which store, under which persistence key
    store: str = Field(
        ...,
        description="Persistence key of the store that changed"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the item this event is about, if any"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "store": self.store,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class StoreEventBuilder:
    """
    Helper class to build store events with common patterns.

    Usage:
        event = StoreEventBuilder.record_added(store, record_id, amount)
        event = StoreEventBuilder.load_failed(store, error)
    """

    @staticmethod
    def categories_replaced(store: str, names: list[str]) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CATEGORIES_REPLACED,
            store=store,
            description=f"Categories replaced ({len(names)} categories)",
            details={"names": names},
        )

    @staticmethod
    def categories_reset(store: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CATEGORIES_RESET,
            store=store,
            description="Categories reset to defaults",
        )

    @staticmethod
    def record_added(store: str, record_id: UUID, amount: float) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.RECORD_ADDED,
            store=store,
            entity_id=record_id,
            description=f"Giving record saved: ${amount:.2f}",
            details={"giving_amount": amount},
        )

    @staticmethod
    def records_evicted(store: str, count: int, limit: int) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.RECORDS_EVICTED,
            store=store,
            description=f"Evicted {count} oldest record(s) to stay within {limit}",
            details={"evicted": count, "limit": limit},
        )

    @staticmethod
    def records_deleted(store: str, record_ids: list[UUID]) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.RECORDS_DELETED,
            store=store,
            description=f"Deleted {len(record_ids)} record(s)",
            details={"record_ids": [str(r) for r in record_ids]},
        )

    @staticmethod
    def records_cleared(store: str, count: int) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.RECORDS_CLEARED,
            store=store,
            description="All giving records cleared",
            details={"cleared": count},
        )

    @staticmethod
    def goals_updated(store: str, monthly: float, yearly: float) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.GOALS_UPDATED,
            store=store,
            description="Giving goals updated",
            details={"monthly_target": monthly, "yearly_target": yearly},
        )

    @staticmethod
    def preset_added(store: str, preset_id: UUID, name: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.PRESET_ADDED,
            store=store,
            entity_id=preset_id,
            description=f"Preset added: {name}",
        )

    @staticmethod
    def preset_removed(store: str, preset_id: UUID, name: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.PRESET_REMOVED,
            store=store,
            entity_id=preset_id,
            description=f"Preset removed: {name}",
        )

    @staticmethod
    def last_giving_updated(store: str, preset_id: UUID, amount: float) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.LAST_GIVING_UPDATED,
            store=store,
            entity_id=preset_id,
            description="Last giving captured",
            details={"amount": amount},
        )

    @staticmethod
    def reminders_updated(store: str, enabled: bool, frequency: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.REMINDERS_UPDATED,
            store=store,
            description="Reminder preferences updated",
            details={"is_enabled": enabled, "frequency": frequency},
        )

    @staticmethod
    def contribution_added(store: str, entry_id: UUID, amount: float) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.CONTRIBUTION_ADDED,
            store=store,
            entity_id=entry_id,
            description=f"Contribution tracked: ${amount:.2f}",
            details={"amount": amount},
        )

    @staticmethod
    def progress_cleared(store: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.PROGRESS_CLEARED,
            store=store,
            description="Yearly progress cleared",
        )

    @staticmethod
    def defaults_seeded(store: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.DEFAULTS_SEEDED,
            store=store,
            description="No saved value, defaults seeded",
        )

    @staticmethod
    def load_failed(store: str, error_message: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.LOAD_FAILED,
            severity=EventSeverity.WARNING,
            store=store,
            description="Saved value could not be decoded, defaults substituted",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(store: str, error_message: str) -> StoreEvent:
        return StoreEvent(
            event_type=StoreEventType.SAVE_FAILED,
            severity=EventSeverity.ERROR,
            store=store,
            description="Store could not be persisted",
            error_message=error_message,
        )
