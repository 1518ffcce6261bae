"""
Store Event Logger

DESIGN DECISION: Every store mutation is logged and broadcast.
This provides:
1. Traceability of what changed and when
2. A "store changed" signal the presentation layer can subscribe to
3. Visibility into silently recovered load failures

The event logger:
- Is synchronous, like the stores that call it
- Gracefully handles subscriber failures (a broken listener never
  undoes or blocks a mutation)
"""

import logging
from typing import Callable, Optional

import structlog

from tithiq.config import get_settings
from tithiq.models.events import EventSeverity, StoreEvent


def configure_logging(level: Optional[str] = None, as_json: Optional[bool] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Defaults come from AppSettings. Safe to call more than once.
    """
    settings = get_settings().app
    level = level or settings.log_level
    as_json = settings.log_json if as_json is None else as_json

    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if as_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


Subscriber = Callable[[StoreEvent], None]


class EventLogger:
    """
    Central store event service.

    Logs events to the structured local log and fans them out to
    subscribers in subscription order.
    """

    def __init__(self):
        self._subscribers: list[Subscriber] = []
        self._logger = structlog.get_logger(__name__)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for every future event.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def log(self, event: StoreEvent) -> None:
        """Log an event locally, then notify subscribers."""
        log_dict = event.to_log_dict()

        if event.severity == EventSeverity.ERROR:
            self._logger.error("store_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("store_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("store_event", **log_dict)
        else:
            self._logger.info("store_event", **log_dict)

        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "store_event_subscriber_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
