"""Store event logging package."""

from tithiq.audit.logger import EventLogger, configure_logging

__all__ = ["EventLogger", "configure_logging"]
