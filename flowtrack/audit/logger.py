"""
Audit Logger

DESIGN DECISION: Every change to the user's data is logged.
This provides:
1. Traceability of what was recorded, edited and removed
2. Debugging capability when the store fails
3. A record of imports and data wipes

The audit logger:
- Is async so stores can await it inline
- Never raises; a broken log must not break a save
"""

import logging
import sys
from typing import Optional

import structlog

from flowtrack.config import AppSettings
from flowtrack.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """
    Configure structlog on top of the stdlib logging module.

    JSON lines by default; set LOG_JSON=false for a human-readable
    console renderer while developing.
    """
    settings = settings or AppSettings()
    level = logging.DEBUG if settings.debug_mode else getattr(logging, settings.log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger().setLevel(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
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


class AuditLogger:
    """
    Central audit logging service.

    Writes each event to the structured log at the event's severity.
    """

    def __init__(self):
        self._logger = structlog.get_logger("flowtrack.audit")

    async def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Logging must never break the caller's operation
            print(f"WARNING: Failed to write audit event {event.event_id}: {e}", file=sys.stderr)

    async def log_storage_error(
        self,
        operation: str,
        key: str,
        error_message: str,
    ) -> None:
        """Log a failed read or write against the key-value store."""
        await self.log(AuditEventBuilder.storage_error(operation, key, error_message))
