"""
Audit Logger

Every load, save, export and import goes through here, so a corrupted
document or a rejected backup always leaves a trace in the local log
even when the user only sees a short message.

The audit logger never raises: a logging problem must not turn a
successful save into a failed one.
"""

from collections import deque
from typing import Optional

import structlog

from notebk.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """Writes audit events to the structured local log."""

    def __init__(self, logger_name: str = "notebk.audit", history_size: int = 200):
        self._logger = structlog.get_logger(logger_name)
        self._events: deque[AuditEvent] = deque(maxlen=history_size)

    @property
    def events(self) -> list[AuditEvent]:
        """Most recent events logged by this instance, oldest first."""
        return list(self._events)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        self._events.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Last resort: never let logging break the caller
            structlog.get_logger("notebk").error("audit_log_failed", error=str(e))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an unexpected error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
