"""
Audit Logger

DESIGN DECISION: Every change to a user's ledger is logged.
This provides:
1. Traceability of every mutation
2. Debugging capability when a document had to be reset
3. A visible record of failed writes

The audit logger:
- Is async so it can sit inline in the store's async operations
- Never raises into the main flow
- Tags every event with the owning user
"""

import logging

import structlog

from cashflow.models.audit import AuditEvent, AuditSeverity


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


def configure_logging(level: str = "INFO") -> None:
    """Route structured logs to stderr at the given level."""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Writes each AuditEvent to the structured local log. Events are also
    kept in memory (bounded) so callers and tests can inspect what
    happened without parsing log output.
    """

    def __init__(self, keep_last: int = 200):
        self._logger = structlog.get_logger("cashflow.audit")
        self._keep_last = keep_last
        self._recent: list[AuditEvent] = []

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Most recent events, oldest first."""
        return list(self._recent)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be logged; never raises.
        """
        self._recent.append(event)
        if len(self._recent) > self._keep_last:
            del self._recent[0]

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
            # Log failure but don't raise
            logging.getLogger(__name__).warning(
                "audit logging failed for %s: %s", event.event_id, e
            )
            return False
        return True
