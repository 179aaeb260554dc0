"""
Audit Logger

DESIGN DECISION: Every significant step of a request is logged.
This provides:
1. Complete traceability from chat message to ledger commit
2. Debugging capability
3. A visible record of writes lost to concurrent modification

The audit logger:
- Writes structured JSON lines through structlog
- Supports correlation IDs to trace related events
- Never raises into the caller; a failed audit record is itself logged
"""

import logging
import sys
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog

from beanbot.models.audit import AuditEvent, AuditEventBuilder


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
    """Route structlog output to stderr at ``level``."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    One structured log record per AuditEvent, at a level matching the
    event severity.
    """

    def __init__(self, logger_name: str = "beanbot.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def _record(self, build: Callable[..., AuditEvent], **fields) -> None:
        """Build an event and log it. Failures are reported, not raised."""
        try:
            self.log(build(**fields))
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_event_failed",
                builder=build.__name__,
                error=str(e),
                correlation_id=str(fields.get("correlation_id")),
            )

    def log_message_received(self, text: str, correlation_id: UUID) -> None:
        self._record(AuditEventBuilder.message_received, text=text, correlation_id=correlation_id)

    def log_transaction_parsed(
        self,
        year: str,
        amount: str,
        currency: str,
        correlation_id: UUID,
    ) -> None:
        """Log a successful parse."""
        self._record(
            AuditEventBuilder.transaction_parsed,
            year=year,
            amount=amount,
            currency=currency,
            correlation_id=correlation_id,
        )

    def log_parse_failed(
        self,
        text: str,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a message that could not be parsed."""
        self._record(
            AuditEventBuilder.parse_failed,
            text=text,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_ledger_created(
        self,
        path: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._record(AuditEventBuilder.ledger_created, path=path, correlation_id=correlation_id)

    def log_transaction_saved(
        self,
        path: str,
        ledger_text: str,
        correlation_id: UUID,
    ) -> None:
        """Log a transaction appended to its ledger."""
        self._record(
            AuditEventBuilder.transaction_saved,
            path=path,
            ledger_text=ledger_text,
            correlation_id=correlation_id,
        )

    def log_store_failed(
        self,
        path: Optional[str],
        error_code: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a failed append, including lost concurrent writes."""
        self._record(
            AuditEventBuilder.save_failed,
            path=path,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an unexpected error."""
        self._record(
            AuditEventBuilder.system_error,
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new request (e.g., one chat message).
    Pass it through all subsequent operations.
    """
    return uuid4()
