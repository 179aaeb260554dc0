"""
Audit Models for Beanbot

Every significant step of a request is logged for audit purposes.
This provides:
1. Complete traceability from chat message to ledger commit
2. Debugging information when a message fails to parse or save
3. A record of lost writes when two writers race on one ledger file

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step in the message -> ledger pipeline has its own event type.
    """
    # Inbound
    MESSAGE_RECEIVED = "message_received"

    # Parsing
    TRANSACTION_PARSED = "transaction_parsed"
    PARSE_FAILED = "parse_failed"

    # Persistence
    LEDGER_CREATED = "ledger_created"
    TRANSACTION_SAVED = "transaction_saved"
    SAVE_FAILED = "save_failed"
    CONCURRENT_MODIFICATION = "concurrent_modification"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one message)"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
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
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.message_received(text, correlation_id)
        event = AuditEventBuilder.transaction_saved(path, ledger_text, correlation_id)
    """

    @staticmethod
    def message_received(
        text: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MESSAGE_RECEIVED,
            correlation_id=correlation_id,
            description="Transaction message received",
            details={
                "text": text,
            },
        )

    @staticmethod
    def transaction_parsed(
        year: str,
        amount: str,
        currency: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_PARSED,
            correlation_id=correlation_id,
            description="Transaction parsed",
            details={
                "year": year,
                "amount": amount,
                "currency": currency,
            },
        )

    @staticmethod
    def parse_failed(
        text: str,
        error_code: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARSE_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Message could not be parsed into a transaction",
            details={
                "text": text,
            },
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def ledger_created(
        path: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_CREATED,
            correlation_id=correlation_id,
            description=f"Ledger file created: {path}",
            details={
                "path": path,
            },
        )

    @staticmethod
    def transaction_saved(
        path: str,
        ledger_text: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            correlation_id=correlation_id,
            description=f"Transaction appended to {path}",
            details={
                "path": path,
                "ledger_text": ledger_text,
            },
        )

    @staticmethod
    def save_failed(
        path: Optional[str],
        error_code: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        concurrent = error_code == "ConcurrentModification"
        return AuditEvent(
            event_type=(
                AuditEventType.CONCURRENT_MODIFICATION
                if concurrent
                else AuditEventType.SAVE_FAILED
            ),
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=(
                f"Ledger {path} changed while appending; transaction not saved"
                if concurrent
                else f"Failed to append transaction to {path}"
            ),
            details={
                "path": path,
            },
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
