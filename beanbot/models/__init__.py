"""
Data Models Package

This package contains the Pydantic models used in Beanbot.
All data flowing through the system must conform to these schemas.
"""

from beanbot.models.transaction import (
    FAILURE_BANNER,
    SUCCESS_BANNER,
    Transaction,
)
from beanbot.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction model
    "FAILURE_BANNER",
    "SUCCESS_BANNER",
    "Transaction",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
