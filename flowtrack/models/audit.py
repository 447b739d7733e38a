"""
Audit Models for FlowTrack

Every change to the user's data produces an audit event.
This provides:
1. A readable history of what was recorded, edited and removed
2. Debugging information when storage fails
3. A trail for imports and "clear all data"

DESIGN DECISION: Events are logged, never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every store mutation has its own event type.
    """
    # Transactions
    TRANSACTION_SAVED = "transaction_saved"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Categories
    CATEGORY_SAVED = "category_saved"
    CATEGORY_UPDATED = "category_updated"
    CATEGORY_DELETED = "category_deleted"
    CATEGORIES_SEEDED = "categories_seeded"

    # Preferences
    CURRENCY_CHANGED = "currency_changed"

    # Data transfer
    DATA_EXPORTED = "data_exported"
    DATA_IMPORTED = "data_imported"
    DATA_CLEARED = "data_cleared"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
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

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'category')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
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
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_saved(t.id, t.type.value, str(t.amount))
        event = AuditEventBuilder.storage_error("write", key, str(e))
    """

    @staticmethod
    def transaction_saved(transaction_id: str, kind: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction saved: {kind} {amount}",
            details={"type": kind, "amount": amount},
        )

    @staticmethod
    def transaction_updated(transaction_id: str, kind: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction updated: {kind} {amount}",
            details={"type": kind, "amount": amount},
        )

    @staticmethod
    def transaction_deleted(transaction_id: str, existed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted" if existed else "Delete of unknown transaction ignored",
            severity=AuditSeverity.INFO if existed else AuditSeverity.DEBUG,
            details={"existed": existed},
        )

    @staticmethod
    def category_saved(category_id: str, name: str, kind: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_SAVED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category saved: {name} ({kind})",
            details={"name": name, "type": kind},
        )

    @staticmethod
    def category_updated(category_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_UPDATED,
            entity_type="category",
            entity_id=category_id,
            description=f"Category updated: {name}",
            details={"name": name},
        )

    @staticmethod
    def category_deleted(category_id: str, existed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_DELETED,
            entity_type="category",
            entity_id=category_id,
            description="Category deleted" if existed else "Delete of unknown category ignored",
            severity=AuditSeverity.INFO if existed else AuditSeverity.DEBUG,
            details={"existed": existed},
        )

    @staticmethod
    def categories_seeded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORIES_SEEDED,
            entity_type="category",
            description=f"Seeded {count} default categories",
            details={"count": count},
        )

    @staticmethod
    def currency_changed(old_code: str, new_code: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CURRENCY_CHANGED,
            entity_type="preference",
            entity_id="currency",
            description=f"Currency changed from {old_code} to {new_code}",
            details={"from": old_code, "to": new_code},
        )

    @staticmethod
    def data_exported(transaction_count: int, category_count: int, fmt: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_EXPORTED,
            description=f"Data exported as {fmt}",
            details={
                "format": fmt,
                "transactions": transaction_count,
                "categories": category_count,
            },
        )

    @staticmethod
    def data_imported(transaction_count: Optional[int], category_count: Optional[int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_IMPORTED,
            severity=AuditSeverity.WARNING,
            description="Data imported, existing records replaced",
            details={
                "transactions": transaction_count,
                "categories": category_count,
            },
        )

    @staticmethod
    def data_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            description="All transactions and categories cleared",
        )

    @staticmethod
    def storage_error(operation: str, key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage {operation} failed for {key}",
            error_message=error_message,
            details={"operation": operation, "key": key},
        )
