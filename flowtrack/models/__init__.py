"""
Data Models Package

This package contains all Pydantic models used in FlowTrack.
All data flowing through the system must conform to these schemas.
"""

from flowtrack.models.transaction import (
    Category,
    DataSnapshot,
    Transaction,
    TransactionType,
)
from flowtrack.models.currency import (
    CurrencyDescriptor,
    SymbolPosition,
)
from flowtrack.models.report import (
    CategoryTotal,
    DailyTotal,
    DayGroup,
    Period,
    PeriodReport,
    Summary,
)
from flowtrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Category",
    "DataSnapshot",
    "Transaction",
    "TransactionType",
    # Currency models
    "CurrencyDescriptor",
    "SymbolPosition",
    # Report models
    "CategoryTotal",
    "DailyTotal",
    "DayGroup",
    "Period",
    "PeriodReport",
    "Summary",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
