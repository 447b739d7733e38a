"""
Core Data Models for FlowTrack

These models define the schemas for everything persisted in the store:
transactions, categories and the export snapshot that bundles both.

DESIGN DECISION: Amounts are Decimal, never float.
Summing thousands of small float amounts drifts; Decimal does not.
Floats coming from old JSON data are converted through their shortest
repr, so 45.5 becomes Decimal("45.5") and not the binary expansion.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


class TransactionType(str, Enum):
    """
    Direction of a transaction.

    Amounts are always stored positive; the type carries the sign.
    """
    EXPENSE = "expense"
    INCOME = "income"


class Category(BaseModel):
    """
    A category used to classify transactions.

    Category ids are unique across both types. The id is assigned by
    the category store on save when it is empty.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = Field(
        default=None,
        description="Unique category ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display label"
    )
    icon: str = Field(
        ...,
        min_length=1,
        description="Icon key in the UI icon set"
    )
    color: str = Field(
        ...,
        min_length=1,
        description="Color as a hex string, e.g. #FF9800"
    )
    type: TransactionType = Field(
        ...,
        description="Whether this category classifies expenses or income"
    )


class Transaction(BaseModel):
    """
    A single recorded income or expense event.

    The category is an embedded snapshot taken when the transaction is
    saved. Renaming the category later does not touch old transactions
    unless they are saved again.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = Field(
        default=None,
        description="Unique transaction ID (assigned on save)"
    )
    type: TransactionType = Field(
        ...,
        description="Expense or income"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount in the user's currency"
    )
    category: Category = Field(
        ...,
        description="Snapshot of the category at save time"
    )
    date: datetime = Field(
        ...,
        description="When the transaction happened (ISO-8601)"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-text notes"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v):
        """Reject booleans and convert floats through their repr."""
        if isinstance(v, bool):
            raise ValueError("Amount must be a number, not a boolean")
        if isinstance(v, float):
            return Decimal(repr(v))
        return v

    @field_validator('date', mode='before')
    @classmethod
    def parse_timestamp(cls, v):
        """
        Accept ISO-8601 strings with a trailing Z and bare dates.

        A bare date means local midnight.
        """
        if isinstance(v, str):
            text = v.strip()
            if text[-1:] in ("Z", "z"):
                text = text[:-1] + "+00:00"
            try:
                v = datetime.fromisoformat(text)
            except ValueError:
                raise ValueError(f"Invalid ISO-8601 timestamp: {v!r}")
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v

    @field_validator('notes')
    @classmethod
    def empty_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the type."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount


class DataSnapshot(BaseModel):
    """
    Everything the user owns, in one object.

    This is the unit of export and import. Use model_fields_set to tell
    an absent key from an empty list.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
