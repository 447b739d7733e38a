"""Currency reference data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SymbolPosition(str, Enum):
    """Where the currency symbol goes relative to the number."""
    BEFORE = "before"
    AFTER = "after"


class CurrencyDescriptor(BaseModel):
    """
    Static formatting rules for one currency.

    Not persisted; only the selected code is stored.
    """
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=3, max_length=3)
    symbol: str = Field(..., min_length=1)
    name: str
    position: SymbolPosition = SymbolPosition.BEFORE
    decimal_places: int = Field(default=2, ge=0, le=4)
    decimal_separator: str = Field(default=".", min_length=1, max_length=1)
    thousands_separator: str = Field(default=",", max_length=1)
