"""
Report Models

View-ready structures produced by the aggregation engine.
They hold Decimal amounts; turning them into display strings is the
currency formatter's job.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from flowtrack.models.transaction import Transaction


class Period(str, Enum):
    """
    Relative reporting window ending now.

    WEEK  - the last 7 days (rolling)
    MONTH - since the first of the current month
    YEAR  - since January 1st of the current year
    ALL   - since the Unix epoch
    """
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class CategoryTotal(BaseModel):
    """Sum of amounts for one category."""

    category_id: Optional[str]
    name: str
    color: str
    amount: Decimal = Field(default=Decimal("0"), ge=0)


class DailyTotal(BaseModel):
    """Expense and income totals for one calendar day."""

    date: dt.date
    expense_total: Decimal = Field(default=Decimal("0"), ge=0)
    income_total: Decimal = Field(default=Decimal("0"), ge=0)


class Summary(BaseModel):
    """Income, expense and balance over a list of transactions."""

    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class DayGroup(BaseModel):
    """Transactions that fall on the same calendar day."""

    date: dt.date
    transactions: list[Transaction] = Field(default_factory=list)


class PeriodReport(BaseModel):
    """
    Everything a reports view needs for one period.

    daily is only filled for short periods (week, month); a daily
    series over a year or all time is not useful to chart. period is
    None for a fixed window such as the dashboard's last N days.
    """

    period: Optional[Period] = None
    start: dt.datetime
    end: dt.datetime
    transactions: list[Transaction] = Field(default_factory=list)
    expenses_by_category: list[CategoryTotal] = Field(default_factory=list)
    income_by_category: list[CategoryTotal] = Field(default_factory=list)
    daily: list[DailyTotal] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)

    @property
    def has_data(self) -> bool:
        return len(self.transactions) > 0
