"""
Aggregation Engine

DESIGN DECISION: Aggregation is DETERMINISTIC and pure.
Every function takes a transaction list and returns view-ready models.
Nothing here reads storage, and nothing here raises on empty input:
an empty list gives zero totals and empty breakdowns.

Dates are bucketed by LOCAL calendar day. Timezone-aware timestamps are
converted to local time first; naive timestamps are taken as local.
All sums are Decimal.
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Union

from flowtrack.models.report import (
    CategoryTotal,
    DailyTotal,
    DayGroup,
    Period,
    PeriodReport,
    Summary,
)
from flowtrack.models.transaction import Transaction, TransactionType


ZERO = Decimal("0")

DateLike = Union[date, datetime]


# =============================================================================
# TIME HELPERS
# =============================================================================

def to_local(moment: datetime) -> datetime:
    """Naive local datetime, comparable with any other value from here."""
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def local_date(moment: DateLike) -> date:
    """Local calendar date of a timestamp (a plain date is returned as is)."""
    if isinstance(moment, datetime):
        return to_local(moment).date()
    return moment


def _range_start(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return to_local(value)
    return datetime.combine(value, time.min)


def _range_end(value: DateLike) -> datetime:
    # A bare end date includes that whole day
    if isinstance(value, datetime):
        return to_local(value)
    return datetime.combine(value, time.max)


def _now(now: Optional[datetime]) -> datetime:
    return to_local(now) if now is not None else datetime.now()


def period_start(period: Union[Period, str], now: Optional[datetime] = None) -> datetime:
    """
    Start of a reporting period ending at `now`.

    week  -> exactly 7 days before now
    month -> the 1st of the current month, 00:00
    year  -> January 1st of the current year, 00:00
    all   -> the Unix epoch
    """
    period = Period(period)
    now = _now(now)

    if period == Period.WEEK:
        return now - timedelta(days=7)
    if period == Period.MONTH:
        return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if period == Period.YEAR:
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return datetime.fromtimestamp(0)


# =============================================================================
# FILTERS
# =============================================================================

def filter_by_range(
    transactions: Iterable[Transaction],
    start: DateLike,
    end: DateLike,
) -> list[Transaction]:
    """Transactions with start <= date <= end (both bounds inclusive)."""
    lower = _range_start(start)
    upper = _range_end(end)
    return [t for t in transactions if lower <= to_local(t.date) <= upper]


def filter_by_period(
    transactions: Iterable[Transaction],
    period: Union[Period, str],
    now: Optional[datetime] = None,
) -> list[Transaction]:
    """Transactions inside [period_start(period), now]."""
    now = _now(now)
    return filter_by_range(transactions, period_start(period, now), now)


def filter_by_type(
    transactions: Iterable[Transaction],
    kind: Union[TransactionType, str],
) -> list[Transaction]:
    kind = TransactionType(kind)
    return [t for t in transactions if t.type == kind]


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    return sorted(transactions, key=lambda t: to_local(t.date), reverse=True)


def latest_transactions(
    transactions: Iterable[Transaction],
    limit: int = 5,
) -> list[Transaction]:
    """The `limit` newest transactions across all time."""
    return sort_newest_first(transactions)[:limit]


def search_transactions(
    transactions: Iterable[Transaction],
    query: Optional[str] = None,
    kind: Optional[Union[TransactionType, str]] = None,
) -> list[Transaction]:
    """
    Filter by type and free text, newest first.

    The text is matched case-insensitively against the category name
    and the notes.
    """
    results = list(transactions)

    if kind is not None and kind != "all":
        results = filter_by_type(results, kind)

    needle = (query or "").strip().lower()
    if needle:
        results = [
            t for t in results
            if needle in t.category.name.lower()
            or (t.notes and needle in t.notes.lower())
        ]

    return sort_newest_first(results)


# =============================================================================
# AGGREGATIONS
# =============================================================================

def totals_by_category(
    transactions: Iterable[Transaction],
    kind: Union[TransactionType, str],
) -> list[CategoryTotal]:
    """
    Sum amounts per category id for one transaction type.

    Sorted by amount, largest first. Equal amounts keep the order in
    which their categories first appeared. Name and color come from the
    first transaction seen for each category.
    """
    kind = TransactionType(kind)
    groups: dict[Optional[str], list] = {}

    for t in transactions:
        if t.type != kind:
            continue
        key = t.category.id
        if key not in groups:
            groups[key] = [t.category, ZERO]
        groups[key][1] += t.amount

    totals = [
        CategoryTotal(
            category_id=category.id,
            name=category.name,
            color=category.color,
            amount=amount,
        )
        for category, amount in groups.values()
    ]
    # sorted() is stable, including with reverse=True
    return sorted(totals, key=lambda c: c.amount, reverse=True)


def daily_series(
    transactions: Iterable[Transaction],
    start: DateLike,
    end: DateLike,
) -> list[DailyTotal]:
    """
    One entry per calendar day from start to end, inclusive.

    Days without transactions are present with zero totals. An end
    before the start gives an empty series. Datetime bounds are exact:
    a transaction on the first day but before `start` is not counted.
    """
    first = local_date(start)
    last = local_date(end)
    if last < first:
        return []

    buckets: dict[date, list[Decimal]] = {
        first + timedelta(days=offset): [ZERO, ZERO]
        for offset in range((last - first).days + 1)
    }

    for t in filter_by_range(transactions, start, end):
        bucket = buckets[local_date(t.date)]
        if t.type == TransactionType.EXPENSE:
            bucket[0] += t.amount
        else:
            bucket[1] += t.amount

    return [
        DailyTotal(date=day, expense_total=expense, income_total=income)
        for day, (expense, income) in buckets.items()
    ]


def summary(transactions: Iterable[Transaction]) -> Summary:
    """Total income, total expense and balance (income - expense)."""
    income = ZERO
    expense = ZERO
    for t in transactions:
        if t.type == TransactionType.INCOME:
            income += t.amount
        else:
            expense += t.amount
    return Summary(total_income=income, total_expense=expense, balance=income - expense)


def group_by_day(transactions: Iterable[Transaction]) -> list[DayGroup]:
    """
    Group transactions by local calendar day, newest day first.

    Within a day the input order is kept.
    """
    groups: dict[date, list[Transaction]] = {}
    for t in transactions:
        groups.setdefault(local_date(t.date), []).append(t)
    return [
        DayGroup(date=day, transactions=items)
        for day, items in sorted(groups.items(), key=lambda item: item[0], reverse=True)
    ]


# =============================================================================
# VIEW REPORTS
# =============================================================================

def _build_report(
    transactions: list[Transaction],
    start: datetime,
    end: datetime,
    period: Optional[Period],
    with_daily: bool,
) -> PeriodReport:
    window = filter_by_range(transactions, start, end)
    return PeriodReport(
        period=period,
        start=start,
        end=end,
        transactions=window,
        expenses_by_category=totals_by_category(window, TransactionType.EXPENSE),
        income_by_category=totals_by_category(window, TransactionType.INCOME),
        daily=daily_series(window, start, end) if with_daily else [],
        summary=summary(window),
    )


def build_period_report(
    transactions: Iterable[Transaction],
    period: Union[Period, str],
    now: Optional[datetime] = None,
) -> PeriodReport:
    """
    Category breakdowns, summary and (for week/month) a daily series
    for one reporting period ending now.
    """
    period = Period(period)
    now = _now(now)
    start = period_start(period, now)
    return _build_report(
        list(transactions),
        start,
        now,
        period,
        with_daily=period in (Period.WEEK, Period.MONTH),
    )


def build_recent_report(
    transactions: Iterable[Transaction],
    days: int = 7,
    now: Optional[datetime] = None,
) -> PeriodReport:
    """
    Dashboard view: the last `days` calendar days including today.

    The window starts at midnight so the totals and the daily series
    cover exactly the same days.
    """
    if days < 1:
        raise ValueError("days must be at least 1")
    now = _now(now)
    start = datetime.combine(now.date() - timedelta(days=days - 1), time.min)
    return _build_report(list(transactions), start, now, None, with_daily=True)
