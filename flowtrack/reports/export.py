"""
Export Formatter

Three renderers over the same DataSnapshot:
- JSON: the snapshot itself, lossless, re-importable
- Summary report: one section per calendar month
- Detailed list: one section per calendar day

All three are pure: they return a string and touch nothing else.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import ValidationError

from flowtrack.currency import DEFAULT_CURRENCY, format_amount
from flowtrack.models.transaction import DataSnapshot, TransactionType
from flowtrack.reports.aggregation import group_by_day, local_date
from flowtrack.services.storage.interface import MalformedDataError


APP_NAME = "FlowTrack"
DEFAULT_DATE_FORMAT = "%m/%d/%Y"
SEPARATOR = "-" * 40
FOOTER = f"\n--- Generated by {APP_NAME} App ---\n"


class ExportFormat(str, Enum):
    """Available export renderings."""
    JSON = "json"
    SUMMARY = "summary"
    DETAILED = "detailed"


def render_json(snapshot: DataSnapshot) -> str:
    """
    Serialize the snapshot as {"transactions": [...], "categories": [...]}.

    Amounts are written as decimal strings so nothing is lost to float.
    """
    return snapshot.model_dump_json()


def parse_snapshot(text: Union[str, bytes]) -> DataSnapshot:
    """
    Parse exported JSON back into a snapshot.

    Raises:
        MalformedDataError: If the text is not JSON or does not match
            the snapshot schema
    """
    try:
        return DataSnapshot.model_validate_json(text)
    except ValidationError as e:
        raise MalformedDataError(f"Invalid export data: {e}") from e


def _signed(amount: Decimal, currency_code: str) -> str:
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{format_amount(abs(amount), currency_code)}"


def _header(title: str, generated_on: Optional[date], date_format: str) -> str:
    generated_on = generated_on or date.today()
    return f"{APP_NAME} {title}\nGenerated on: {generated_on.strftime(date_format)}\n\n"


def render_summary_report(
    snapshot: DataSnapshot,
    currency_code: str = DEFAULT_CURRENCY,
    generated_on: Optional[date] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Monthly summary: income, expenses, net and a category breakdown.

    Months appear in chronological order. The breakdown is keyed by
    category id and type, largest amount first.
    """
    months: dict[tuple[int, int], dict] = {}

    for t in snapshot.transactions:
        day = local_date(t.date)
        month = months.setdefault(
            (day.year, day.month),
            {"income": Decimal("0"), "expenses": Decimal("0"), "categories": {}},
        )
        if t.type == TransactionType.INCOME:
            month["income"] += t.amount
        else:
            month["expenses"] += t.amount

        key = (t.category.id, t.type)
        entry = month["categories"].setdefault(
            key, {"name": t.category.name, "type": t.type, "amount": Decimal("0")}
        )
        entry["amount"] += t.amount

    report = _header("Monthly Summary Report", generated_on, date_format)

    for (year, month_number), data in sorted(months.items()):
        label = date(year, month_number, 1).strftime("%B %Y")
        net = data["income"] - data["expenses"]

        report += f"\n=== {label} ===\n"
        report += f"Total Income: {format_amount(data['income'], currency_code)}\n"
        report += f"Total Expenses: {format_amount(data['expenses'], currency_code)}\n"
        report += f"Net: {_signed(net, currency_code)}\n\n"

        report += "Category Breakdown:\n"
        breakdown = sorted(data["categories"].values(), key=lambda c: c["amount"], reverse=True)
        for entry in breakdown:
            amount = format_amount(entry["amount"], currency_code)
            report += f"{entry['name']}: {amount} ({entry['type'].value})\n"
        report += "\n"

    return report + FOOTER


def render_detailed_list(
    snapshot: DataSnapshot,
    currency_code: str = DEFAULT_CURRENCY,
    generated_on: Optional[date] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """
    Every transaction, grouped by day (newest day first).

    Within a day income comes before expenses, then larger amounts first.
    """
    history = _header("Detailed Transaction List", generated_on, date_format)

    for group in group_by_day(snapshot.transactions):
        history += f"Date: {group.date.strftime(date_format)}\n"
        history += f"{SEPARATOR}\n"

        ordered = sorted(
            group.transactions,
            key=lambda t: (t.type != TransactionType.INCOME, -t.amount),
        )
        for t in ordered:
            label = "Income" if t.type == TransactionType.INCOME else "Expense"
            history += f"{label}: {format_amount(t.amount, currency_code)}\n"
            history += f"Category: {t.category.name}\n"
            if t.notes:
                history += f"Note: {t.notes}\n"
            history += f"{SEPARATOR}\n"

        history += "\n"

    return history + FOOTER


def render(
    snapshot: DataSnapshot,
    fmt: Union[ExportFormat, str],
    currency_code: str = DEFAULT_CURRENCY,
    generated_on: Optional[date] = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """Render a snapshot in the requested export format."""
    fmt = ExportFormat(fmt)
    if fmt == ExportFormat.JSON:
        return render_json(snapshot)
    if fmt == ExportFormat.SUMMARY:
        return render_summary_report(snapshot, currency_code, generated_on, date_format)
    return render_detailed_list(snapshot, currency_code, generated_on, date_format)
