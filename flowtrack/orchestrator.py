"""
Main Orchestrator for FlowTrack

This module ties the stores, the aggregation engine and the formatters
together into the flows a UI layer calls:
1. Ledger (record / edit / delete transactions, manage categories)
2. Reports (period reports, dashboard, history, formatted amounts)
3. Settings (currency selection, export, import, clear all data)

DESIGN DECISION: Flows hold no copy of the data.
Every call re-reads the store, so a view that is re-activated always
sees what is persisted. Storage failures propagate as StorageError
subclasses; a failed mutation leaves the stored data as it was.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

import structlog

from flowtrack.audit import AuditLogger, configure_logging
from flowtrack.config import DisplaySettings, Settings, get_settings
from flowtrack.currency import format_amount
from flowtrack.models.report import DayGroup, Period, PeriodReport, Summary
from flowtrack.models.transaction import Category, DataSnapshot, Transaction, TransactionType
from flowtrack.reports import (
    ExportFormat,
    build_period_report,
    build_recent_report,
    group_by_day,
    latest_transactions,
    render,
    search_transactions,
)
from flowtrack.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
)
from flowtrack.services.stores import (
    CategoryStore,
    CurrencyPreferenceStore,
    DataTransferService,
    TransactionStore,
)


logger = structlog.get_logger(__name__)


class CategoryMismatchError(ValueError):
    """The transaction's type differs from its category's type."""
    pass


class LedgerFlow:
    """
    Orchestrates changes to transactions and categories.

    The category handed to record_transaction is embedded as a snapshot;
    later edits to the category do not reach existing transactions.
    """

    def __init__(
        self,
        transactions: TransactionStore,
        categories: CategoryStore,
    ):
        self._transactions = transactions
        self._categories = categories

    @staticmethod
    def _check_category(transaction: Transaction) -> None:
        if transaction.category.type != transaction.type:
            raise CategoryMismatchError(
                f"Category '{transaction.category.name}' is a "
                f"{transaction.category.type.value} category, "
                f"cannot be used for a {transaction.type.value}"
            )

    async def record_transaction(
        self,
        kind: Union[TransactionType, str],
        amount: Union[Decimal, int, float, str],
        category: Category,
        when: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> Transaction:
        """
        Record a new transaction.

        Args:
            kind: expense or income
            amount: Non-negative amount
            category: Category to embed (its type must match `kind`)
            when: Timestamp, defaults to now
            notes: Optional free text

        Returns:
            The saved Transaction with its new id

        Raises:
            CategoryMismatchError: If the category type differs from kind
            pydantic.ValidationError: If the amount or other fields are invalid
        """
        transaction = Transaction(
            type=kind,
            amount=amount,
            category=category.model_copy(),
            date=when or datetime.now().astimezone(),
            notes=notes,
        )
        self._check_category(transaction)
        return await self._transactions.save(transaction)

    async def edit_transaction(self, transaction: Transaction) -> Transaction:
        """
        Replace a stored transaction.

        Raises:
            CategoryMismatchError: If the category type differs from the type
            NotFoundError: If the transaction does not exist
        """
        self._check_category(transaction)
        return await self._transactions.update(transaction)

    async def delete_transaction(self, transaction_id: str) -> bool:
        return await self._transactions.delete(transaction_id)

    async def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return await self._transactions.get(transaction_id)

    async def list_categories(
        self,
        kind: Optional[Union[TransactionType, str]] = None,
    ) -> list[Category]:
        """All categories, or one type with "Other" last."""
        if kind is None:
            return await self._categories.list()
        return await self._categories.list_by_type(TransactionType(kind))

    async def add_category(
        self,
        name: str,
        icon: str,
        color: str,
        kind: Union[TransactionType, str],
    ) -> Category:
        category = Category(name=name, icon=icon, color=color, type=kind)
        return await self._categories.save(category)

    async def edit_category(self, category: Category) -> Category:
        """
        Replace a stored category.

        Raises:
            NotFoundError: If the category does not exist
        """
        return await self._categories.update(category)

    async def delete_category(self, category_id: str) -> bool:
        """
        Delete a category.

        Transactions that embed it keep their snapshot.
        """
        return await self._categories.delete(category_id)


class ReportFlow:
    """
    Orchestrates read-only views: reports, dashboard and history.

    Amounts stay Decimal in the returned models; use format() for text
    in the user's currency.
    """

    def __init__(
        self,
        transactions: TransactionStore,
        preferences: CurrencyPreferenceStore,
        display: Optional[DisplaySettings] = None,
    ):
        self._transactions = transactions
        self._preferences = preferences
        self._display = display or DisplaySettings()

    async def period_report(
        self,
        period: Union[Period, str] = Period.MONTH,
        now: Optional[datetime] = None,
    ) -> PeriodReport:
        transactions = await self._transactions.list()
        report = build_period_report(transactions, period, now)
        logger.debug(
            "period_report_built",
            period=report.period.value,
            transactions=len(report.transactions),
        )
        return report

    async def dashboard(self, now: Optional[datetime] = None) -> PeriodReport:
        """The last few days (dashboard_window_days) including today."""
        transactions = await self._transactions.list()
        return build_recent_report(transactions, self._display.dashboard_window_days, now)

    async def recent(self, limit: int = 5) -> list[Transaction]:
        """The newest transactions across all time, for the dashboard list."""
        return latest_transactions(await self._transactions.list(), limit)

    async def history(
        self,
        query: Optional[str] = None,
        kind: Optional[Union[TransactionType, str]] = None,
    ) -> list[DayGroup]:
        """Searched transactions grouped by day, newest first."""
        transactions = await self._transactions.list()
        return group_by_day(search_transactions(transactions, query, kind))

    async def format(self, amount) -> str:
        """An amount in the user's selected currency."""
        return format_amount(amount, await self._preferences.get())

    async def format_summary(self, summary: Summary) -> dict[str, str]:
        """Display strings for a summary card."""
        code = await self._preferences.get()
        return {
            "total_income": format_amount(summary.total_income, code),
            "total_expense": format_amount(summary.total_expense, code),
            "balance": format_amount(summary.balance, code),
        }


class SettingsFlow:
    """
    Orchestrates the settings actions: currency, export, import, wipe.
    """

    def __init__(
        self,
        preferences: CurrencyPreferenceStore,
        data_transfer: DataTransferService,
        display: Optional[DisplaySettings] = None,
    ):
        self._preferences = preferences
        self._data = data_transfer
        self._display = display or DisplaySettings()

    async def get_currency(self) -> str:
        return await self._preferences.get()

    async def set_currency(self, currency_code: str) -> str:
        return await self._preferences.set(currency_code)

    async def export(
        self,
        fmt: Union[ExportFormat, str] = ExportFormat.JSON,
        generated_on: Optional[date] = None,
    ) -> str:
        """Render all data in one of the export formats."""
        fmt = ExportFormat(fmt)
        if fmt == ExportFormat.JSON:
            return await self._data.export_json()

        snapshot = await self._data.export_snapshot()
        return render(
            snapshot,
            fmt,
            currency_code=await self._preferences.get(),
            generated_on=generated_on,
            date_format=self._display.date_format,
        )

    async def import_data(self, text: str) -> DataSnapshot:
        return await self._data.import_json(text)

    async def clear_all_data(self) -> None:
        await self._data.clear_all()


def create_storage(settings: Settings) -> KeyValueStoreInterface:
    """Build the key-value backend named in the storage settings."""
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(storage.path)


def create_app_components(
    settings: Optional[Settings] = None,
    kv: Optional[KeyValueStoreInterface] = None,
    setup_logging: bool = True,
) -> tuple[LedgerFlow, ReportFlow, SettingsFlow]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use, defaults to get_settings()
        kv: Key-value backend to use instead of the configured one
            (tests pass an InMemoryKeyValueStore)
        setup_logging: Configure structlog from the app settings

    Returns:
        (ledger_flow, report_flow, settings_flow)
    """
    settings = settings or get_settings()
    if setup_logging:
        configure_logging(settings.app)

    storage = settings.storage
    display = settings.display
    kv = kv or create_storage(settings)
    audit_logger = AuditLogger()

    transactions = TransactionStore(kv, storage.transactions_key, audit_logger)
    categories = CategoryStore(kv, storage.categories_key, audit_logger)
    preferences = CurrencyPreferenceStore(
        kv,
        storage.currency_key,
        default_currency=display.default_currency,
        audit_logger=audit_logger,
    )
    data_transfer = DataTransferService(transactions, categories, audit_logger)

    ledger_flow = LedgerFlow(transactions, categories)
    report_flow = ReportFlow(transactions, preferences, display)
    settings_flow = SettingsFlow(preferences, data_transfer, display)

    logger.info(
        "app_components_created",
        environment=settings.app.app_environment,
        backend=type(kv).__name__,
        default_currency=display.default_currency,
    )
    return ledger_flow, report_flow, settings_flow
