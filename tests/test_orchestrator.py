"""
Tests for the orchestrator flows wired by create_app_components.
"""

import json
import pytest
from datetime import datetime
from decimal import Decimal
from structlog.testing import capture_logs

from flowtrack.config import Settings
from flowtrack.models.report import Period, Summary
from flowtrack.models.transaction import Category, TransactionType
from flowtrack.orchestrator import (
    CategoryMismatchError,
    LedgerFlow,
    ReportFlow,
    SettingsFlow,
    create_app_components,
    create_storage,
)
from flowtrack.reports import ExportFormat
from flowtrack.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    NotFoundError,
)


NOW = datetime(2024, 1, 20, 18, 0)


@pytest.fixture
def app(kv):
    return create_app_components(Settings(), kv=kv, setup_logging=False)


@pytest.fixture
def ledger_flow(app) -> LedgerFlow:
    return app[0]


@pytest.fixture
def report_flow(app) -> ReportFlow:
    return app[1]


@pytest.fixture
def settings_flow(app) -> SettingsFlow:
    return app[2]


class TestLedgerFlow:
    """Tests for recording and managing transactions and categories."""

    @pytest.mark.asyncio
    async def test_first_run_scenario(self, ledger_flow, report_flow):
        """Seed, add a category, record an expense, read the report."""
        assert len(await ledger_flow.list_categories()) == 13

        food = await ledger_flow.add_category("Food", "food", "#FF9800", "expense")
        saved = await ledger_flow.record_transaction(
            TransactionType.EXPENSE, 45.5, food, when=datetime(2024, 1, 15)
        )
        assert saved.id
        assert saved.amount == Decimal("45.5")

        report = await report_flow.period_report(Period.ALL, now=NOW)
        assert [(c.category_id, c.name, c.amount) for c in report.expenses_by_category] == [
            (food.id, "Food", Decimal("45.5"))
        ]
        assert report.summary == Summary(
            total_income=Decimal("0"),
            total_expense=Decimal("45.5"),
            balance=Decimal("-45.5"),
        )

    @pytest.mark.asyncio
    async def test_category_type_must_match(self, ledger_flow, food):
        with pytest.raises(CategoryMismatchError):
            await ledger_flow.record_transaction("income", 100, food, when=NOW)
        assert await ledger_flow._transactions.list() == []

    @pytest.mark.asyncio
    async def test_invalid_amount_rejected(self, ledger_flow, food):
        with pytest.raises(ValueError):
            await ledger_flow.record_transaction("expense", -5, food, when=NOW)

    @pytest.mark.asyncio
    async def test_category_is_embedded_as_snapshot(self, ledger_flow, food):
        saved = await ledger_flow.record_transaction("expense", 10, food, when=NOW)
        food.name = "Groceries"

        stored = await ledger_flow.get_transaction(saved.id)
        assert saved.category.name == "Food"
        assert stored.category.name == "Food"

    @pytest.mark.asyncio
    async def test_default_timestamp_is_now(self, ledger_flow, food):
        before = datetime.now().astimezone()
        saved = await ledger_flow.record_transaction("expense", 1, food)
        assert saved.date.tzinfo is not None
        assert saved.date >= before

    @pytest.mark.asyncio
    async def test_edit_transaction(self, ledger_flow, food, transport):
        saved = await ledger_flow.record_transaction("expense", 10, food, when=NOW)

        edited = await ledger_flow.edit_transaction(
            saved.model_copy(update={"category": transport, "amount": Decimal("12")})
        )
        stored = await ledger_flow.get_transaction(saved.id)
        assert stored == edited
        assert stored.category.id == "transport"

    @pytest.mark.asyncio
    async def test_edit_transaction_checks_category_and_existence(self, ledger_flow, food, salary):
        saved = await ledger_flow.record_transaction("expense", 10, food, when=NOW)

        with pytest.raises(CategoryMismatchError):
            await ledger_flow.edit_transaction(saved.model_copy(update={"category": salary}))
        with pytest.raises(NotFoundError):
            await ledger_flow.edit_transaction(saved.model_copy(update={"id": "missing"}))

    @pytest.mark.asyncio
    async def test_delete_transaction(self, ledger_flow, food):
        saved = await ledger_flow.record_transaction("expense", 10, food, when=NOW)
        assert await ledger_flow.delete_transaction(saved.id) is True
        assert await ledger_flow.get_transaction(saved.id) is None

    @pytest.mark.asyncio
    async def test_deleting_category_keeps_transactions(self, ledger_flow):
        categories = await ledger_flow.list_categories(TransactionType.EXPENSE)
        saved = await ledger_flow.record_transaction("expense", 10, categories[0], when=NOW)

        await ledger_flow.delete_category(categories[0].id)

        assert categories[0].id not in [c.id for c in await ledger_flow.list_categories()]
        assert (await ledger_flow.get_transaction(saved.id)).category.id == categories[0].id

    @pytest.mark.asyncio
    async def test_edit_category(self, ledger_flow):
        [salary] = [c for c in await ledger_flow.list_categories("income") if c.id == "salary"]
        await ledger_flow.edit_category(salary.model_copy(update={"color": "#000000"}))

        income = await ledger_flow.list_categories("income")
        assert [c.color for c in income if c.id == "salary"] == ["#000000"]
        assert income[-1].name == "Other"

    @pytest.mark.asyncio
    async def test_edit_missing_category(self, ledger_flow):
        with pytest.raises(NotFoundError):
            await ledger_flow.edit_category(
                Category(id="missing", name="X", icon="x", color="#000000", type="income")
            )


class TestReportFlow:
    """Tests for reports, dashboard, history and formatting."""

    @pytest.mark.asyncio
    async def test_dashboard_window(self, ledger_flow, report_flow, food):
        await ledger_flow.record_transaction("expense", 5, food, when=datetime(2024, 1, 14))
        await ledger_flow.record_transaction("expense", 7, food, when=datetime(2024, 1, 13, 23, 59))

        report = await report_flow.dashboard(now=NOW)
        assert len(report.daily) == 7
        assert report.daily[0].expense_total == Decimal("5")
        assert report.summary.total_expense == Decimal("5")

    @pytest.mark.asyncio
    async def test_recent_is_newest_five_across_all_time(self, ledger_flow, report_flow, food):
        for day in (3, 1, 9, 5, 7, 2):
            await ledger_flow.record_transaction("expense", day, food, when=datetime(2023, 6, day))

        recent = await report_flow.recent()
        assert [t.date.day for t in recent] == [9, 7, 5, 3, 2]
        assert [t.date.day for t in await report_flow.recent(limit=1)] == [9]

    @pytest.mark.asyncio
    async def test_history(self, ledger_flow, report_flow, food, salary):
        await ledger_flow.record_transaction("expense", 5, food, when=datetime(2024, 1, 14), notes="Coffee")
        await ledger_flow.record_transaction("income", 900, salary, when=datetime(2024, 1, 15))

        groups = await report_flow.history()
        assert [g.date.day for g in groups] == [15, 14]

        groups = await report_flow.history("coffee")
        assert [t.notes for g in groups for t in g.transactions] == ["Coffee"]

        groups = await report_flow.history(kind="income")
        assert [t.amount for g in groups for t in g.transactions] == [Decimal("900")]

    @pytest.mark.asyncio
    async def test_format_follows_selected_currency(self, report_flow, settings_flow):
        assert await report_flow.format(1000) == "₨1,000"

        await settings_flow.set_currency("USD")
        assert await report_flow.format(Decimal("1000.5")) == "$1,000.50"

    @pytest.mark.asyncio
    async def test_format_summary(self, report_flow, settings_flow):
        await settings_flow.set_currency("USD")
        formatted = await report_flow.format_summary(
            Summary(total_income=Decimal("100"), total_expense=Decimal("45.5"), balance=Decimal("54.5"))
        )
        assert formatted == {
            "total_income": "$100",
            "total_expense": "$45.50",
            "balance": "$54.50",
        }


class TestSettingsFlow:
    """Tests for currency, export, import and wipe."""

    @pytest.mark.asyncio
    async def test_currency(self, settings_flow):
        assert await settings_flow.get_currency() == "PKR"
        assert await settings_flow.set_currency("gbp") == "GBP"
        assert await settings_flow.get_currency() == "GBP"

        with pytest.raises(ValueError):
            await settings_flow.set_currency("ABC")

    @pytest.mark.asyncio
    async def test_export_formats(self, ledger_flow, settings_flow, food):
        await settings_flow.set_currency("USD")
        await ledger_flow.record_transaction("expense", "45.5", food, when=datetime(2024, 1, 15))

        data = json.loads(await settings_flow.export())
        assert len(data["transactions"]) == 1

        summary = await settings_flow.export(ExportFormat.SUMMARY, generated_on=NOW.date())
        assert "Generated on: 01/20/2024" in summary
        assert "Total Expenses: $45.50" in summary

        detailed = await settings_flow.export("detailed", generated_on=NOW.date())
        assert "Expense: $45.50\nCategory: Food\n" in detailed

    @pytest.mark.asyncio
    async def test_import_then_clear(self, ledger_flow, settings_flow, food):
        await ledger_flow.record_transaction("expense", 10, food, when=NOW)
        exported = await settings_flow.export()

        await settings_flow.clear_all_data()
        assert await ledger_flow._transactions.list() == []

        snapshot = await settings_flow.import_data(exported)
        assert len(snapshot.transactions) == 1
        assert len(await ledger_flow._transactions.list()) == 1


class TestFactory:
    """Tests for component wiring."""

    def test_create_app_components(self):
        ledger_flow, report_flow, settings_flow = create_app_components(
            Settings(), kv=InMemoryKeyValueStore(), setup_logging=False
        )
        assert isinstance(ledger_flow, LedgerFlow)
        assert isinstance(report_flow, ReportFlow)
        assert isinstance(settings_flow, SettingsFlow)

    def test_wiring_logs_environment(self, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "staging")
        with capture_logs() as logs:
            create_app_components(Settings(), kv=InMemoryKeyValueStore(), setup_logging=False)

        [entry] = [e for e in logs if e["event"] == "app_components_created"]
        assert entry["environment"] == "staging"
        assert entry["backend"] == "InMemoryKeyValueStore"

    def test_create_storage_memory(self, monkeypatch):
        monkeypatch.setenv("FLOWTRACK_STORAGE_BACKEND", "memory")
        assert isinstance(create_storage(Settings()), InMemoryKeyValueStore)

    def test_create_storage_json_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FLOWTRACK_STORAGE_BACKEND", "json_file")
        monkeypatch.setenv("FLOWTRACK_STORAGE_PATH", str(tmp_path / "store.json"))

        kv = create_storage(Settings())
        assert isinstance(kv, JsonFileKeyValueStore)
        assert kv.path == tmp_path / "store.json"

    @pytest.mark.asyncio
    async def test_json_file_backend_end_to_end(self, monkeypatch, tmp_path, food):
        monkeypatch.setenv("FLOWTRACK_STORAGE_PATH", str(tmp_path / "store.json"))
        ledger_flow, _, _ = create_app_components(Settings(), setup_logging=False)
        saved = await ledger_flow.record_transaction("expense", 3, food, when=NOW)

        ledger_flow, _, _ = create_app_components(Settings(), setup_logging=False)
        assert (await ledger_flow.get_transaction(saved.id)).amount == Decimal("3")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
