"""
Shared fixtures.

Every store test runs against an InMemoryKeyValueStore; nothing touches
the user's real data file.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from flowtrack.audit import AuditLogger
from flowtrack.models.transaction import Category, Transaction, TransactionType
from flowtrack.services.storage import InMemoryKeyValueStore
from flowtrack.services.stores import (
    CategoryStore,
    CurrencyPreferenceStore,
    DataTransferService,
    TransactionStore,
)


TRANSACTIONS_KEY = "@flowtrack_transactions"
CATEGORIES_KEY = "@flowtrack_categories"
CURRENCY_KEY = "@FlowTrack_currency"


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def transaction_store(kv, audit_logger):
    return TransactionStore(kv, TRANSACTIONS_KEY, audit_logger)


@pytest.fixture
def category_store(kv, audit_logger):
    return CategoryStore(kv, CATEGORIES_KEY, audit_logger)


@pytest.fixture
def preferences(kv, audit_logger):
    return CurrencyPreferenceStore(kv, CURRENCY_KEY, "PKR", audit_logger)


@pytest.fixture
def data_transfer(transaction_store, category_store, audit_logger):
    return DataTransferService(transaction_store, category_store, audit_logger)


@pytest.fixture
def food():
    return Category(id="food", name="Food", icon="food", color="#FF9800", type=TransactionType.EXPENSE)


@pytest.fixture
def transport():
    return Category(id="transport", name="Transportation", icon="car", color="#2196F3", type=TransactionType.EXPENSE)


@pytest.fixture
def salary():
    return Category(id="salary", name="Salary", icon="cash", color="#4CAF50", type=TransactionType.INCOME)


def make_transaction(
    kind: TransactionType,
    amount,
    category: Category,
    when: datetime,
    notes=None,
    transaction_id=None,
) -> Transaction:
    return Transaction(
        id=transaction_id,
        type=kind,
        amount=Decimal(str(amount)),
        category=category,
        date=when,
        notes=notes,
    )


@pytest.fixture
def tx():
    """Factory for Transaction records."""
    return make_transaction
