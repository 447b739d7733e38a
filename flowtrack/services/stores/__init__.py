"""
Record Stores Package

Transaction, category and currency-preference stores over the
key-value backend, plus whole-ledger export/import.
"""

from flowtrack.services.stores.base import JsonCollectionStore, generate_id
from flowtrack.services.stores.categories import DEFAULT_CATEGORIES, CategoryStore
from flowtrack.services.stores.transactions import TransactionStore
from flowtrack.services.stores.preferences import CurrencyPreferenceStore
from flowtrack.services.stores.backup import DataTransferService

__all__ = [
    "CategoryStore",
    "CurrencyPreferenceStore",
    "DataTransferService",
    "DEFAULT_CATEGORIES",
    "JsonCollectionStore",
    "TransactionStore",
    "generate_id",
]
