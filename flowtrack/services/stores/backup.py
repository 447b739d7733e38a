"""
Data Transfer

Export, import and wipe of the whole ledger.

DESIGN DECISION: Import validates the entire payload before writing
anything. A bad file never leaves half-imported data behind. The two
keys are still written one after the other, so a storage failure on
the second write leaves the first one replaced.
"""

from typing import Optional

from flowtrack.audit import AuditLogger
from flowtrack.models.audit import AuditEventBuilder
from flowtrack.models.transaction import DataSnapshot
from flowtrack.reports.export import parse_snapshot, render_json
from flowtrack.services.storage import MalformedDataError
from flowtrack.services.stores.base import generate_id
from flowtrack.services.stores.categories import CategoryStore
from flowtrack.services.stores.transactions import TransactionStore


def _with_ids(records: list, entity_name: str) -> list:
    """
    Give every record without an id a fresh one and reject repeated ids.

    Raises:
        MalformedDataError: If two records share an id
    """
    seen = set()
    result = []
    for record in records:
        if not record.id:
            record = record.model_copy(update={"id": generate_id()})
        elif record.id in seen:
            raise MalformedDataError(f"Duplicate {entity_name} id in import: {record.id}")
        seen.add(record.id)
        result.append(record)
    return result


class DataTransferService:
    """Moves whole snapshots in and out of the transaction and category stores."""

    def __init__(
        self,
        transactions: TransactionStore,
        categories: CategoryStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._transactions = transactions
        self._categories = categories
        self._audit = audit_logger or AuditLogger()

    async def export_snapshot(self) -> DataSnapshot:
        """Read both collections into one snapshot."""
        return DataSnapshot(
            transactions=await self._transactions.list(),
            categories=await self._categories.list(),
        )

    async def export_json(self) -> str:
        """The snapshot as {"transactions": [...], "categories": [...]}."""
        snapshot = await self.export_snapshot()
        await self._audit.log(
            AuditEventBuilder.data_exported(
                len(snapshot.transactions), len(snapshot.categories), "json"
            )
        )
        return render_json(snapshot)

    async def import_json(self, text: str) -> DataSnapshot:
        """
        Replace stored data with an exported snapshot.

        Only the keys present in the payload are written; a payload with
        just "categories" leaves transactions alone.

        Raises:
            MalformedDataError: If the payload is not a valid snapshot or
                repeats an id (nothing is written)
            PersistenceError: If a write fails
        """
        parsed = parse_snapshot(text)
        present = parsed.model_fields_set
        snapshot = DataSnapshot.model_construct(
            _fields_set=present,
            transactions=_with_ids(parsed.transactions, "transaction"),
            categories=_with_ids(parsed.categories, "category"),
        )

        if "transactions" in present:
            await self._transactions.replace_all(snapshot.transactions)
        if "categories" in present:
            await self._categories.replace_all(snapshot.categories)

        await self._audit.log(
            AuditEventBuilder.data_imported(
                len(snapshot.transactions) if "transactions" in present else None,
                len(snapshot.categories) if "categories" in present else None,
            )
        )
        return snapshot

    async def clear_all(self) -> None:
        """
        Remove all transactions and categories.

        The category key is removed rather than emptied, so the default
        categories are seeded again on the next read. The currency
        preference is kept.
        """
        await self._transactions.clear()
        await self._categories.clear()
        await self._audit.log(AuditEventBuilder.data_cleared())
