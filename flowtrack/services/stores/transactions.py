"""Transaction store: the user's transactions as one JSON array."""

from typing import Optional

from flowtrack.models.audit import AuditEvent, AuditEventBuilder
from flowtrack.models.transaction import Transaction
from flowtrack.services.stores.base import JsonCollectionStore


class TransactionStore(JsonCollectionStore[Transaction]):
    """
    CRUD over the persisted transaction list.

    Records come back in insertion order; sorting for display is done by
    the reports layer.
    """

    record_type = Transaction
    entity_name = "transaction"

    def _saved_event(self, record: Transaction) -> Optional[AuditEvent]:
        return AuditEventBuilder.transaction_saved(record.id, record.type.value, str(record.amount))

    def _updated_event(self, record: Transaction) -> Optional[AuditEvent]:
        return AuditEventBuilder.transaction_updated(record.id, record.type.value, str(record.amount))

    def _deleted_event(self, record_id: str, existed: bool) -> Optional[AuditEvent]:
        return AuditEventBuilder.transaction_deleted(record_id, existed)
