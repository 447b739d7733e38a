"""
Category Store

The category list, seeded with a default set the first time it is read.

DESIGN DECISION: Seeding happens only when the key has never been
written. A user who deletes every category gets an empty list back,
not the defaults again. Clearing all data removes the key, so the
defaults return after a wipe.
"""

from typing import Optional

from flowtrack.models.audit import AuditEvent, AuditEventBuilder
from flowtrack.models.transaction import Category, TransactionType
from flowtrack.services.stores.base import JsonCollectionStore


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    # Expense categories
    Category(id="food", name="Food & Dining", icon="food", color="#FF9800", type=TransactionType.EXPENSE),
    Category(id="transport", name="Transportation", icon="car", color="#2196F3", type=TransactionType.EXPENSE),
    Category(id="shopping", name="Shopping", icon="cart", color="#9C27B0", type=TransactionType.EXPENSE),
    Category(id="bills", name="Bills & Utilities", icon="file-document-outline", color="#F44336", type=TransactionType.EXPENSE),
    Category(id="entertainment", name="Entertainment", icon="movie-outline", color="#E91E63", type=TransactionType.EXPENSE),
    Category(id="health", name="Health & Medical", icon="medical-bag", color="#4CAF50", type=TransactionType.EXPENSE),
    Category(id="education", name="Education", icon="school-outline", color="#3F51B5", type=TransactionType.EXPENSE),
    Category(id="other_expense", name="Other", icon="dots-horizontal", color="#607D8B", type=TransactionType.EXPENSE),

    # Income categories
    Category(id="salary", name="Salary", icon="cash", color="#4CAF50", type=TransactionType.INCOME),
    Category(id="freelance", name="Freelance", icon="laptop", color="#00BCD4", type=TransactionType.INCOME),
    Category(id="gifts", name="Gifts", icon="gift-outline", color="#8BC34A", type=TransactionType.INCOME),
    Category(id="investments", name="Investments", icon="chart-line", color="#FFC107", type=TransactionType.INCOME),
    Category(id="other_income", name="Other", icon="dots-horizontal", color="#009688", type=TransactionType.INCOME),
)


class CategoryStore(JsonCollectionStore[Category]):
    """
    CRUD over the persisted category list.

    update() raises NotFoundError for an unknown id, the same as the
    transaction store.
    """

    record_type = Category
    entity_name = "category"

    async def _on_missing(self) -> list:
        seeded = [c.model_copy() for c in DEFAULT_CATEGORIES]
        await self._write(seeded)
        await self._emit(AuditEventBuilder.categories_seeded(len(seeded)))
        return seeded

    async def list_by_type(self, kind: TransactionType) -> list[Category]:
        """Categories of one type, with any "Other" entries moved last."""
        matching = [c for c in await self.list() if c.type == kind]
        return sorted(matching, key=lambda c: c.name.lower() == "other")

    def _saved_event(self, record: Category) -> Optional[AuditEvent]:
        return AuditEventBuilder.category_saved(record.id, record.name, record.type.value)

    def _updated_event(self, record: Category) -> Optional[AuditEvent]:
        return AuditEventBuilder.category_updated(record.id, record.name)

    def _deleted_event(self, record_id: str, existed: bool) -> Optional[AuditEvent]:
        return AuditEventBuilder.category_deleted(record_id, existed)
