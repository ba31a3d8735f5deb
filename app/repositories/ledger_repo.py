from typing import Any, Sequence

from app.db.mongo import DONATIONS, EXPENSES
from app.models.donation import Donation
from app.models.expense import Expense
from app.repositories.base import RecordRepository, RecordT, storage_errors


class LedgerRepository(RecordRepository[RecordT]):
    """Expenses and donations: list, insert and delete by id."""

    async def delete_by_id(self, candidates: Sequence[Any]) -> int:
        """Delete one record whose ``id`` equals any of ``candidates``."""
        with storage_errors(f"Deleting from {self.collection_name}"):
            result = await self.collection.delete_one({"id": {"$in": list(candidates)}})
        return result.deleted_count


class ExpenseRepository(LedgerRepository[Expense]):
    collection_name = EXPENSES
    model = Expense


class DonationRepository(LedgerRepository[Donation]):
    collection_name = DONATIONS
    model = Donation
