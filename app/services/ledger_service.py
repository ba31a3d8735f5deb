import logging
import math
from typing import Any, Generic, List

from app.db.mongo import MongoDatabase
from app.repositories.base import RecordT
from app.repositories.ledger_repo import DonationRepository, ExpenseRepository, LedgerRepository
from app.models.base import INT64_MAX, INT64_MIN, RecordModel

logger = logging.getLogger(__name__)


def id_candidates(raw: str) -> List[Any]:
    """
    Values a path id may be stored as.

    Ids arrive as strings but are normally stored as numbers, so a numeric
    string matches both its number and its literal text.
    """
    candidates: List[Any] = [raw]
    try:
        number = float(raw)
    except ValueError:
        return candidates
    if not math.isfinite(number):
        return candidates
    if number.is_integer():
        number = int(number)
        if not INT64_MIN <= number <= INT64_MAX:
            return candidates
    candidates.append(number)
    return candidates


class LedgerService(Generic[RecordT]):
    """List, create and delete for loosely validated money records."""

    def __init__(self, repo: LedgerRepository[RecordT]):
        self.repo = repo

    async def list(self) -> List[RecordT]:
        return await self.repo.list_all()

    async def create(self, record_in: RecordModel) -> RecordT:
        record = self.repo.model.model_validate(record_in.model_dump())
        return await self.repo.insert(record)

    async def delete(self, record_id: str) -> None:
        """Delete by id; an unknown id is not an error."""
        deleted = await self.repo.delete_by_id(id_candidates(record_id))
        if not deleted:
            logger.debug("No %s record with id %r", self.repo.collection_name, record_id)


class ExpenseService(LedgerService):
    def __init__(self, mongo: MongoDatabase):
        super().__init__(ExpenseRepository(mongo))


class DonationService(LedgerService):
    def __init__(self, mongo: MongoDatabase):
        super().__init__(DonationRepository(mongo))
