from typing import Any, Optional

from pymongo import DESCENDING, ReturnDocument

from app.db.mongo import MEMBERS
from app.models.member import Member, Payment
from app.repositories.base import NO_OBJECT_ID, RecordRepository, storage_errors

DUPLICATE_MEMBER_ID = "Duplicate member ID found"


class MemberRepository(RecordRepository[Member]):
    """Member database operations."""

    collection_name = MEMBERS
    model = Member

    async def get(self, member_id: int) -> Optional[Member]:
        with storage_errors("Loading member"):
            doc = await self.collection.find_one({"id": member_id}, NO_OBJECT_ID)
        return self._load(doc)

    async def max_id(self) -> int:
        """Highest assigned id, or 0 for an empty collection."""
        with storage_errors("Reading highest member id"):
            doc = await self.collection.find_one({}, {"_id": 0, "id": 1}, sort=[("id", DESCENDING)])
        if doc is None or doc.get("id") is None:
            return 0
        return int(doc["id"])

    async def create(self, member: Member) -> Member:
        return await self.insert(member, DUPLICATE_MEMBER_ID)

    async def update_fields(self, member_id: int, updates: dict[str, Any]) -> Optional[Member]:
        """Set the given fields; ``payments`` and ``id`` are never written here."""
        updates = {k: v for k, v in updates.items() if k not in ("id", "payments")}
        with storage_errors("Updating member", DUPLICATE_MEMBER_ID):
            doc = await self.collection.find_one_and_update(
                {"id": member_id},
                {"$set": updates},
                projection=NO_OBJECT_ID,
                return_document=ReturnDocument.AFTER
            )
        return self._load(doc)

    async def push_payment(self, member_id: int, payment: Payment) -> Optional[Member]:
        with storage_errors("Recording payment"):
            doc = await self.collection.find_one_and_update(
                {"id": member_id},
                {"$push": {"payments": payment.model_dump()}},
                projection=NO_OBJECT_ID,
                return_document=ReturnDocument.AFTER
            )
        return self._load(doc)

    async def delete(self, member_id: int) -> bool:
        with storage_errors("Deleting member"):
            result = await self.collection.delete_one({"id": member_id})
        return result.deleted_count > 0
