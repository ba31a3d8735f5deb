import logging
import re
from datetime import date
from typing import Any, List, Optional

from app.core.exceptions import NotFoundError, ValidationError
from app.db.mongo import MongoDatabase
from app.models.base import INT64_MAX, INT64_MIN
from app.models.member import Member, Payment
from app.repositories.member_repo import MemberRepository
from app.schemas.member import MemberBase, MemberCreate, MemberUpdate, PaymentCreate

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"^[+-]?\d+$")


def parse_member_id(raw: Any) -> int:
    """Parse a member id taken from the request path."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        member_id = raw
    else:
        text = str(raw).strip()
        if isinstance(raw, bool) or not _INTEGER.match(text):
            raise ValidationError("Invalid member id")
        member_id = int(text)
    # Larger values cannot be encoded for a storage query.
    if not INT64_MIN <= member_id <= INT64_MAX:
        raise ValidationError("Invalid member id")
    return member_id


def _trim(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


def _required_contact(member_in: MemberBase) -> dict[str, str]:
    name = _trim(member_in.name)
    phone = _trim(member_in.phone)
    if not name or not phone:
        raise ValidationError("Name and phone are required fields")
    return {"name": name, "phone": phone}


class MemberService:
    """
    Member records.

    New members get ``max(id) + 1``.  The read and the insert are separate
    storage calls, so two concurrent creates can pick the same id; the
    unique index on ``id`` rejects the second one and the caller gets a
    ConflictError.  There is no retry and no in-process lock.
    """

    def __init__(self, mongo: MongoDatabase):
        self.repo = MemberRepository(mongo)

    async def list(self) -> List[Member]:
        return await self.repo.list_all()

    async def get(self, member_id: Any) -> Member:
        member = await self.repo.get(parse_member_id(member_id))
        if member is None:
            raise NotFoundError("Member not found")
        return member

    async def create(self, member_in: MemberCreate) -> Member:
        fields = _required_contact(member_in)
        payments = [Payment.model_validate(p.model_dump()) for p in member_in.payments or []]

        next_id = await self.repo.max_id() + 1
        member = Member(
            id=next_id,
            name=fields["name"],
            phone=fields["phone"],
            address=_trim(member_in.address) or "",
            join_date=_trim(member_in.join_date) or date.today().isoformat(),
            photo_url=_trim(member_in.photo_url) or None,
            payments=payments
        )
        await self.repo.create(member)
        logger.info("Created member %d (%s)", member.id, member.name)
        return member

    async def update(self, member_id: Any, member_in: MemberUpdate) -> Member:
        """Replace a member's details, keeping its id and payment history."""
        member_id = parse_member_id(member_id)
        if await self.repo.get(member_id) is None:
            raise NotFoundError("Member not found")

        updates: dict[str, Any] = _required_contact(member_in)
        supplied = member_in.model_fields_set
        if "address" in supplied:
            updates["address"] = _trim(member_in.address) or ""
        if "photo_url" in supplied:
            updates["photoUrl"] = _trim(member_in.photo_url) or None
        join_date = _trim(member_in.join_date)
        if join_date:
            updates["joinDate"] = join_date

        member = await self.repo.update_fields(member_id, updates)
        if member is None:
            # Deleted between the lookup and the update.
            raise NotFoundError("Member not found")
        logger.info("Updated member %d", member_id)
        return member

    async def delete(self, member_id: Any) -> None:
        member_id = parse_member_id(member_id)
        if not await self.repo.delete(member_id):
            raise NotFoundError("Member not found")
        logger.info("Deleted member %d", member_id)

    async def add_payment(self, member_id: Any, payment_in: PaymentCreate) -> Member:
        """Append one payment to the end of the member's history."""
        member_id = parse_member_id(member_id)
        payment = Payment.model_validate(payment_in.model_dump())
        member = await self.repo.push_payment(member_id, payment)
        if member is None:
            raise NotFoundError("Member not found")
        logger.info("Recorded payment of %s for member %d (%s)", payment.amount, member_id, payment.week)
        return member
