"""Request schemas for member endpoints."""
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.models.member import Payment


class PaymentCreate(Payment):
    """Payment recorded against a member."""
    pass


class MemberBase(BaseModel):
    """Fields a client may send for a member.

    ``name`` and ``phone`` are optional here so that the service can
    report a missing value with its own message.  Any ``id`` in the
    body is ignored.
    """
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    join_date: Optional[str] = Field(default=None, alias="joinDate")
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True
    )


class MemberCreate(MemberBase):
    payments: Optional[List[PaymentCreate]] = None


class MemberUpdate(MemberBase):
    # Accepted for compatibility with clients that send the full record;
    # stored payments are always kept.
    payments: Optional[Any] = None
