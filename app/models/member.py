"""
Member model - an academy member and their payment history.

Invariants:
- ``id`` is assigned by the service on creation and never changes
- ``payments`` keeps entry order; the generic update path never touches it
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.base import Number, RecordModel


class Payment(BaseModel):
    """Embedded payment; has no identity of its own."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    date: str
    amount: Number
    week: str  # e.g. "W1"

    @field_validator("amount")
    @classmethod
    def amount_not_negative(cls, value: Number) -> Number:
        if value < 0:
            raise ValueError("amount must not be negative")
        return value


class Member(RecordModel):
    id: int = Field(..., gt=0)
    name: str
    phone: str
    address: str = ""
    join_date: str = Field(alias="joinDate")
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")
    payments: List[Payment] = []
