from typing import Optional

from app.models.base import Number, RecordModel


class Donation(RecordModel):
    id: Optional[Number] = None
    date: Optional[str] = None
    amount: Optional[Number] = None
    donor: Optional[str] = None
    purpose: Optional[str] = None
