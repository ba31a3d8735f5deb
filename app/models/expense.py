from typing import Optional

from app.models.base import Number, RecordModel


class Expense(RecordModel):
    # Caller-supplied id; uniqueness is not enforced.
    id: Optional[Number] = None
    date: Optional[str] = None
    amount: Optional[Number] = None
    category: Optional[str] = None
    description: Optional[str] = None
