"""Request schemas for expense and donation endpoints."""
from app.models.donation import Donation
from app.models.expense import Expense


class ExpenseCreate(Expense):
    """Expense body; every field is optional."""
    pass


class DonationCreate(Donation):
    """Donation body; every field is optional."""
    pass
