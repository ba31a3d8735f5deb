from fastapi import Depends

from app.db.mongo import MongoDatabase
from app.db.session import get_database
from app.services.ledger_service import DonationService, ExpenseService
from app.services.member_service import MemberService


def get_member_service(mongo: MongoDatabase = Depends(get_database)) -> MemberService:
    return MemberService(mongo)


def get_expense_service(mongo: MongoDatabase = Depends(get_database)) -> ExpenseService:
    return ExpenseService(mongo)


def get_donation_service(mongo: MongoDatabase = Depends(get_database)) -> DonationService:
    return DonationService(mongo)
