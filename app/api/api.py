from fastapi import APIRouter
from app.api.endpoints import members, expenses, donations

api_router = APIRouter()

api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(donations.router, prefix="/donations", tags=["donations"])
