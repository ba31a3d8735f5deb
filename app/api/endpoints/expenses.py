from typing import List
from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_expense_service
from app.models.expense import Expense
from app.schemas.ledger import ExpenseCreate
from app.services.ledger_service import ExpenseService

router = APIRouter()

@router.get("", response_model=List[Expense])
async def list_expenses(service: ExpenseService = Depends(get_expense_service)):
    return await service.list()

@router.post("", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    service: ExpenseService = Depends(get_expense_service)
):
    return await service.create(expense_in)

@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_expense(
    expense_id: str,
    service: ExpenseService = Depends(get_expense_service)
):
    """Delete an expense; unknown ids are ignored"""
    await service.delete(expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
