from typing import List
from fastapi import APIRouter, Depends, status

from app.api.deps import get_member_service
from app.models.member import Member
from app.schemas.member import MemberCreate, MemberUpdate, PaymentCreate
from app.services.member_service import MemberService

router = APIRouter()

@router.get("", response_model=List[Member])
async def list_members(service: MemberService = Depends(get_member_service)):
    """List all members, ordered by id"""
    return await service.list()

@router.post("", response_model=Member, status_code=status.HTTP_201_CREATED)
async def create_member(
    member_in: MemberCreate,
    service: MemberService = Depends(get_member_service)
):
    """Create a member with the next free id"""
    return await service.create(member_in)

@router.get("/{member_id}", response_model=Member)
async def get_member(
    member_id: str,
    service: MemberService = Depends(get_member_service)
):
    return await service.get(member_id)

@router.put("/{member_id}", response_model=Member)
async def update_member(
    member_id: str,
    member_in: MemberUpdate,
    service: MemberService = Depends(get_member_service)
):
    """Update member details; the payment history is left as stored"""
    return await service.update(member_id, member_in)

@router.delete("/{member_id}")
async def delete_member(
    member_id: str,
    service: MemberService = Depends(get_member_service)
):
    await service.delete(member_id)
    return {"success": True}

@router.post("/{member_id}/payments", response_model=Member, status_code=status.HTTP_201_CREATED)
async def record_payment(
    member_id: str,
    payment_in: PaymentCreate,
    service: MemberService = Depends(get_member_service)
):
    """Append a payment to the member's history"""
    return await service.add_payment(member_id, payment_in)
