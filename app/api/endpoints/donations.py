from typing import List
from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_donation_service
from app.models.donation import Donation
from app.schemas.ledger import DonationCreate
from app.services.ledger_service import DonationService

router = APIRouter()

@router.get("", response_model=List[Donation])
async def list_donations(service: DonationService = Depends(get_donation_service)):
    return await service.list()

@router.post("", response_model=Donation, status_code=status.HTTP_201_CREATED)
async def create_donation(
    donation_in: DonationCreate,
    service: DonationService = Depends(get_donation_service)
):
    return await service.create(donation_in)

@router.delete("/{donation_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_donation(
    donation_id: str,
    service: DonationService = Depends(get_donation_service)
):
    """Delete a donation; unknown ids are ignored"""
    await service.delete(donation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
