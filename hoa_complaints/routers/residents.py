"""Residents Router - read-only."""

from fastapi import APIRouter, Depends

from hoa_complaints.core.errors import NotFoundError
from hoa_complaints.core.dependencies import get_resident_lookup
from hoa_complaints.models.domain import Resident
from hoa_complaints.services.residents import ResidentLookup


router = APIRouter(prefix="/residents", tags=["Residents"])


@router.get("", response_model=list[Resident])
async def list_residents(residents: ResidentLookup = Depends(get_resident_lookup)) -> list[Resident]:
    return await residents.list_all()


@router.get("/{resident_id}", response_model=Resident)
async def get_resident(
    resident_id: int,
    residents: ResidentLookup = Depends(get_resident_lookup),
) -> Resident:
    resident = await residents.get(resident_id)
    if resident is None:
        raise NotFoundError(f"Resident {resident_id} not found.")
    return resident
