"""
Complaints Router
Create, list, fetch and change the status of maintenance complaints.
Errors raised by the service are mapped to responses in core.errors.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from hoa_complaints.core.dependencies import get_complaint_service
from hoa_complaints.models.domain import Complaint, CreateComplaintRequest, UpdateStatusRequest
from hoa_complaints.services.complaints import ComplaintService


router = APIRouter(prefix="/complaints", tags=["Complaints"])


@router.post("", status_code=201, response_model=Complaint)
async def create_complaint(
    body: CreateComplaintRequest,
    response: Response,
    service: ComplaintService = Depends(get_complaint_service),
) -> Complaint:
    """File a new complaint. Responds 201 with a Location header."""
    complaint = await service.create_complaint(body)
    response.headers["Location"] = f"/complaints/{complaint.complaint_id}"
    return complaint


@router.get("", response_model=list[Complaint])
async def list_complaints(
    status: Optional[str] = Query(None, description="NOT_STARTED, STARTED or COMPLETE (any case)"),
    priority: Optional[str] = Query(None, description="LOW, NORMAL or HIGH (any case)"),
    resident_id: Optional[int] = Query(None, alias="residentId"),
    service: ComplaintService = Depends(get_complaint_service),
) -> list[Complaint]:
    """List complaints; supplied filters are combined with AND."""
    return await service.list_complaints(status=status, priority=priority, resident_id=resident_id)


@router.get("/{complaint_id}", response_model=Complaint)
async def get_complaint(
    complaint_id: int,
    service: ComplaintService = Depends(get_complaint_service),
) -> Complaint:
    return await service.get_complaint(complaint_id)


@router.patch("/{complaint_id}/status", response_model=Complaint)
async def update_complaint_status(
    complaint_id: int,
    body: UpdateStatusRequest,
    service: ComplaintService = Depends(get_complaint_service),
) -> Complaint:
    """Set the status; any status may follow any other."""
    return await service.update_status(complaint_id, body.status)
