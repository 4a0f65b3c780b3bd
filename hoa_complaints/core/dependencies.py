"""
FastAPI dependencies.

The store is chosen once at startup and kept on app.state; services are cheap
wrappers built per request.
"""

from fastapi import Depends, Request

from hoa_complaints.services.complaints import ComplaintService
from hoa_complaints.services.residents import ResidentLookup
from hoa_complaints.services.store import ComplaintStore


def get_store(request: Request) -> ComplaintStore:
    """The store created in the application lifespan."""
    return request.app.state.store


def get_resident_lookup(store: ComplaintStore = Depends(get_store)) -> ResidentLookup:
    return ResidentLookup(store)


def get_complaint_service(
    store: ComplaintStore = Depends(get_store),
    residents: ResidentLookup = Depends(get_resident_lookup),
) -> ComplaintService:
    return ComplaintService(store, residents)
