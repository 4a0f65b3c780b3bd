"""
Complaint Service
Validation, status changes and list filtering for complaints.

Holds no state of its own: every call reads from the store, so writes made
by other workers are visible on the next call.
"""

import logging
from enum import Enum
from typing import Iterable, Optional, TypeVar

from hoa_complaints.core.errors import NotFoundError, ValidationError
from hoa_complaints.core.utc import utc_now
from hoa_complaints.models.domain import (
    Complaint,
    ComplaintFilter,
    ComplaintStatus,
    CreateComplaintRequest,
    NewComplaint,
    Priority,
)
from hoa_complaints.services.residents import ResidentLookup
from hoa_complaints.services.store import ComplaintStore

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _parse_enum(enum_cls: type[E], value: str, label: str) -> E:
    """Case-insensitive lookup by member name."""
    member = enum_cls.__members__.get(value.strip().upper())
    if member is None:
        raise ValidationError(f"Unknown {label} '{value}'.")
    return member


def parse_status(value: str) -> ComplaintStatus:
    """Parse a caller-supplied status; NOT_STARTED, started, Complete all work."""
    return _parse_enum(ComplaintStatus, value, "status")


def parse_priority(value: str) -> Priority:
    """Parse a caller-supplied priority (case-insensitive)."""
    return _parse_enum(Priority, value, "priority")


def clean_attachment_paths(paths: Optional[Iterable[Optional[str]]]) -> tuple[str, ...]:
    """Drop empty and whitespace-only entries, trim the rest."""
    if not paths:
        return ()
    return tuple(path.strip() for path in paths if path is not None and path.strip())


class ComplaintService:
    """Business rules for complaints. Depends only on the store abstraction."""

    def __init__(self, store: ComplaintStore, residents: Optional[ResidentLookup] = None):
        self._store = store
        self._residents = residents or ResidentLookup(store)

    async def create_complaint(self, request: CreateComplaintRequest) -> Complaint:
        """
        Validate and persist a new complaint.

        Raises:
            ValidationError: blank subject/description or unknown priority
            NotFoundError: the resident does not exist
        """
        subject = (request.subject or "").strip()
        description = (request.description or "").strip()
        if not subject or not description:
            raise ValidationError("Subject and Description are required.")

        priority = Priority.NORMAL
        if request.priority is not None and request.priority.strip():
            priority = parse_priority(request.priority)

        if not await self._residents.exists(request.resident_id):
            raise NotFoundError(f"Resident {request.resident_id} not found.")

        new_complaint = NewComplaint(
            resident_id=request.resident_id,
            subject=subject,
            description=description,
            status=ComplaintStatus.NOT_STARTED,
            priority=priority,
            created_at_utc=utc_now(),
            attachment_paths=clean_attachment_paths(request.attachment_paths),
            location_note=request.location_note,
        )
        complaint = await self._store.add_complaint(new_complaint)

        logger.info(
            "Complaint created: id=%s, resident_id=%s, subject=\"%s\"",
            complaint.complaint_id, complaint.resident_id, complaint.subject,
        )
        return complaint

    async def list_complaints(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        resident_id: Optional[int] = None,
    ) -> list[Complaint]:
        """
        List complaints matching every supplied filter.

        Blank status/priority strings are treated as absent. No ordering is
        promised to callers.
        """
        complaint_filter = ComplaintFilter(
            status=parse_status(status) if status and status.strip() else None,
            priority=parse_priority(priority) if priority and priority.strip() else None,
            resident_id=resident_id,
        )
        return await self._store.list_complaints(complaint_filter)

    async def get_complaint(self, complaint_id: int) -> Complaint:
        complaint = await self._store.get_complaint(complaint_id)
        if complaint is None:
            raise NotFoundError(f"Complaint {complaint_id} not found.")
        return complaint

    async def update_status(self, complaint_id: int, new_status: str) -> Complaint:
        """
        Move a complaint to any status (no transition graph).

        Returns the complaint as re-read from the store after the write.
        """
        await self.get_complaint(complaint_id)

        if not new_status or not new_status.strip():
            raise ValidationError("Status is required.")
        status = parse_status(new_status)

        if not await self._store.update_status(complaint_id, status, utc_now()):
            raise NotFoundError(f"Complaint {complaint_id} not found.")

        logger.info("Complaint %s status -> %s", complaint_id, status.value)
        return await self.get_complaint(complaint_id)
