"""
Domain Mapper
Pure conversion between storage rows and domain objects.

Enums travel through explicit lookup tables in both directions. A stored
value missing from a table is a store-integrity fault (CorruptDataError),
never a caller error.
"""

from datetime import datetime
from typing import Any, Optional

from hoa_complaints.core.errors import CorruptDataError
from hoa_complaints.core.utc import format_utc, parse_utc
from hoa_complaints.models.domain import Complaint, ComplaintStatus, NewComplaint, Priority, Resident
from hoa_complaints.models.models import ComplaintRow, ResidentRow


STATUS_TO_TEXT: dict[ComplaintStatus, str] = {
    ComplaintStatus.NOT_STARTED: "NOT_STARTED",
    ComplaintStatus.STARTED: "STARTED",
    ComplaintStatus.COMPLETE: "COMPLETE",
}
TEXT_TO_STATUS: dict[str, ComplaintStatus] = {text: status for status, text in STATUS_TO_TEXT.items()}

PRIORITY_TO_TEXT: dict[Priority, str] = {
    Priority.LOW: "LOW",
    Priority.NORMAL: "NORMAL",
    Priority.HIGH: "HIGH",
}
TEXT_TO_PRIORITY: dict[str, Priority] = {text: priority for priority, text in PRIORITY_TO_TEXT.items()}


# =============================================================================
# Enums
# =============================================================================

def status_to_text(status: ComplaintStatus) -> str:
    return STATUS_TO_TEXT[status]


def status_from_text(text: str) -> ComplaintStatus:
    try:
        return TEXT_TO_STATUS[text]
    except KeyError:
        raise CorruptDataError(f"Stored status {text!r} is not a known status.") from None


def priority_to_text(priority: Priority) -> str:
    return PRIORITY_TO_TEXT[priority]


def priority_from_text(text: str) -> Priority:
    try:
        return TEXT_TO_PRIORITY[text]
    except KeyError:
        raise CorruptDataError(f"Stored priority {text!r} is not a known priority.") from None


# =============================================================================
# Timestamps
# =============================================================================

def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Canonical text for storage; None stays None."""
    if value is None:
        return None
    return format_utc(value)


def parse_timestamp(text: Optional[str]) -> Optional[datetime]:
    """Read a stored timestamp back; None stays None."""
    if text is None:
        return None
    try:
        return parse_utc(text)
    except ValueError:
        raise CorruptDataError(f"Stored timestamp {text!r} is not ISO 8601.") from None


# =============================================================================
# Rows
# =============================================================================

def row_to_resident(row: ResidentRow) -> Resident:
    return Resident(resident_id=row.resident_id, name=row.name, unit=row.unit, email=row.email)


def resident_to_params(resident: Resident) -> dict[str, Any]:
    return {
        "resident_id": resident.resident_id,
        "name": resident.name,
        "unit": resident.unit,
        "email": resident.email,
    }


def row_to_complaint(row: ComplaintRow) -> Complaint:
    """
    Materialize a stored complaint.

    Attachments are not part of the row, so they come back empty.
    """
    created_at = parse_timestamp(row.created_at_utc)
    if created_at is None:
        raise CorruptDataError(f"Complaint {row.complaint_id} has no creation timestamp.")

    return Complaint(
        complaint_id=row.complaint_id,
        resident_id=row.resident_id,
        subject=row.subject,
        description=row.description,
        status=status_from_text(row.status),
        priority=priority_from_text(row.priority),
        created_at_utc=created_at,
        updated_at_utc=parse_timestamp(row.updated_at_utc),
        attachment_paths=(),
        location_note=row.location_note,
    )


def complaint_to_params(complaint: NewComplaint) -> dict[str, Any]:
    """Column values for inserting a new complaint (the id is left to the store)."""
    return {
        "resident_id": complaint.resident_id,
        "subject": complaint.subject,
        "description": complaint.description,
        "status": status_to_text(complaint.status),
        "priority": priority_to_text(complaint.priority),
        "created_at_utc": format_timestamp(complaint.created_at_utc),
        "updated_at_utc": None,
        "location_note": complaint.location_note,
    }


def status_update_params(status: ComplaintStatus, updated_at: datetime) -> dict[str, Any]:
    """Column values for a status change."""
    return {
        "status": status_to_text(status),
        "updated_at_utc": format_timestamp(updated_at),
    }
