"""
Domain models for residents and complaints.

These are what the service returns and what the API serializes. JSON field
names are camelCase (complaintId, createdAtUtc, ...); Python code uses the
snake_case attribute names.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ComplaintStatus(str, Enum):
    """
    Complaint progress. Any status may follow any other status,
    including itself; there is no terminal state.
    """
    NOT_STARTED = "NOT_STARTED"
    STARTED = "STARTED"
    COMPLETE = "COMPLETE"


class Priority(str, Enum):
    """Complaint priority."""
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"


class CamelModel(BaseModel):
    """Base for models exposed over JSON with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Resident(CamelModel):
    """A unit occupant who may file complaints."""
    model_config = ConfigDict(frozen=True)

    resident_id: int
    name: str
    unit: str
    email: str


class Complaint(CamelModel):
    """A maintenance complaint as it currently stands in the store."""
    model_config = ConfigDict(frozen=True)

    complaint_id: int
    resident_id: int
    subject: str
    description: str
    status: ComplaintStatus
    priority: Priority
    created_at_utc: datetime
    updated_at_utc: Optional[datetime] = None
    attachment_paths: tuple[str, ...] = ()
    location_note: Optional[str] = None


@dataclass(frozen=True)
class NewComplaint:
    """A validated complaint that has not been given an id yet."""
    resident_id: int
    subject: str
    description: str
    status: ComplaintStatus
    priority: Priority
    created_at_utc: datetime
    attachment_paths: tuple[str, ...] = ()
    location_note: Optional[str] = None


@dataclass(frozen=True)
class ComplaintFilter:
    """Optional list filters; every filter that is set must match."""
    status: Optional[ComplaintStatus] = None
    priority: Optional[Priority] = None
    resident_id: Optional[int] = None

    @property
    def present(self) -> tuple[bool, bool, bool]:
        """Which filters are set, as (status, priority, resident_id)."""
        return (self.status is not None, self.priority is not None, self.resident_id is not None)

    def matches(self, complaint: Complaint) -> bool:
        if self.status is not None and complaint.status != self.status:
            return False
        if self.priority is not None and complaint.priority != self.priority:
            return False
        if self.resident_id is not None and complaint.resident_id != self.resident_id:
            return False
        return True


# =============================================================================
# Inbound shapes
# =============================================================================

class CreateComplaintRequest(CamelModel):
    """Body of a complaint submission. Content rules are enforced by the service."""
    resident_id: int
    subject: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    attachment_paths: Optional[list[Optional[str]]] = None
    location_note: Optional[str] = None


class UpdateStatusRequest(CamelModel):
    """Body of a status change."""
    status: str
