"""
Storage Adapter
The single owner of durable state for residents and complaints.

ComplaintStore is the abstraction the service depends on. Two backends:

- SqlComplaintStore: async SQLAlchemy; one session per operation, every value
  bound as a parameter, list queries chosen from a fixed set of variants.
- InMemoryComplaintStore: process-local; every operation runs inside one
  asyncio.Lock so concurrent creations never share an id.
"""

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Optional

from sqlalchemy import Select, bindparam, select, update
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from hoa_complaints.core.database import create_engine_for, create_schema, create_session_factory, session_scope
from hoa_complaints.models.domain import Complaint, ComplaintFilter, ComplaintStatus, NewComplaint, Resident
from hoa_complaints.models.models import ComplaintRow, ResidentRow
from hoa_complaints.services import mapper

logger = logging.getLogger(__name__)

# SQLite INTEGER (and Postgres BIGINT) range; larger ids cannot name a stored row
MAX_STORED_ID = 2**63 - 1


def _storable_id(value: int) -> bool:
    return -MAX_STORED_ID - 1 <= value <= MAX_STORED_ID


class ComplaintStore(ABC):
    """Persistence operations used by the complaint service and resident lookup."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backing store (create schema if missing). Idempotent."""

    @abstractmethod
    async def close(self) -> None:
        """Release any held resources."""

    # Residents

    @abstractmethod
    async def add_resident(self, resident: Resident) -> Resident:
        ...

    @abstractmethod
    async def get_resident(self, resident_id: int) -> Optional[Resident]:
        ...

    @abstractmethod
    async def list_residents(self) -> list[Resident]:
        ...

    # Complaints

    @abstractmethod
    async def add_complaint(self, complaint: NewComplaint) -> Complaint:
        """Insert one complaint; the store assigns its id."""

    @abstractmethod
    async def get_complaint(self, complaint_id: int) -> Optional[Complaint]:
        ...

    @abstractmethod
    async def list_complaints(self, complaint_filter: ComplaintFilter) -> list[Complaint]:
        ...

    @abstractmethod
    async def update_status(self, complaint_id: int, status: ComplaintStatus, updated_at: datetime) -> bool:
        """Set status and update timestamp. Returns False if the complaint does not exist."""


# =============================================================================
# SQL backend
# =============================================================================

def _build_list_queries() -> dict[tuple[bool, bool, bool], Select]:
    """
    One precompiled SELECT per combination of present filters.

    Keys are (status, priority, resident_id) presence flags. Filter values
    are only ever supplied as bound parameters at execution time.
    """
    queries: dict[tuple[bool, bool, bool], Select] = {}
    for has_status, has_priority, has_resident in itertools.product((False, True), repeat=3):
        stmt = select(ComplaintRow)
        if has_status:
            stmt = stmt.where(ComplaintRow.status == bindparam("status"))
        if has_priority:
            stmt = stmt.where(ComplaintRow.priority == bindparam("priority"))
        if has_resident:
            stmt = stmt.where(ComplaintRow.resident_id == bindparam("resident_id"))
        queries[(has_status, has_priority, has_resident)] = stmt.order_by(ComplaintRow.complaint_id)
    return queries


LIST_QUERIES = _build_list_queries()


class SqlComplaintStore(ComplaintStore):
    """Relational backend over an async SQLAlchemy engine."""

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._session_factory = create_session_factory(engine)

    def _session(self) -> AbstractAsyncContextManager[AsyncSession]:
        return session_scope(self._session_factory)

    async def initialize(self) -> None:
        await create_schema(self._engine)
        logger.info("Schema ready on %s", self._engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self._engine.dispose()

    async def add_resident(self, resident: Resident) -> Resident:
        async with self._session() as session:
            session.add(ResidentRow(**mapper.resident_to_params(resident)))
        return resident

    async def get_resident(self, resident_id: int) -> Optional[Resident]:
        if not _storable_id(resident_id):
            return None
        async with self._session() as session:
            row = await session.get(ResidentRow, resident_id)
            return mapper.row_to_resident(row) if row is not None else None

    async def list_residents(self) -> list[Resident]:
        async with self._session() as session:
            result = await session.execute(select(ResidentRow).order_by(ResidentRow.resident_id))
            return [mapper.row_to_resident(row) for row in result.scalars().all()]

    async def add_complaint(self, complaint: NewComplaint) -> Complaint:
        async with self._session() as session:
            row = ComplaintRow(**mapper.complaint_to_params(complaint))
            session.add(row)
            await session.flush()
            stored = mapper.row_to_complaint(row)

        # Attachments have no column; the accepted list is echoed back once
        return stored.model_copy(update={"attachment_paths": tuple(complaint.attachment_paths)})

    async def get_complaint(self, complaint_id: int) -> Optional[Complaint]:
        if not _storable_id(complaint_id):
            return None
        async with self._session() as session:
            result = await session.execute(
                select(ComplaintRow).where(ComplaintRow.complaint_id == complaint_id)
            )
            row = result.scalar_one_or_none()
            return mapper.row_to_complaint(row) if row is not None else None

    async def list_complaints(self, complaint_filter: ComplaintFilter) -> list[Complaint]:
        stmt = LIST_QUERIES[complaint_filter.present]
        params = {}
        if complaint_filter.status is not None:
            params["status"] = mapper.status_to_text(complaint_filter.status)
        if complaint_filter.priority is not None:
            params["priority"] = mapper.priority_to_text(complaint_filter.priority)
        if complaint_filter.resident_id is not None:
            if not _storable_id(complaint_filter.resident_id):
                return []
            params["resident_id"] = complaint_filter.resident_id

        async with self._session() as session:
            result = await session.execute(stmt, params)
            return [mapper.row_to_complaint(row) for row in result.scalars().all()]

    async def update_status(self, complaint_id: int, status: ComplaintStatus, updated_at: datetime) -> bool:
        if not _storable_id(complaint_id):
            return False
        stmt = (
            update(ComplaintRow)
            .where(ComplaintRow.complaint_id == complaint_id)
            .values(**mapper.status_update_params(status, updated_at))
            .execution_options(synchronize_session=False)
        )
        async with self._session() as session:
            result = await session.execute(stmt)
            return result.rowcount > 0


# =============================================================================
# In-memory backend
# =============================================================================

class InMemoryComplaintStore(ComplaintStore):
    """
    Process-local backend for development and tests.

    Complaints are immutable objects; an update swaps in a new copy.
    Attachments are kept, unlike the SQL backend.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._residents: dict[int, Resident] = {}
        self._complaints: list[Complaint] = []
        self._next_complaint_id = 1

    async def initialize(self) -> None:
        logger.info("Using in-memory complaint store")

    async def close(self) -> None:
        pass

    async def add_resident(self, resident: Resident) -> Resident:
        async with self._lock:
            self._residents[resident.resident_id] = resident
        return resident

    async def get_resident(self, resident_id: int) -> Optional[Resident]:
        async with self._lock:
            return self._residents.get(resident_id)

    async def list_residents(self) -> list[Resident]:
        async with self._lock:
            return [self._residents[key] for key in sorted(self._residents)]

    async def add_complaint(self, complaint: NewComplaint) -> Complaint:
        async with self._lock:
            stored = Complaint(
                complaint_id=self._next_complaint_id,
                resident_id=complaint.resident_id,
                subject=complaint.subject,
                description=complaint.description,
                status=complaint.status,
                priority=complaint.priority,
                created_at_utc=complaint.created_at_utc,
                updated_at_utc=None,
                attachment_paths=tuple(complaint.attachment_paths),
                location_note=complaint.location_note,
            )
            self._next_complaint_id += 1
            self._complaints.append(stored)
            return stored

    async def get_complaint(self, complaint_id: int) -> Optional[Complaint]:
        async with self._lock:
            return self._find(complaint_id)

    async def list_complaints(self, complaint_filter: ComplaintFilter) -> list[Complaint]:
        async with self._lock:
            return [c for c in self._complaints if complaint_filter.matches(c)]

    async def update_status(self, complaint_id: int, status: ComplaintStatus, updated_at: datetime) -> bool:
        async with self._lock:
            for index, existing in enumerate(self._complaints):
                if existing.complaint_id == complaint_id:
                    self._complaints[index] = existing.model_copy(
                        update={"status": status, "updated_at_utc": updated_at}
                    )
                    return True
            return False

    def _find(self, complaint_id: int) -> Optional[Complaint]:
        for complaint in self._complaints:
            if complaint.complaint_id == complaint_id:
                return complaint
        return None


def create_store(backend: str, database_url: str, echo: bool = False) -> ComplaintStore:
    """Pick the store implementation at startup."""
    if backend == "memory":
        return InMemoryComplaintStore()
    if backend == "database":
        return SqlComplaintStore(create_engine_for(database_url, echo=echo))
    raise ValueError(f"Unknown storage backend {backend!r}")
