"""
Resident Lookup
Read-only access to residents. Absence is reported as None/False so the
caller decides how to surface it.
"""

import logging
from typing import Optional

from hoa_complaints.models.domain import Resident
from hoa_complaints.services.store import ComplaintStore

logger = logging.getLogger(__name__)


DEFAULT_RESIDENTS: tuple[Resident, ...] = (
    Resident(resident_id=1, name="Alice Johnson", unit="Unit A", email="alice@example.com"),
    Resident(resident_id=2, name="Bob Smith", unit="Unit B", email="bob@example.com"),
)


class ResidentLookup:
    """Existence checks and reads for residents."""

    def __init__(self, store: ComplaintStore):
        self._store = store

    async def exists(self, resident_id: int) -> bool:
        return await self._store.get_resident(resident_id) is not None

    async def get(self, resident_id: int) -> Optional[Resident]:
        return await self._store.get_resident(resident_id)

    async def list_all(self) -> list[Resident]:
        return await self._store.list_residents()


async def seed_default_residents(store: ComplaintStore) -> int:
    """
    Insert DEFAULT_RESIDENTS when the store has no residents yet.

    Returns the number of residents inserted.
    """
    if await store.list_residents():
        return 0
    for resident in DEFAULT_RESIDENTS:
        await store.add_resident(resident)
    logger.info("Seeded %s default residents", len(DEFAULT_RESIDENTS))
    return len(DEFAULT_RESIDENTS)
