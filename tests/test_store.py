"""
Tests for the storage adapters - schema setup, durable identifiers, the
attachment gap of the SQL backend and corrupt rows.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import text

from hoa_complaints.core.database import create_engine_for
from hoa_complaints.core.errors import CorruptDataError
from hoa_complaints.models.domain import ComplaintFilter, ComplaintStatus, NewComplaint, Priority, Resident
from hoa_complaints.services.residents import DEFAULT_RESIDENTS, seed_default_residents
from hoa_complaints.services.store import (
    LIST_QUERIES,
    InMemoryComplaintStore,
    SqlComplaintStore,
    create_store,
)


def _new(resident_id: int = 1, priority: Priority = Priority.NORMAL, **overrides) -> NewComplaint:
    values = dict(
        resident_id=resident_id,
        subject="Leak",
        description="Pipe leak in unit A",
        status=ComplaintStatus.NOT_STARTED,
        priority=priority,
        created_at_utc=datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return NewComplaint(**values)


# =============================================================================
# Both backends
# =============================================================================

@pytest.mark.anyio
async def test_residents_are_seeded_once(store):
    assert await store.list_residents() == list(DEFAULT_RESIDENTS)
    assert await seed_default_residents(store) == 0
    assert len(await store.list_residents()) == 2


@pytest.mark.anyio
async def test_get_resident(store):
    assert (await store.get_resident(1)).name == "Alice Johnson"
    assert await store.get_resident(99) is None


@pytest.mark.anyio
async def test_update_status_reports_missing_complaint(store):
    assert await store.update_status(404, ComplaintStatus.STARTED, datetime.now(timezone.utc)) is False


@pytest.mark.anyio
async def test_list_with_status_filter(store):
    first = await store.add_complaint(_new())
    await store.add_complaint(_new())
    await store.update_status(first.complaint_id, ComplaintStatus.COMPLETE, datetime.now(timezone.utc))

    done = await store.list_complaints(ComplaintFilter(status=ComplaintStatus.COMPLETE))
    assert [c.complaint_id for c in done] == [first.complaint_id]


# =============================================================================
# SQL backend
# =============================================================================

def test_there_is_one_query_per_filter_combination():
    assert len(LIST_QUERIES) == 8


def test_list_queries_bind_filter_values():
    compiled = str(LIST_QUERIES[(True, True, True)])
    assert ":status" in compiled
    assert ":priority" in compiled
    assert ":resident_id" in compiled


@pytest.mark.anyio
async def test_initialize_is_idempotent(sql_store):
    await sql_store.initialize()
    await sql_store.initialize()
    assert len(await sql_store.list_residents()) == 2


@pytest.mark.anyio
async def test_ids_beyond_integer_range_are_absent(sql_store):
    created = await sql_store.add_complaint(_new())
    too_big = 2**63

    assert await sql_store.get_resident(too_big) is None
    assert await sql_store.get_complaint(too_big) is None
    assert await sql_store.update_status(too_big, ComplaintStatus.STARTED, datetime.now(timezone.utc)) is False
    assert await sql_store.list_complaints(ComplaintFilter(resident_id=too_big)) == []
    assert await sql_store.list_complaints(ComplaintFilter(resident_id=-too_big - 1)) == []

    assert (await sql_store.get_complaint(created.complaint_id)).status is ComplaintStatus.NOT_STARTED


@pytest.mark.anyio
async def test_attachments_are_echoed_but_not_persisted(sql_store):
    created = await sql_store.add_complaint(_new(attachment_paths=("uploads/leak.jpg",)))
    assert created.attachment_paths == ("uploads/leak.jpg",)

    fetched = await sql_store.get_complaint(created.complaint_id)
    assert fetched.attachment_paths == ()


@pytest.mark.anyio
async def test_timestamps_are_stored_as_canonical_text(sql_store):
    created = await sql_store.add_complaint(_new())
    await sql_store.update_status(
        created.complaint_id,
        ComplaintStatus.STARTED,
        datetime(2026, 10, 18, 9, 15, 0, 42, tzinfo=timezone.utc),
    )

    async with sql_store._engine.connect() as conn:
        row = (await conn.execute(
            text('SELECT "CreatedAtUtc", "UpdatedAtUtc", "Status", "Priority" FROM "Complaints" WHERE "ComplaintId" = :id'),
            {"id": created.complaint_id},
        )).one()

    assert row[0] == "2026-10-17T08:30:00.000000+00:00"
    assert row[1] == "2026-10-18T09:15:00.000042+00:00"
    assert row[2] == "STARTED"
    assert row[3] == "NORMAL"


@pytest.mark.anyio
async def test_ids_survive_restart_and_are_not_reused(database_url):
    store = SqlComplaintStore(create_engine_for(database_url))
    await store.initialize()
    await seed_default_residents(store)
    first = await store.add_complaint(_new())
    second = await store.add_complaint(_new())
    await store.close()

    # Remove the newest row behind the store's back, then reopen
    engine = create_engine_for(database_url)
    async with engine.begin() as conn:
        await conn.execute(text('DELETE FROM "Complaints" WHERE "ComplaintId" = :id'), {"id": second.complaint_id})
    await engine.dispose()

    reopened = SqlComplaintStore(create_engine_for(database_url))
    await reopened.initialize()
    third = await reopened.add_complaint(_new())
    assert await reopened.get_complaint(first.complaint_id) is not None
    assert third.complaint_id > second.complaint_id
    await reopened.close()


@pytest.mark.anyio
async def test_corrupt_status_surfaces_as_corrupt_data(sql_store):
    created = await sql_store.add_complaint(_new())
    async with sql_store._engine.begin() as conn:
        await conn.execute(
            text('UPDATE "Complaints" SET "Status" = :status WHERE "ComplaintId" = :id'),
            {"status": "ESCALATED", "id": created.complaint_id},
        )

    with pytest.raises(CorruptDataError):
        await sql_store.get_complaint(created.complaint_id)
    with pytest.raises(CorruptDataError):
        await sql_store.list_complaints(ComplaintFilter())


@pytest.mark.anyio
async def test_filter_values_are_not_interpolated(sql_store):
    await sql_store.add_complaint(_new())

    # A value shaped like SQL only ever matches literally
    async with sql_store._engine.connect() as conn:
        result = await conn.execute(LIST_QUERIES[(True, False, False)], {"status": "NOT_STARTED' OR '1'='1"})
        assert result.all() == []


# =============================================================================
# In-memory backend
# =============================================================================

@pytest.mark.anyio
async def test_in_memory_store_keeps_attachments():
    store = InMemoryComplaintStore()
    await store.add_resident(Resident(resident_id=1, name="Alice", unit="A", email="a@example.com"))
    created = await store.add_complaint(_new(attachment_paths=("a.jpg", "b.jpg")))

    assert (await store.get_complaint(created.complaint_id)).attachment_paths == ("a.jpg", "b.jpg")


@pytest.mark.anyio
async def test_in_memory_reads_cannot_change_stored_attachments():
    store = InMemoryComplaintStore()
    created = await store.add_complaint(_new(attachment_paths=("x.jpg",)))

    fetched = await store.get_complaint(created.complaint_id)
    with pytest.raises(AttributeError):
        fetched.attachment_paths.append("injected.jpg")
    listed = await store.list_complaints(ComplaintFilter())
    with pytest.raises(AttributeError):
        listed[0].attachment_paths.clear()

    assert (await store.get_complaint(created.complaint_id)).attachment_paths == ("x.jpg",)


@pytest.mark.anyio
async def test_in_memory_update_replaces_the_record():
    store = InMemoryComplaintStore()
    created = await store.add_complaint(_new())
    when = datetime(2026, 10, 19, tzinfo=timezone.utc)

    assert await store.update_status(created.complaint_id, ComplaintStatus.STARTED, when)

    updated = await store.get_complaint(created.complaint_id)
    assert updated.status is ComplaintStatus.STARTED
    assert updated.updated_at_utc == when
    assert created.status is ComplaintStatus.NOT_STARTED


def test_create_store_selects_backend(database_url):
    assert isinstance(create_store("memory", database_url), InMemoryComplaintStore)
    assert isinstance(create_store("database", database_url), SqlComplaintStore)
    with pytest.raises(ValueError):
        create_store("redis", database_url)
