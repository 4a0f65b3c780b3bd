"""
HOA Complaints - Shared Test Fixtures
Stores for both backends, the service on top of them, and an HTTP client.
"""

import os
import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport

# Configure test environment BEFORE importing app
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SEED_RESIDENTS"] = "true"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["STATIC_DIR"] = "tests-no-static"

from hoa_complaints.core.database import create_engine_for
from hoa_complaints.main import app
from hoa_complaints.models.domain import CreateComplaintRequest
from hoa_complaints.services.complaints import ComplaintService
from hoa_complaints.services.residents import ResidentLookup, seed_default_residents
from hoa_complaints.services.store import ComplaintStore, InMemoryComplaintStore, SqlComplaintStore


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def anyio_backend():
    """Use asyncio for async tests."""
    return "asyncio"


@pytest.fixture
def database_url(tmp_path) -> str:
    """A fresh SQLite file per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'test_hoa.db'}"


@pytest.fixture(params=["memory", "sqlite"])
async def store(request, database_url) -> AsyncGenerator[ComplaintStore, None]:
    """Seeded store, once per backend."""
    if request.param == "memory":
        backend: ComplaintStore = InMemoryComplaintStore()
    else:
        backend = SqlComplaintStore(create_engine_for(database_url))
    await backend.initialize()
    await seed_default_residents(backend)
    yield backend
    await backend.close()


@pytest.fixture
async def sql_store(database_url) -> AsyncGenerator[SqlComplaintStore, None]:
    """Seeded SQLite-backed store, for behaviour specific to the durable backend."""
    backend = SqlComplaintStore(create_engine_for(database_url))
    await backend.initialize()
    await seed_default_residents(backend)
    yield backend
    await backend.close()


@pytest.fixture
def service(store) -> ComplaintService:
    return ComplaintService(store, ResidentLookup(store))


@pytest.fixture
async def client(store) -> AsyncGenerator[AsyncClient, None]:
    """Async test client wired to the parametrized store (lifespan is not run)."""
    app.state.store = store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Test Data Fixtures
# =============================================================================

@pytest.fixture
def leak_request() -> CreateComplaintRequest:
    """The canonical example complaint."""
    return CreateComplaintRequest(
        resident_id=1,
        subject="Leak",
        description="Pipe leak in unit A",
    )


@pytest.fixture
def sample_complaint_json() -> dict:
    """Complaint body as a client would post it."""
    return {
        "residentId": 1,
        "subject": "  Broken light  ",
        "description": "  Hallway light out on floor 2  ",
        "priority": "high",
        "attachmentPaths": ["uploads/complaints/1/light.jpg", "  ", ""],
        "locationNote": "Near the elevator",
    }
