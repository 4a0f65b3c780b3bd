"""Health / sanity endpoints."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/greet")
async def greet() -> dict[str, str]:
    """Sanity check that the API is up."""
    return {"message": "HOA API up"}
