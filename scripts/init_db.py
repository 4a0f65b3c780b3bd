"""Create the Residents/Complaints tables and seed the default residents."""
import argparse
import asyncio
import sys
from typing import Optional
sys.path.insert(0, ".")

from hoa_complaints.core.config import Settings, get_settings
from hoa_complaints.core.database import Base, create_engine_for
from hoa_complaints.services.residents import seed_default_residents
from hoa_complaints.services.store import SqlComplaintStore


def resolve_database_url(override: Optional[str]) -> str:
    """--database-url goes through the same async-driver upgrade as DATABASE_URL."""
    if override:
        return Settings(database_url=override).database_url
    return get_settings().database_url


async def init_db(database_url: str, seed: bool) -> None:
    """Create tables (if missing) and optionally seed residents."""
    store = SqlComplaintStore(create_engine_for(database_url))
    try:
        await store.initialize()
        print(f"📦 Tables: {', '.join(Base.metadata.tables)}")
        if seed:
            inserted = await seed_default_residents(store)
            print(f"👥 Seeded {inserted} residents")
    finally:
        await store.close()

    print("\n✅ Database ready")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")
    parser.add_argument("--no-seed", action="store_true", help="Only create tables")
    args = parser.parse_args()

    asyncio.run(init_db(resolve_database_url(args.database_url), seed=not args.no_seed))
