"""Merchant seeding script.

Creates the merchants from config/merchants.yaml (or a given file) whose
slug is not in the database yet. Run this after database migrations.

Usage:
    docker compose exec gateway python scripts/seed_merchants.py [path/to/merchants.yaml]
"""

import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.database import AsyncSessionLocal
from src.registry.repository import list_tenants_with_api_counts
from src.registry.service import sync_tenants_from_config


async def seed_merchants(config_path: str | None = None):
    async with AsyncSessionLocal() as db:
        created = await sync_tenants_from_config(db, config_path)
        rows = await list_tenants_with_api_counts(db)

    print(f"Created: {created}")
    for tenant, api_count in rows:
        print(f"  {tenant.id:>4}  {tenant.slug:<20} {api_count} APIs")
    print(f"Total: {len(rows)}")


if __name__ == "__main__":
    print("Seeding merchants...\n")
    asyncio.run(seed_merchants(sys.argv[1] if len(sys.argv) > 1 else None))
