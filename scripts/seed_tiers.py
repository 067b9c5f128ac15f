import asyncio
import os
import sys

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from wipshare.core.db import SessionLocal, engine, init_models
from wipshare.modules.tiers.service import seed_tiers

async def main():
    """
    Create or update the free/pro/enterprise tier limits. Safe to run repeatedly.
    """
    print("Seeding tier limits...")
    await init_models()
    try:
        async with SessionLocal() as session:
            for tier in await seed_tiers(session):
                print(f"  - Created/updated {tier} tier")
    finally:
        await engine.dispose()
    print("Tier limits seeded successfully!")

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as e:
        print(f"Error seeding tier limits: {e}", file=sys.stderr)
        sys.exit(1)
