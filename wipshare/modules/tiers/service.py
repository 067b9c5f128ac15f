import logging
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.modules.tiers.catalog import DEFAULT_TIERS, default_limits
from wipshare.modules.tiers.models import TierLimit
from wipshare.modules.tiers.repository import TierRepository
from wipshare.modules.tiers.schemas import TierLimits

logger = logging.getLogger(__name__)

class TierService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = TierRepository(session)

    async def upsert_tier(self, tier: str, limits: TierLimits) -> TierLimit:
        obj = await self.repo.upsert(tier, limits)
        await self.session.commit()
        return obj

    async def get_tier(self, tier: str) -> TierLimit | None:
        return await self.repo.get(tier)

    async def list_tiers(self) -> Sequence[TierLimit]:
        return await self.repo.list()

    async def get_limits(self, tier: str) -> TierLimits:
        """Limits for ``tier``; an unseeded tier is created from the built-in defaults."""
        row = await self.repo.get(tier)
        if row is None:
            logger.warning("Tier %r not seeded; creating it from defaults", tier)
            row = await self.repo.upsert(tier, default_limits(tier))
            await self.session.commit()
        return TierLimits.from_row(row)

async def seed_tiers(session: AsyncSession) -> list[str]:
    service = TierService(session)
    seeded = []
    for tier, limits in DEFAULT_TIERS.items():
        await service.upsert_tier(tier, limits)
        logger.info("Created/updated %s tier", tier)
        seeded.append(tier)
    return seeded
