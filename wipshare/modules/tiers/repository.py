from typing import Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.modules.tiers.models import TierLimit
from wipshare.modules.tiers.schemas import TierLimits

class TierRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, tier: str) -> TierLimit | None:
        res = await self.session.execute(select(TierLimit).where(TierLimit.tier == tier))
        return res.scalar_one_or_none()

    async def list(self) -> Sequence[TierLimit]:
        res = await self.session.execute(select(TierLimit).order_by(TierLimit.tier.asc()))
        return res.scalars().all()

    async def upsert(self, tier: str, limits: TierLimits) -> TierLimit:
        # Full replace: every column is overwritten. Assigning an unchanged value
        # leaves the attribute clean, so re-seeding identical data issues no UPDATE.
        values = limits.model_dump(exclude={"features"})
        values["features"] = limits.features.to_json()
        obj = await self.get(tier)
        if obj is None:
            obj = TierLimit(tier=tier, **values)
            self.session.add(obj)
        else:
            for k, v in values.items():
                setattr(obj, k, v)
        await self.session.flush()
        return obj
