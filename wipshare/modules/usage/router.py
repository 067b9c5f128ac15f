from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.core.db import get_session
from wipshare.modules.tiers.service import TierService
from wipshare.modules.usage.service import UsageService
from wipshare.modules.users.models import User
from wipshare.modules.users.router import current_user

router = APIRouter()

@router.get("/stats")
async def usage_stats(user: User = Depends(current_user), session: AsyncSession = Depends(get_session)):
    limits = await TierService(session).get_limits(user.tier)
    return await UsageService(session).usage_stats(user.id, user.tier, limits)
