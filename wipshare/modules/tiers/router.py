from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.core.db import get_session
from wipshare.core.errors import NotFound
from wipshare.core.security import get_principal
from wipshare.modules.tiers.schemas import TierLimitOut
from wipshare.modules.tiers.service import TierService

router = APIRouter(dependencies=[Depends(get_principal)])

def svc(session: AsyncSession = Depends(get_session)) -> TierService:
    return TierService(session)

@router.get("", response_model=list[TierLimitOut])
async def list_tiers(service: TierService = Depends(svc)):
    return await service.list_tiers()

@router.get("/{tier}", response_model=TierLimitOut)
async def get_tier(tier: str, service: TierService = Depends(svc)):
    obj = await service.get_tier(tier)
    if not obj:
        raise NotFound("Tier not found")
    return obj
