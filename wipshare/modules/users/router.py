from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.core.config import settings
from wipshare.core.db import get_session
from wipshare.core.security import get_principal, Principal
from wipshare.modules.users.models import User
from wipshare.modules.users.repository import UserRepository
from wipshare.modules.users.schemas import UserOut

router = APIRouter()

async def current_user(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
) -> User:
    """The caller's user row, created on first sight with the default tier."""
    repo = UserRepository(session)
    obj = await repo.get(principal.user_id)
    if obj is None:
        obj = await repo.get_or_create(principal.user_id, email=principal.email, tier=settings.DEFAULT_TIER)
        await session.commit()
    return obj

@router.get("/me", response_model=UserOut)
async def me(user: User = Depends(current_user)):
    return user
