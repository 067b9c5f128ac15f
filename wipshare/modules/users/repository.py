from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.modules.users.models import User

class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> User | None:
        res = await self.session.execute(select(User).where(User.id == user_id))
        return res.scalar_one_or_none()

    async def get_or_create(self, user_id: str, *, email: str | None, tier: str) -> User:
        obj = await self.get(user_id)
        if obj is not None:
            return obj
        try:
            # savepoint: losing the insert race must not roll back the caller's transaction
            async with self.session.begin_nested():
                obj = User(id=user_id, email=email, tier=tier)
                self.session.add(obj)
        except IntegrityError:
            obj = await self.get(user_id)
        return obj
