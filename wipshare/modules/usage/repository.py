from datetime import datetime
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.modules.tiers.models import UNLIMITED
from wipshare.modules.usage.models import Usage, UsageLog

class UsageRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> Usage | None:
        # counters are bumped with bulk UPDATEs, so always reload rather than trust the identity map
        q = select(Usage).where(Usage.user_id == user_id).execution_options(populate_existing=True)
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def create(self, user_id: str, *, period_start: datetime, period_end: datetime) -> Usage:
        """Insert the counters row, or return the one a concurrent request just inserted."""
        try:
            async with self.session.begin_nested():
                obj = Usage(
                    user_id=user_id,
                    current_tracks=0, current_storage=0, current_bandwidth=0, current_plays=0,
                    total_tracks=0, total_storage=0, total_bandwidth=0, total_plays=0,
                    period_start=period_start, period_end=period_end,
                )
                self.session.add(obj)
        except IntegrityError:
            obj = await self.get(user_id)
        return obj

    async def reset_period(self, obj: Usage, *, period_start: datetime, period_end: datetime) -> Usage:
        obj.current_bandwidth = 0
        obj.current_plays = 0
        obj.period_start = period_start
        obj.period_end = period_end
        await self.session.flush()
        return obj

    async def increment_upload(self, user_id: str, size_bytes: int, *, max_tracks: int, max_storage_bytes: int) -> bool:
        """Atomically add one track of ``size_bytes``; False if a bounded limit would be passed.

        The limit check lives in the UPDATE's WHERE clause so two concurrent
        confirmations cannot both push the counters past the tier limit.
        """
        q = update(Usage).where(Usage.user_id == user_id)
        if max_tracks != UNLIMITED:
            q = q.where(Usage.current_tracks + 1 <= max_tracks)
        if max_storage_bytes != UNLIMITED:
            q = q.where(Usage.current_storage + size_bytes <= max_storage_bytes)
        q = q.values(
            current_tracks=Usage.current_tracks + 1,
            current_storage=Usage.current_storage + size_bytes,
            total_tracks=Usage.total_tracks + 1,
            total_storage=Usage.total_storage + size_bytes,
        ).execution_options(synchronize_session=False)
        res = await self.session.execute(q)
        return res.rowcount == 1

    async def decrement_storage(self, user_id: str, size_bytes: int) -> None:
        q = update(Usage).where(Usage.user_id == user_id).values(
            current_tracks=Usage.current_tracks - 1,
            current_storage=Usage.current_storage - size_bytes,
        ).execution_options(synchronize_session=False)
        await self.session.execute(q)

    async def increment_play(self, user_id: str, bandwidth_bytes: int) -> None:
        q = update(Usage).where(Usage.user_id == user_id).values(
            current_plays=Usage.current_plays + 1,
            current_bandwidth=Usage.current_bandwidth + bandwidth_bytes,
            total_plays=Usage.total_plays + 1,
            total_bandwidth=Usage.total_bandwidth + bandwidth_bytes,
        ).execution_options(synchronize_session=False)
        await self.session.execute(q)

    async def log(self, user_id: str, action: str, resource: str, amount: int, details: dict | None = None) -> UsageLog:
        obj = UsageLog(user_id=user_id, action=action, resource=resource, amount=amount, details=details)
        self.session.add(obj)
        await self.session.flush()
        return obj
