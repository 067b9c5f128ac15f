import uuid
from typing import Sequence
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.modules.tracks.models import Track, Comment

class TrackRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user_id: str, **data) -> Track:
        obj = Track(user_id=user_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, track_id: uuid.UUID) -> Track | None:
        res = await self.session.execute(select(Track).where(Track.id == track_id))
        return res.scalar_one_or_none()

    async def list_for_user(self, user_id: str, *, limit: int = 50, offset: int = 0) -> Sequence[Track]:
        q = select(Track).where(Track.user_id == user_id).order_by(Track.created_at.desc()).limit(limit).offset(offset)
        res = await self.session.execute(q)
        return res.scalars().all()

    async def update_fields(self, obj: Track, **data) -> Track:
        for k, v in data.items():
            if v is not None:
                setattr(obj, k, v)
        await self.session.flush()
        return obj

    async def delete(self, obj: Track) -> None:
        await self.session.execute(delete(Comment).where(Comment.track_id == obj.id))
        await self.session.delete(obj)
        await self.session.flush()

class CommentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, track_id: uuid.UUID, user_id: str, **data) -> Comment:
        obj = Comment(track_id=track_id, user_id=user_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, comment_id: uuid.UUID) -> Comment | None:
        res = await self.session.execute(select(Comment).where(Comment.id == comment_id))
        return res.scalar_one_or_none()

    async def list_for_track(self, track_id: uuid.UUID) -> Sequence[Comment]:
        q = select(Comment).where(Comment.track_id == track_id).order_by(Comment.created_at.asc())
        res = await self.session.execute(q)
        return res.scalars().all()
