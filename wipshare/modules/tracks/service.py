import asyncio
import logging
import uuid
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.core.errors import Forbidden, NotFound, RequestValidationFailed
from wipshare.modules.quota.evaluator import PLAYBACK_DIMENSIONS, UPLOAD_DIMENSIONS, QuotaDelta, check_quota
from wipshare.modules.tiers.service import TierService
from wipshare.modules.tracks.models import Track, Comment
from wipshare.modules.tracks.repository import TrackRepository, CommentRepository
from wipshare.modules.tracks.schemas import TrackConfirm, TrackUpdate, CommentCreate
from wipshare.modules.uploads.keys import is_public_key, key_owner
from wipshare.modules.uploads.service import visibility_feature
from wipshare.modules.usage.service import UsageService
from wipshare.modules.users.models import User
from wipshare.modules.users.repository import UserRepository
from wipshare.platform.ports.object_storage import ObjectStoragePort, PresignedGrant

logger = logging.getLogger(__name__)

class TrackService:
    def __init__(self, session: AsyncSession, storage: ObjectStoragePort):
        self.session = session
        self.storage = storage
        self.tracks = TrackRepository(session)
        self.comments = CommentRepository(session)
        self.tiers = TierService(session)
        self.usage = UsageService(session)

    async def _visible_track(self, user: User, track_id: uuid.UUID) -> Track:
        obj = await self.tracks.get(track_id)
        if obj is None or (obj.user_id != user.id and obj.visibility == "private"):
            raise NotFound("Track not found")
        return obj

    async def _owned_track(self, user: User, track_id: uuid.UUID) -> Track:
        obj = await self.tracks.get(track_id)
        if obj is None or obj.user_id != user.id:
            raise NotFound("Track not found")
        return obj

    # ---- Tracks ----
    async def confirm_upload(self, user: User, payload: TrackConfirm) -> Track:
        """Persist a track for an object the client has already uploaded.

        Usage is charged for the size of the stored object, which must match
        the declared ``size_bytes``.
        """
        if key_owner(payload.key) != user.id:
            raise Forbidden("Upload key does not belong to you")

        try:
            stored_size = await asyncio.to_thread(self.storage.object_size, payload.key)
        except NotFound:
            raise NotFound("Uploaded object not found") from None
        if stored_size != payload.size_bytes:
            logger.warning("Size mismatch for key=%s: declared=%s stored=%s", payload.key, payload.size_bytes, stored_size)
            raise RequestValidationFailed(
                [{"field": "sizeBytes", "message": "File size does not match the uploaded object"}]
            )

        limits = await self.tiers.get_limits(user.tier)
        snapshot = await self.usage.snapshot(user.id)
        check_quota(
            limits, snapshot,
            QuotaDelta.for_upload(stored_size, payload.duration_seconds),
            required_features=[visibility_feature(is_public_key(payload.key))],
            dimensions=UPLOAD_DIMENSIONS,
        ).raise_for_denial()

        data = payload.model_dump(exclude={"channel_ids", "project_ids"})
        obj = await self.tracks.create(user.id, **data)
        await self.usage.record_upload(user.id, stored_size, str(obj.id), limits)
        await self.session.commit()
        logger.info("Track %s confirmed for user=%s key=%s", obj.id, user.id, obj.key)
        return obj

    async def get_track(self, user: User, track_id: uuid.UUID) -> Track:
        return await self._visible_track(user, track_id)

    async def list_tracks(self, user: User, *, limit: int = 50, offset: int = 0) -> Sequence[Track]:
        return await self.tracks.list_for_user(user.id, limit=limit, offset=offset)

    async def update_track(self, user: User, track_id: uuid.UUID, payload: TrackUpdate) -> Track:
        obj = await self._owned_track(user, track_id)
        data = payload.model_dump(exclude_unset=True, exclude={"channel_ids", "project_ids"})
        obj = await self.tracks.update_fields(obj, **data)
        await self.session.commit()
        return obj

    async def delete_track(self, user: User, track_id: uuid.UUID) -> None:
        obj = await self._owned_track(user, track_id)
        try:
            await asyncio.to_thread(self.storage.delete, obj.key)
        except NotFound:
            logger.warning("Object for track %s already gone: %s", obj.id, obj.key)
        size, key = obj.size_bytes, obj.key
        await self.tracks.delete(obj)
        await self.usage.record_deletion(user.id, size, str(track_id))
        await self.session.commit()
        logger.info("Track %s deleted for user=%s key=%s", track_id, user.id, key)

    async def stream_track(self, user: User, track_id: uuid.UUID) -> tuple[Track, PresignedGrant]:
        """Issue a download URL and charge the bytes to the owner's bandwidth."""
        obj = await self._visible_track(user, track_id)
        owner_tier = user.tier
        if obj.user_id != user.id:
            owner = await UserRepository(self.session).get(obj.user_id)
            owner_tier = owner.tier if owner else owner_tier
        limits = await self.tiers.get_limits(owner_tier)
        snapshot = await self.usage.snapshot(obj.user_id)
        check_quota(
            limits, snapshot, QuotaDelta(bandwidth_bytes=obj.size_bytes), dimensions=PLAYBACK_DIMENSIONS,
        ).raise_for_denial()

        grant = self.storage.presign_download(obj.key)
        await self.usage.record_play(obj.user_id, str(obj.id), obj.size_bytes)
        await self.session.commit()
        return obj, grant

    # ---- Comments ----
    async def add_comment(self, user: User, track_id: uuid.UUID, payload: CommentCreate) -> Comment:
        track = await self._visible_track(user, track_id)
        if payload.parent_id is not None:
            parent = await self.comments.get(payload.parent_id)
            if parent is None or parent.track_id != track.id:
                raise NotFound("Parent comment not found")
        obj = await self.comments.create(track.id, user.id, **payload.model_dump())
        await self.session.commit()
        return obj

    async def list_comments(self, user: User, track_id: uuid.UUID) -> Sequence[Comment]:
        track = await self._visible_track(user, track_id)
        return await self.comments.list_for_track(track.id)
