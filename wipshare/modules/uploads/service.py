import asyncio
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.modules.quota.evaluator import UPLOAD_DIMENSIONS, QuotaDelta, check_quota
from wipshare.modules.tiers.schemas import TierFeature
from wipshare.modules.tiers.service import TierService
from wipshare.modules.uploads.keys import derive_key
from wipshare.modules.usage.service import UsageService
from wipshare.modules.users.models import User
from wipshare.platform.ports.object_storage import ObjectStoragePort, PresignedGrant

logger = logging.getLogger(__name__)

def visibility_feature(is_public: bool) -> TierFeature:
    return TierFeature.PUBLIC_TRACKS if is_public else TierFeature.PRIVATE_TRACKS

class UploadService:
    def __init__(self, session: AsyncSession, storage: ObjectStoragePort):
        self.session = session
        self.storage = storage
        self.tiers = TierService(session)
        self.usage = UsageService(session)

    async def issue_upload_url(self, user: User, filename: str, is_public: bool, *, size_bytes: int,
                               duration_seconds: int = 0) -> PresignedGrant:
        limits = await self.tiers.get_limits(user.tier)
        snapshot = await self.usage.snapshot(user.id)
        await self.session.commit()
        decision = check_quota(
            limits, snapshot,
            QuotaDelta.for_upload(size_bytes, duration_seconds),
            required_features=[visibility_feature(is_public)],
            dimensions=UPLOAD_DIMENSIONS,
        )
        if not decision.allowed:
            logger.info("Upload denied for user=%s tier=%s: %s", user.id, user.tier, decision.reason)
        decision.raise_for_denial()

        key = derive_key(user.id, filename, is_public)
        grant = self.storage.presign_upload(key, content_length=size_bytes)
        logger.info("Issued upload URL for user=%s key=%s", user.id, key)
        return grant

    def issue_download_url(self, key: str) -> PresignedGrant:
        return self.storage.presign_download(key)

    async def delete_object(self, key: str) -> None:
        # the only call that performs network I/O; keep it off the event loop
        await asyncio.to_thread(self.storage.delete, key)
        logger.info("Deleted object key=%s", key)
