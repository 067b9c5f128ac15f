import logging
import math
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from wipshare.core.errors import QuotaExceeded
from wipshare.modules.quota.evaluator import UsageSnapshot
from wipshare.modules.tiers.models import UNLIMITED
from wipshare.modules.tiers.schemas import TierLimits
from wipshare.modules.usage.models import Usage
from wipshare.modules.usage.repository import UsageRepository

logger = logging.getLogger(__name__)

GB = 1024 ** 3

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _aware(dt: datetime) -> datetime:
    # sqlite hands back naive datetimes even for timezone-aware columns
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)

def next_period_end(now: datetime) -> datetime:
    """First instant of the next UTC month."""
    if now.month == 12:
        return datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)
    return datetime(now.year, now.month + 1, 1, tzinfo=timezone.utc)

def _percentage(current: float, limit: float) -> float:
    if limit == UNLIMITED or limit <= 0:
        return 0.0
    return current * 100 / limit

class UsageService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = UsageRepository(session)

    async def get_or_create(self, user_id: str) -> Usage:
        now = _now()
        obj = await self.repo.get(user_id)
        if obj is None:
            return await self.repo.create(user_id, period_start=now, period_end=next_period_end(now))
        if now >= _aware(obj.period_end):
            logger.info("Resetting monthly usage for user=%s", user_id)
            obj = await self.repo.reset_period(obj, period_start=now, period_end=next_period_end(now))
        return obj

    async def snapshot(self, user_id: str) -> UsageSnapshot:
        obj = await self.get_or_create(user_id)
        return UsageSnapshot(
            track_count=obj.current_tracks,
            storage_bytes=obj.current_storage,
            bandwidth_bytes=obj.current_bandwidth,
        )

    async def record_upload(self, user_id: str, size_bytes: int, track_id: str, limits: TierLimits) -> None:
        await self.get_or_create(user_id)
        ok = await self.repo.increment_upload(
            user_id, size_bytes,
            max_tracks=limits.max_tracks,
            max_storage_bytes=limits.max_storage_bytes,
        )
        if not ok:
            # a concurrent confirmation consumed the remaining headroom
            current = await self.repo.get(user_id)
            dimension = "storageBytes"
            if limits.max_tracks != UNLIMITED and current.current_tracks + 1 > limits.max_tracks:
                dimension = "trackCount"
            raise QuotaExceeded(f"{dimension} limit reached", dimension=dimension)
        await self.repo.log(user_id, "upload", track_id, size_bytes, {"trackId": track_id, "fileSize": size_bytes})

    async def record_deletion(self, user_id: str, size_bytes: int, track_id: str) -> None:
        await self.get_or_create(user_id)
        await self.repo.decrement_storage(user_id, size_bytes)
        await self.repo.log(user_id, "delete", track_id, size_bytes, {"trackId": track_id, "fileSize": size_bytes})

    async def record_play(self, user_id: str, track_id: str, bandwidth_bytes: int) -> None:
        await self.get_or_create(user_id)
        await self.repo.increment_play(user_id, bandwidth_bytes)
        await self.repo.log(user_id, "play", track_id, bandwidth_bytes, {"trackId": track_id, "bandwidth": bandwidth_bytes})

    async def usage_stats(self, user_id: str, tier: str, limits: TierLimits) -> dict:
        obj = await self.get_or_create(user_id)
        await self.session.commit()
        now = _now()
        storage_gb = obj.current_storage / GB
        bandwidth_gb = obj.current_bandwidth / GB
        storage_limit_gb = limits.max_storage_bytes / GB if limits.max_storage_bytes != UNLIMITED else UNLIMITED
        bandwidth_limit_gb = limits.max_bandwidth_bytes / GB if limits.max_bandwidth_bytes != UNLIMITED else UNLIMITED
        period_end = _aware(obj.period_end)
        return {
            "tier": tier,
            "usage": {
                "tracks": {
                    "current": obj.current_tracks,
                    "limit": limits.max_tracks,
                    "percentage": _percentage(obj.current_tracks, limits.max_tracks),
                },
                "storage": {
                    "current": storage_gb,
                    "limit": storage_limit_gb,
                    "percentage": _percentage(storage_gb, storage_limit_gb),
                    "unit": "GB",
                },
                "bandwidth": {
                    "current": bandwidth_gb,
                    "limit": bandwidth_limit_gb,
                    "percentage": _percentage(bandwidth_gb, bandwidth_limit_gb),
                    "unit": "GB",
                },
                "plays": {"current": obj.current_plays, "total": obj.total_plays},
            },
            "limits": {
                "maxTrackSizeBytes": limits.max_track_size_bytes,
                "maxTrackDurationSeconds": limits.max_track_duration_seconds,
                "features": limits.features.to_json(),
            },
            "period": {
                "start": _aware(obj.period_start),
                "end": period_end,
                "daysRemaining": max(0, math.ceil((period_end - now).total_seconds() / 86400)),
            },
        }
