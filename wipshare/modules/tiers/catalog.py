from wipshare.modules.tiers.models import UNLIMITED
from wipshare.modules.tiers.schemas import TierFeatures, TierLimits

MB = 1024 * 1024
GB = 1024 * MB

DEFAULT_TIERS: dict[str, TierLimits] = {
    "free": TierLimits(
        max_tracks=10,
        max_storage_bytes=1 * GB,
        max_bandwidth_bytes=5 * GB,
        max_track_size_bytes=50 * MB,
        max_track_duration_seconds=600,  # 10 minutes
        features=TierFeatures(public_tracks=True),
    ),
    "pro": TierLimits(
        max_tracks=100,
        max_storage_bytes=10 * GB,
        max_bandwidth_bytes=50 * GB,
        max_track_size_bytes=200 * MB,
        max_track_duration_seconds=1800,  # 30 minutes
        features=TierFeatures(public_tracks=True, private_tracks=True, analytics=True, collaboration=True),
    ),
    "enterprise": TierLimits(
        max_tracks=UNLIMITED,
        max_storage_bytes=100 * GB,
        max_bandwidth_bytes=500 * GB,
        max_track_size_bytes=500 * MB,
        max_track_duration_seconds=7200,  # 2 hours
        features=TierFeatures(
            public_tracks=True, private_tracks=True, analytics=True, collaboration=True, custom_branding=True
        ),
    ),
}

def default_limits(tier: str) -> TierLimits:
    return DEFAULT_TIERS.get(tier, DEFAULT_TIERS["free"])
