"""Tier quota evaluation.

``check_quota`` is a pure function of the tier limits, a usage snapshot and
the requested delta. It never mutates usage; counters are bumped by the usage
service only after the guarded operation succeeds.

Dimensions are evaluated in a fixed order and the first violation is
reported. A limit of -1 means the dimension is unbounded. Callers pass the
subset relevant to the operation so a play is never refused because of a
track-count limit, and vice versa.
"""
from dataclasses import dataclass
from typing import Iterable
from wipshare.core.errors import QuotaExceeded
from wipshare.modules.tiers.models import UNLIMITED
from wipshare.modules.tiers.schemas import TierFeature, TierLimits

FEATURE_UNAVAILABLE = "feature not available for tier"


@dataclass(frozen=True)
class UsageSnapshot:
    track_count: int = 0
    storage_bytes: int = 0
    bandwidth_bytes: int = 0


@dataclass(frozen=True)
class QuotaDelta:
    track_count: int = 0
    storage_bytes: int = 0
    bandwidth_bytes: int = 0
    track_size_bytes: int = 0
    track_duration_seconds: int = 0

    @classmethod
    def for_upload(cls, size_bytes: int, duration_seconds: int = 0) -> "QuotaDelta":
        return cls(
            track_count=1,
            storage_bytes=size_bytes,
            track_size_bytes=size_bytes,
            track_duration_seconds=duration_seconds,
        )


# (dimension name, limit attribute, usage attribute or None for per-track dimensions, delta attribute)
DIMENSIONS: tuple[tuple[str, str, str | None, str], ...] = (
    ("trackCount", "max_tracks", "track_count", "track_count"),
    ("storageBytes", "max_storage_bytes", "storage_bytes", "storage_bytes"),
    ("bandwidthBytes", "max_bandwidth_bytes", "bandwidth_bytes", "bandwidth_bytes"),
    ("trackSizeBytes", "max_track_size_bytes", None, "track_size_bytes"),
    ("trackDurationSeconds", "max_track_duration_seconds", None, "track_duration_seconds"),
)

# Bandwidth does not gate uploads, and stored tracks do not gate playback.
UPLOAD_DIMENSIONS = ("trackCount", "storageBytes", "trackSizeBytes", "trackDurationSeconds")
PLAYBACK_DIMENSIONS = ("bandwidthBytes",)


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    dimension: str | None = None
    feature: TierFeature | None = None
    reason: str | None = None

    def raise_for_denial(self) -> None:
        if self.allowed:
            return
        raise QuotaExceeded(
            self.reason or "quota exceeded",
            dimension=self.dimension,
            feature=self.feature.value if self.feature else None,
        )


ALLOWED = QuotaDecision(allowed=True)


def check_quota(
    limits: TierLimits,
    usage: UsageSnapshot,
    delta: QuotaDelta,
    required_features: Iterable[TierFeature] = (),
    dimensions: Iterable[str] | None = None,
) -> QuotaDecision:
    """Evaluate ``delta`` against ``limits``; ``dimensions`` restricts which ones are checked."""
    selected = set(dimensions) if dimensions is not None else None
    for name, limit_attr, usage_attr, delta_attr in DIMENSIONS:
        if selected is not None and name not in selected:
            continue
        limit = getattr(limits, limit_attr)
        if limit == UNLIMITED:
            continue
        current = getattr(usage, usage_attr) if usage_attr else 0
        requested = getattr(delta, delta_attr)
        if current + requested > limit:
            return QuotaDecision(
                allowed=False,
                dimension=name,
                reason=f"{name} limit exceeded ({current + requested} > {limit})",
            )

    for feature in required_features:
        if not limits.features.enabled(feature):
            return QuotaDecision(
                allowed=False,
                feature=feature,
                reason=f"{FEATURE_UNAVAILABLE}: {feature.value}",
            )
    return ALLOWED
