from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, BigInteger, JSON
from wipshare.core.base import Base, TimestampedMixin

UNLIMITED = -1

class TierLimit(Base, TimestampedMixin):
    # One row per tier name; written only by upsert/seed, read at request time.
    tier: Mapped[str] = mapped_column(String(32), unique=True, index=True)
    max_tracks: Mapped[int] = mapped_column(Integer)  # -1 = unlimited
    max_storage_bytes: Mapped[int] = mapped_column(BigInteger)
    max_bandwidth_bytes: Mapped[int] = mapped_column(BigInteger)
    max_track_size_bytes: Mapped[int] = mapped_column(BigInteger)
    max_track_duration_seconds: Mapped[int] = mapped_column(Integer)
    features: Mapped[dict] = mapped_column(JSON, default=dict)  # {"privateTracks": true, ...}
