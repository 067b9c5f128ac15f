from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, BigInteger, JSON, TIMESTAMP
from wipshare.core.base import Base, TimestampedMixin

class Usage(Base, TimestampedMixin):
    user_id: Mapped[str] = mapped_column(String(128), unique=True, index=True)

    # current counters; bandwidth and plays reset at period_end, tracks and storage persist
    current_tracks: Mapped[int] = mapped_column(Integer, default=0)
    current_storage: Mapped[int] = mapped_column(BigInteger, default=0)
    current_bandwidth: Mapped[int] = mapped_column(BigInteger, default=0)
    current_plays: Mapped[int] = mapped_column(Integer, default=0)

    # lifetime totals
    total_tracks: Mapped[int] = mapped_column(Integer, default=0)
    total_storage: Mapped[int] = mapped_column(BigInteger, default=0)
    total_bandwidth: Mapped[int] = mapped_column(BigInteger, default=0)
    total_plays: Mapped[int] = mapped_column(Integer, default=0)

    period_start: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))
    period_end: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True))

class UsageLog(Base, TimestampedMixin):
    user_id: Mapped[str] = mapped_column(String(128), index=True)
    action: Mapped[str] = mapped_column(String(16))  # upload | delete | play
    resource: Mapped[str] = mapped_column(String(64))  # track id
    amount: Mapped[int] = mapped_column(BigInteger)  # bytes
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
