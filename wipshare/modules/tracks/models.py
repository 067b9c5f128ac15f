import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Integer, BigInteger, Float, JSON, ForeignKey
from wipshare.core.base import Base, TimestampedMixin

class Track(Base, TimestampedMixin):
    user_id: Mapped[str] = mapped_column(String(128), index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    visibility: Mapped[str] = mapped_column(String(16), default="private")  # private | project | channel
    version: Mapped[str] = mapped_column(String(16), default="001")
    tags: Mapped[list] = mapped_column(JSON, default=list)

    # storage object written by the client through a presigned URL
    key: Mapped[str] = mapped_column(String(512), unique=True)
    filename: Mapped[str] = mapped_column(String(255))
    size_bytes: Mapped[int] = mapped_column(BigInteger)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)

class Comment(Base, TimestampedMixin):
    track_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("track.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[str] = mapped_column(String(128))
    content: Mapped[str] = mapped_column(String(500))
    timestamp: Mapped[float | None] = mapped_column(Float, nullable=True)  # seconds into the track
    parent_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("comment.id"), nullable=True)
