from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, text, TIMESTAMP
from wipshare.core.base import Base, utcnow

class User(Base):
    __tablename__ = "user_account"

    # Subject id from the identity provider; never taken from a request body.
    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    tier: Mapped[str] = mapped_column(String(32), default="free")
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, server_default=text("CURRENT_TIMESTAMP")
    )
