from datetime import datetime
from pydantic import BaseModel

class UserOut(BaseModel):
    id: str
    email: str | None
    tier: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
