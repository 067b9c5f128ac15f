from datetime import datetime
from pydantic import BaseModel, Field
from wipshare.core.validation import GateSchema

class PresignUploadRequest(GateSchema):
    filename: str = Field(min_length=1, max_length=255)
    is_public: bool = False
    file_size: int = Field(ge=1)
    duration_seconds: int = Field(default=0, ge=0)

    __messages__ = {
        ("filename", "missing"): "Filename is required",
        ("filename", "string_too_short"): "Filename is required",
        ("fileSize", "missing"): "File size is required",
        ("fileSize", "greater_than_equal"): "File size must be at least 1 byte",
    }

class PresignDownloadRequest(GateSchema):
    key: str = Field(min_length=1, max_length=512)

class PresignUploadOut(BaseModel):
    url: str
    key: str
    expires_at: datetime

class PresignDownloadOut(BaseModel):
    url: str
    expires_at: datetime
