import uuid
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError
from wipshare.core.validation import GateSchema

Visibility = Literal["private", "project", "channel"]

# ---- Tracks ----

class TrackCreate(GateSchema):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)
    visibility: Visibility = "private"
    version: str = "001"
    tags: list[str] = Field(default_factory=list)
    channel_ids: list[str] = Field(default_factory=list)
    project_ids: list[str] = Field(default_factory=list)

    __messages__ = {
        ("title", "missing"): "Track title is required",
        ("title", "string_too_short"): "Track title is required",
        ("title", "string_too_long"): "Track title cannot exceed 200 characters",
        ("description", "string_type"): "Description must be a string",
        ("description", "string_too_long"): "Description cannot exceed 1000 characters",
        ("tags", "list_type"): "Tags must be a list",
    }

class TrackUpdate(GateSchema):
    # None means "not sent"; an explicit null is rejected below
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    visibility: Visibility | None = None
    version: str | None = None
    tags: list[str] | None = None
    channel_ids: list[str] | None = None
    project_ids: list[str] | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, v):
        if v is None:
            raise PydanticCustomError("null_not_allowed", "Value cannot be null")
        return v

    __messages__ = {
        ("title", "null_not_allowed"): "Track title cannot be empty",
        ("title", "string_too_short"): "Track title cannot be empty",
        ("title", "string_too_long"): "Track title cannot exceed 200 characters",
        ("description", "string_too_long"): "Description cannot exceed 1000 characters",
    }

class TrackConfirm(TrackCreate):
    """Track metadata sent once the client has PUT the file to its presigned URL."""
    key: str = Field(min_length=1, max_length=512)
    filename: str = Field(min_length=1, max_length=255)
    size_bytes: int = Field(ge=1)
    duration_seconds: int = Field(default=0, ge=0)

    __messages__ = {
        **TrackCreate.__messages__,
        ("key", "missing"): "Upload key is required",
    }

class TrackOut(BaseModel):
    id: uuid.UUID
    user_id: str
    title: str
    description: str | None
    visibility: str
    version: str
    tags: list[str] | None
    key: str
    filename: str
    size_bytes: int
    duration_seconds: int | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True

class TrackStreamOut(BaseModel):
    track: TrackOut
    download_url: str
    expires_at: datetime

# ---- Comments ----

class CommentCreate(GateSchema):
    content: str = Field(min_length=1, max_length=500)
    timestamp: float | None = Field(default=None, ge=0)
    parent_id: uuid.UUID | None = None

    __messages__ = {
        ("content", "missing"): "Comment content is required",
        ("content", "string_too_short"): "Comment cannot be empty",
        ("content", "string_too_long"): "Comment cannot exceed 500 characters",
        ("timestamp", "greater_than_equal"): "Timestamp cannot be negative",
    }

class CommentOut(BaseModel):
    id: uuid.UUID
    track_id: uuid.UUID
    user_id: str
    content: str
    timestamp: float | None
    parent_id: uuid.UUID | None
    created_at: datetime | None = None

    class Config:
        from_attributes = True

track_schemas = {"create": TrackCreate, "update": TrackUpdate}
comment_schemas = {"create": CommentCreate}
