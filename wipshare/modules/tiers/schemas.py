import uuid
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class TierFeature(str, Enum):
    PUBLIC_TRACKS = "publicTracks"
    PRIVATE_TRACKS = "privateTracks"
    ANALYTICS = "analytics"
    COLLABORATION = "collaboration"
    CUSTOM_BRANDING = "customBranding"

class TierFeatures(BaseModel):
    """Closed set of feature flags; an unrecognized flag is a validation error."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True, frozen=True)

    public_tracks: bool = False
    private_tracks: bool = False
    analytics: bool = False
    collaboration: bool = False
    custom_branding: bool = False

    def enabled(self, feature: TierFeature) -> bool:
        return bool(self.model_dump(by_alias=True).get(feature.value, False))

    def to_json(self) -> dict[str, bool]:
        return self.model_dump(by_alias=True)

class TierLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_tracks: int = Field(ge=-1)
    max_storage_bytes: int = Field(ge=-1)
    max_bandwidth_bytes: int = Field(ge=-1)
    max_track_size_bytes: int = Field(ge=-1)
    max_track_duration_seconds: int = Field(ge=-1)
    features: TierFeatures = TierFeatures()

    @classmethod
    def from_row(cls, row) -> "TierLimits":
        return cls(
            max_tracks=row.max_tracks,
            max_storage_bytes=row.max_storage_bytes,
            max_bandwidth_bytes=row.max_bandwidth_bytes,
            max_track_size_bytes=row.max_track_size_bytes,
            max_track_duration_seconds=row.max_track_duration_seconds,
            features=TierFeatures.model_validate(row.features or {}),
        )

class TierLimitOut(BaseModel):
    id: uuid.UUID
    tier: str
    max_tracks: int
    max_storage_bytes: int
    max_bandwidth_bytes: int
    max_track_size_bytes: int
    max_track_duration_seconds: int
    features: dict[str, bool]
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
