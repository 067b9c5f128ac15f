from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Protocol, runtime_checkable

@dataclass(frozen=True)
class PresignedGrant:
    # Secret-bearing and single-purpose: one method on one key until expires_at.
    url: str
    key: str
    method: Literal["PUT", "GET"]
    expires_at: datetime

@runtime_checkable
class ObjectStoragePort(Protocol):
    def presign_upload(self, key: str, content_length: int, expires_seconds: int | None = None) -> PresignedGrant: ...

    def presign_download(self, key: str, expires_seconds: int | None = None) -> PresignedGrant: ...

    def object_size(self, key: str) -> int: ...

    def delete(self, key: str) -> None: ...

    def close(self) -> None: ...
