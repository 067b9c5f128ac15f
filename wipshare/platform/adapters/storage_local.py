import os
from datetime import datetime, timedelta, timezone
from urllib.parse import quote
from wipshare.core.errors import NotFound
from wipshare.platform.ports.object_storage import ObjectStoragePort, PresignedGrant

class LocalFilesystemStorage(ObjectStoragePort):
    def __init__(self, root: str, expires_seconds: int = 3600):
        self.root = os.path.abspath(root)
        self.expires_seconds = expires_seconds
        os.makedirs(self.root, exist_ok=True)

    def _path(self, key: str) -> str:
        safe = key.strip("/").replace("..", "")
        return os.path.join(self.root, safe)

    def _grant(self, key: str, method, expires_seconds: int | None) -> PresignedGrant:
        # For local dev there is nothing to sign; the URL just points at the file.
        expires = expires_seconds or self.expires_seconds
        return PresignedGrant(
            url=f"file://{quote(self._path(key))}",
            key=key,
            method=method,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires),
        )

    def presign_upload(self, key: str, content_length: int, expires_seconds: int | None = None) -> PresignedGrant:
        # the size is enforced when the track is confirmed via object_size()
        os.makedirs(os.path.dirname(self._path(key)), exist_ok=True)
        return self._grant(key, "PUT", expires_seconds)

    def presign_download(self, key: str, expires_seconds: int | None = None) -> PresignedGrant:
        return self._grant(key, "GET", expires_seconds)

    def object_size(self, key: str) -> int:
        path = self._path(key)
        if not os.path.exists(path):
            raise NotFound("Object not found")
        return os.path.getsize(path)

    def delete(self, key: str) -> None:
        path = self._path(key)
        if not os.path.exists(path):
            raise NotFound("Object not found")
        os.remove(path)

    def close(self) -> None:
        pass
