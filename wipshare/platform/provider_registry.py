import logging
from fastapi import Request
from wipshare.core.config import Settings
from wipshare.platform.ports.object_storage import ObjectStoragePort
from wipshare.platform.adapters.storage_local import LocalFilesystemStorage
from wipshare.platform.adapters.storage_s3 import S3Storage

logger = logging.getLogger(__name__)

class ProviderRegistry:
    """Process-wide SDK clients, built once at startup and closed on shutdown.

    An instance lives on ``app.state.providers``; handlers receive clients
    through the dependencies below instead of importing module globals.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._object_storage: ObjectStoragePort | None = None

    def start(self) -> "ProviderRegistry":
        if self.settings.OBJECT_STORAGE_PROVIDER == "s3":
            self._object_storage = S3Storage(
                bucket=self.settings.S3_BUCKET,
                region=self.settings.S3_REGION,
                endpoint_url=self.settings.S3_ENDPOINT_URL,
                access_key=self.settings.S3_ACCESS_KEY,
                secret_key=self.settings.S3_SECRET_KEY,
                expires_seconds=self.settings.PRESIGN_EXPIRES_SECONDS,
            )
        else:
            self._object_storage = LocalFilesystemStorage(
                self.settings.LOCAL_STORAGE_ROOT,
                expires_seconds=self.settings.PRESIGN_EXPIRES_SECONDS,
            )
        logger.info("Object storage provider: %s", self.settings.OBJECT_STORAGE_PROVIDER)
        return self

    def close(self) -> None:
        if self._object_storage is not None:
            self._object_storage.close()
            self._object_storage = None

    @property
    def object_storage(self) -> ObjectStoragePort:
        if self._object_storage is None:
            raise RuntimeError("ProviderRegistry used before start()")
        return self._object_storage

def get_object_storage(request: Request) -> ObjectStoragePort:
    return request.app.state.providers.object_storage
