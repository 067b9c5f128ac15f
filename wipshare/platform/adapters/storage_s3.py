import logging
from datetime import datetime, timedelta, timezone
import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from wipshare.core.errors import NotFound, StorageError
from wipshare.platform.ports.object_storage import ObjectStoragePort, PresignedGrant

logger = logging.getLogger(__name__)

class S3Storage(ObjectStoragePort):
    """S3-compatible storage (AWS, Cloudflare R2, MinIO).

    Signing is done by botocore; presigning is a local computation and never
    touches the network. Only ``object_size`` and ``delete`` perform requests,
    and they are not retried here.
    """

    def __init__(self, *, bucket: str, region: str, endpoint_url: str | None = None,
                 access_key: str | None = None, secret_key: str | None = None,
                 expires_seconds: int = 3600, client=None):
        if client is None:
            session = boto3.session.Session(
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
            client = session.client(
                "s3",
                endpoint_url=endpoint_url,
                config=Config(signature_version="s3v4", retries={"max_attempts": 1, "mode": "standard"}),
            )
        self.s3 = client
        self.bucket = bucket
        self.expires_seconds = expires_seconds

    def _presign(self, operation: str, method: str, params: dict, expires_seconds: int | None) -> PresignedGrant:
        expires = expires_seconds or self.expires_seconds
        issued_at = datetime.now(timezone.utc)
        try:
            url = self.s3.generate_presigned_url(
                operation,
                Params={"Bucket": self.bucket, **params},
                ExpiresIn=expires,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception("Failed to presign %s for key=%s", operation, params["Key"])
            raise StorageError(f"presign {operation} failed") from e
        return PresignedGrant(url=url, key=params["Key"], method=method, expires_at=issued_at + timedelta(seconds=expires))

    def presign_upload(self, key: str, content_length: int, expires_seconds: int | None = None) -> PresignedGrant:
        # content-length becomes a signed header: the PUT must carry exactly this many bytes
        return self._presign("put_object", "PUT", {"Key": key, "ContentLength": content_length}, expires_seconds)

    def presign_download(self, key: str, expires_seconds: int | None = None) -> PresignedGrant:
        return self._presign("get_object", "GET", {"Key": key}, expires_seconds)

    def _head(self, key: str) -> dict:
        try:
            return self.s3.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in ("404", "NoSuchKey", "NotFound"):
                raise NotFound("Object not found") from e
            logger.exception("Failed to look up object key=%s", key)
            raise StorageError("head failed") from e
        except BotoCoreError as e:
            logger.exception("Failed to look up object key=%s", key)
            raise StorageError("head failed") from e

    def object_size(self, key: str) -> int:
        return int(self._head(key)["ContentLength"])

    def delete(self, key: str) -> None:
        self._head(key)
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.exception("Failed to delete object key=%s", key)
            raise StorageError("delete failed") from e

    def close(self) -> None:
        self.s3.close()
