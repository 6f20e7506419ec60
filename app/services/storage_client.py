"""Object storage wrapper for team avatar uploads."""

import logging
from pathlib import Path
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings

logger = logging.getLogger(__name__)

LOCAL_UPLOAD_ROOT = Path(__file__).resolve().parent.parent / "static" / "uploads"


class StorageError(RuntimeError):
    """Raised when an object cannot be written to or removed from storage."""


class StorageClient:
    """Thin wrapper around boto3 for one bucket.

    Works against any S3-compatible endpoint (AWS, Supabase storage, R2,
    MinIO). With ``storage_local`` enabled, objects are written under
    ``app/static/uploads`` and served by the static mount instead.
    """

    def __init__(self) -> None:
        self.bucket = settings.storage_bucket_name
        self.public_url_base = settings.storage_public_url_base
        self.use_local = settings.storage_local
        self.local_root = LOCAL_UPLOAD_ROOT
        self._client: Optional[Any] = None

    @property
    def client(self) -> Any:
        """Lazily initialize the boto3 client."""
        if self._client is None:
            client_kwargs: dict[str, str] = {
                "region_name": settings.storage_region,
            }
            if settings.storage_access_key_id and settings.storage_secret_access_key:
                client_kwargs["aws_access_key_id"] = settings.storage_access_key_id
                client_kwargs["aws_secret_access_key"] = settings.storage_secret_access_key
            if settings.storage_endpoint_url:
                client_kwargs["endpoint_url"] = settings.storage_endpoint_url

            self._client = boto3.client("s3", **client_kwargs)
        return self._client

    def upload(self, key: str, data: bytes, content_type: str = "image/png") -> str:
        """Store ``data`` under ``key`` and return its public URL.

        Args:
            key: Object key, e.g. ``teams/12-1718035200000.png``
            data: File content
            content_type: MIME type recorded on the object

        Raises:
            StorageError: if the bucket is not configured or the write fails
        """
        if self.use_local:
            return self._upload_local(key, data)

        if not self.bucket:
            raise StorageError("STORAGE_BUCKET_NAME not configured")

        put_kwargs: dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": data,
            "ContentType": content_type,
        }
        if settings.storage_upload_acl:
            put_kwargs["ACL"] = settings.storage_upload_acl

        try:
            self.client.put_object(**put_kwargs)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to upload %s to bucket %s: %s", key, self.bucket, e)
            raise StorageError(str(e)) from e

        logger.info("Uploaded %s to bucket %s", key, self.bucket)
        return self.get_public_url(key)

    def delete(self, key: str) -> None:
        if self.use_local:
            path = self.local_root / key
            if path.exists():
                path.unlink()
                logger.info("Deleted %s from local storage", key)
            return

        if not self.bucket:
            raise StorageError("STORAGE_BUCKET_NAME not configured")

        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to delete %s from bucket %s: %s", key, self.bucket, e)
            raise StorageError(str(e)) from e
        logger.info("Deleted %s from bucket %s", key, self.bucket)

    def get_public_url(self, key: str) -> str:
        """Public URL for a key.

        Prefers the configured public base (CDN or the provider's public
        object path), then ``{endpoint}/{bucket}/{key}``, then the AWS
        virtual-hosted URL.
        """
        if self.use_local:
            return f"/static/uploads/{key}"

        if self.public_url_base:
            return f"{self.public_url_base.rstrip('/')}/{key}"

        if settings.storage_endpoint_url:
            endpoint = settings.storage_endpoint_url.rstrip("/")
            return f"{endpoint}/{self.bucket}/{key}"

        return f"https://{self.bucket}.s3.{settings.storage_region}.amazonaws.com/{key}"

    def _upload_local(self, key: str, data: bytes) -> str:
        path = self.local_root / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("Saved %s to local storage", key)
        return self.get_public_url(key)


storage_client = StorageClient()


def get_storage() -> StorageClient:
    """FastAPI dependency returning the shared storage client."""
    return storage_client
