import asyncio
from io import BytesIO
from datetime import timedelta
from typing import Optional

from minio import Minio
from minio.error import MinioException

from cipherdrive.configs.settings import settings
from cipherdrive.core.exceptions import UpstreamError
from cipherdrive.utils import get_logger

logger = get_logger(__name__)


class ObjectStorageService:
    """Encrypted file bytes in a single S3-compatible bucket.

    The MinIO SDK is blocking, so every call runs in a worker thread.
    Failures surface as UpstreamError; nothing here retries.
    """

    def __init__(self, bucket_name: Optional[str] = None, client: Optional[Minio] = None):
        self.bucket_name = bucket_name or settings.MINIO_BUCKET
        self.client = client or Minio(
            endpoint=settings.MINIO_URL.replace(
                "http://", "").replace("https://", ""),
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SSL,
            region=settings.MINIO_REGION,
        )

    async def ensure_bucket(self) -> None:
        """Create the bucket on first start"""
        try:
            exists = await asyncio.to_thread(self.client.bucket_exists, self.bucket_name)
            if not exists:
                await asyncio.to_thread(self.client.make_bucket, self.bucket_name)
                logger.info(f"Created object store bucket {self.bucket_name}")
        except (MinioException, OSError) as e:
            logger.error(f"Error preparing bucket {self.bucket_name}: {e}")
            raise UpstreamError(f"Object store bucket {self.bucket_name} is not available: {e}")

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Upload bytes under key"""
        def _upload():
            self.client.put_object(
                bucket_name=self.bucket_name,
                object_name=key,
                data=BytesIO(data),
                length=len(data),
                content_type=content_type
            )

        try:
            await asyncio.to_thread(_upload)
        except (MinioException, OSError) as e:
            logger.error(f"Error uploading {self.bucket_name}/{key}: {e}")
            raise UpstreamError("Failed to store file contents")

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self.client.remove_object, self.bucket_name, key)
        except (MinioException, OSError) as e:
            logger.error(f"Error removing {self.bucket_name}/{key}: {e}")
            raise UpstreamError("Failed to delete file contents")

    async def signed_url(self, key: str, ttl_seconds: Optional[int] = None) -> str:
        """Presigned GET URL valid for ttl_seconds"""
        expires = timedelta(seconds=ttl_seconds or settings.DRIVE_SIGNED_URL_TTL_SECONDS)

        def _get_url():
            return self.client.presigned_get_object(
                bucket_name=self.bucket_name,
                object_name=key,
                expires=expires,
            )

        try:
            return await asyncio.to_thread(_get_url)
        except (MinioException, OSError) as e:
            logger.error(f"Error signing URL for {self.bucket_name}/{key}: {e}")
            raise UpstreamError("Failed to generate download URL")


_object_storage: Optional[ObjectStorageService] = None


def get_object_storage() -> ObjectStorageService:
    """Process-wide object store client, created on first use"""
    global _object_storage
    if _object_storage is None:
        _object_storage = ObjectStorageService()
    return _object_storage
