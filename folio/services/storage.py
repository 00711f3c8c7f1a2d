import logging
from typing import Optional
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel
from folio.core.config import settings
from folio.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class StoredObject(BaseModel):
    path: str  # Key inside the folder
    full_path: str  # Folder-qualified key as stored in the bucket
    public_url: str


class S3Storage:
    """
    Blob store for uploaded media.

    Folders map onto key prefixes in a single bucket, so an object at
    `path` in `folder` lives under the key "<folder>/<path>".
    """

    def __init__(self, client=None, bucket_name: Optional[str] = None, base_url: Optional[str] = None):
        self.s3_client = client or boto3.client(
            's3',
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            region_name=settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
        )
        self.bucket_name = bucket_name or settings.S3_BUCKET
        self.base_url = (base_url or settings.S3_BASE_URL).rstrip("/")

    @staticmethod
    def object_key(folder: str, path: str) -> str:
        return f"{folder.strip('/')}/{path.lstrip('/')}"

    def upload(self, folder: str, path: str, content: bytes, content_type: str) -> StoredObject:
        """
        Upload a file to S3.

        Args:
            folder: Storage folder, e.g. "blog-images"
            path: Key inside the folder, e.g. "<uploader>/<file>"
            content: Binary content of the file
            content_type: MIME type of the file

        Returns:
            The stored object's keys and public URL

        Raises:
            StorageError: If S3 rejects the upload
        """
        key = self.object_key(folder, path)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type,
                CacheControl="max-age=3600",
                # No ACL: public access is granted through the bucket policy
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Error uploading %s to S3: %s", key, e)
            raise StorageError(f"Upload failed: {e}") from e

        return StoredObject(path=path, full_path=key, public_url=self.get_public_url(folder, path))

    def remove(self, folder: str, path: str) -> None:
        """
        Delete a file from S3.

        Raises:
            StorageError: If S3 rejects the delete
        """
        key = self.object_key(folder, path)
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error("Error deleting %s from S3: %s", key, e)
            raise StorageError(f"Delete failed: {e}") from e

    def get_public_url(self, folder: str, path: str) -> str:
        return f"{self.base_url}/{self.object_key(folder, path)}"


def get_storage() -> S3Storage:
    # One client per process; boto3 clients are thread-safe
    global _storage
    if _storage is None:
        _storage = S3Storage()
    return _storage


_storage: Optional[S3Storage] = None
