from typing import Optional

import boto3
from botocore.config import Config
from loguru import logger
from starlette.concurrency import run_in_threadpool

from vidshelf.core.config import StorageSettings
from vidshelf.core.errors import StorageWriteError


class BlobStorage:
    """Public object storage on an S3-compatible bucket.

    The default endpoint is the Cloud Storage interoperability API, so
    ``public_url`` matches the ``https://storage.googleapis.com/<bucket>/<key>``
    form that browsers can fetch once the object ACL is ``public-read``.
    """

    def __init__(self, settings: StorageSettings, client=None):
        self.settings = settings
        self.bucket_name = settings.bucket_name
        self.client = client or self._build_client(settings)

    @staticmethod
    def _build_client(settings: StorageSettings):
        return boto3.client(
            "s3",
            endpoint_url=settings.endpoint_url,
            region_name=settings.region,
            aws_access_key_id=settings.access_key_id,
            aws_secret_access_key=settings.secret_access_key,
            config=Config(
                connect_timeout=settings.connect_timeout,
                read_timeout=settings.read_timeout,
                retries={"total_max_attempts": 1},
            ),
        )

    def public_url(self, key: str) -> str:
        return self.settings.public_url(key)

    async def write_public(self, key: str, data: bytes, content_type: Optional[str]) -> str:
        """Write ``data`` under ``key``, make it public and return its URL.

        Returns only after both calls were acknowledged; any failure is
        raised as StorageWriteError.
        """
        try:
            await run_in_threadpool(self._put_object, key, data, content_type)
            await run_in_threadpool(self._make_public, key)
        except Exception as e:
            logger.exception(f"Storage write failed for {key}: {e}")
            raise StorageWriteError(f"Error uploading: {e}") from e

        logger.debug(f"Stored {len(data)} bytes at {self.bucket_name}/{key}")
        return self.public_url(key)

    def _put_object(self, key: str, data: bytes, content_type: Optional[str]) -> None:
        self.client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=data,
            ContentType=content_type or "application/octet-stream",
        )

    def _make_public(self, key: str) -> None:
        self.client.put_object_acl(
            Bucket=self.bucket_name,
            Key=key,
            ACL="public-read",
        )
