"""Raw byte storage for file and image nodes.

References are random uuid4 strings, never derived from node ids, so a
storage path cannot be guessed from a node id.
"""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from files_manager.core.config import Settings
from files_manager.core.errors import DependencyError, NotFoundError

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    async def store(self, data: bytes) -> str: ...

    async def retrieve(self, reference: str) -> bytes: ...


class LocalBlobStore:
    """Blobs as plain files under one directory.

    The directory is created on the first write if it does not exist.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _path(self, reference: str) -> Path:
        # references are bare uuids; anything else could escape the root
        try:
            return self.root / str(uuid.UUID(reference))
        except ValueError:
            raise NotFoundError() from None

    def _write(self, reference: str, data: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / reference).write_bytes(data)

    async def store(self, data: bytes) -> str:
        reference = str(uuid.uuid4())
        try:
            await asyncio.to_thread(self._write, reference, data)
        except OSError as exc:
            logger.exception("Failed to write blob under %s", self.root)
            raise DependencyError("Blob storage unavailable") from exc
        logger.info("Stored blob %s (%d bytes)", reference, len(data))
        return reference

    async def retrieve(self, reference: str) -> bytes:
        path = self._path(reference)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise NotFoundError() from None
        except OSError as exc:
            logger.exception("Failed to read blob %s", reference)
            raise DependencyError("Blob storage unavailable") from exc


class S3BlobStore:
    """Blobs as objects in one S3 bucket, keyed by reference."""

    def __init__(self, client, bucket_name: str) -> None:
        self._s3 = client
        self.bucket_name = bucket_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3BlobStore":
        s3 = boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id or None,
            aws_secret_access_key=settings.aws_secret_access_key or None,
            region_name=settings.aws_region,
        )
        return cls(s3, settings.aws_s3_bucket_name)

    def _put(self, reference: str, data: bytes) -> None:
        self._s3.put_object(
            Bucket=self.bucket_name,
            Key=reference,
            Body=data,
            ContentType="application/octet-stream",
        )

    def _get(self, reference: str) -> bytes:
        obj = self._s3.get_object(Bucket=self.bucket_name, Key=reference)
        return obj["Body"].read()

    async def store(self, data: bytes) -> str:
        reference = str(uuid.uuid4())
        try:
            await asyncio.to_thread(self._put, reference, data)
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Failed to upload blob to bucket %s", self.bucket_name)
            raise DependencyError("Blob storage unavailable") from exc
        logger.info("Uploaded blob %s (%d bytes)", reference, len(data))
        return reference

    async def retrieve(self, reference: str) -> bytes:
        try:
            return await asyncio.to_thread(self._get, reference)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise NotFoundError() from None
            logger.exception("Failed to fetch blob %s", reference)
            raise DependencyError("Blob storage unavailable") from exc
        except BotoCoreError as exc:
            logger.exception("Failed to fetch blob %s", reference)
            raise DependencyError("Blob storage unavailable") from exc


def build_blob_store(settings: Settings) -> BlobStore:
    if settings.blob_backend == "s3":
        return S3BlobStore.from_settings(settings)
    return LocalBlobStore(settings.folder_path)
