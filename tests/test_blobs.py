"""Tests for blob storage backends."""

import uuid

import boto3
import pytest
from moto import mock_aws

from files_manager.core.config import Settings
from files_manager.core.errors import NotFoundError
from files_manager.storage.blobs import LocalBlobStore, S3BlobStore, build_blob_store


class TestLocalBlobStore:
    """Tests for the disk backend."""

    async def test_creates_root_on_first_store(self, tmp_path):
        root = tmp_path / "nested" / "files"
        store = LocalBlobStore(root)

        reference = await store.store(b"hello")

        assert root.is_dir()
        assert (root / reference).read_bytes() == b"hello"

    async def test_round_trip(self, blobs):
        reference = await blobs.store(b"\x00\x01binary")

        assert await blobs.retrieve(reference) == b"\x00\x01binary"

    async def test_references_are_random_uuids(self, blobs):
        first = await blobs.store(b"same")
        second = await blobs.store(b"same")

        assert first != second
        assert str(uuid.UUID(first)) == first

    async def test_unknown_reference(self, blobs):
        with pytest.raises(NotFoundError):
            await blobs.retrieve(str(uuid.uuid4()))

    async def test_reference_outside_root(self, blobs):
        with pytest.raises(NotFoundError):
            await blobs.retrieve("../../etc/passwd")


class TestS3BlobStore:
    """Tests for the S3 backend."""

    @pytest.fixture
    def s3_store(self):
        """Mock S3 service with a files-manager bucket.

        Yields:
            S3BlobStore bound to the mocked bucket.
        """
        with mock_aws():
            client = boto3.client(
                "s3",
                region_name="us-east-1",
                aws_access_key_id="testing",
                aws_secret_access_key="testing",
            )
            client.create_bucket(Bucket="files-manager")
            yield S3BlobStore(client, "files-manager")

    async def test_round_trip(self, s3_store):
        reference = await s3_store.store(b"cloud bytes")

        assert await s3_store.retrieve(reference) == b"cloud bytes"

    async def test_unknown_reference(self, s3_store):
        with pytest.raises(NotFoundError):
            await s3_store.retrieve(str(uuid.uuid4()))


def test_build_blob_store_local(tmp_path):
    settings = Settings(_env_file=None, blob_backend="local", folder_path=str(tmp_path))

    store = build_blob_store(settings)

    assert isinstance(store, LocalBlobStore)
    assert store.root == tmp_path
