"""Shared fixtures for filetree app tests."""

import boto3
import pytest
from django.contrib.auth import get_user_model
from moto import mock_aws
from rest_framework.test import APIClient

from server.apps.filetree.infrastructure.blob_store import BlobStore
from server.apps.filetree.infrastructure.metadata_store import MetadataStore
from server.apps.filetree.infrastructure.storage import BlobBucketStorage
from server.apps.filetree.logic.file_service import FileService

User = get_user_model()

_BUCKET_NAME = 'filetree'
_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with filetree bucket.

    Yields:
        boto3 S3 resource with filetree bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name='us-east-1')
        conn.create_bucket(Bucket=_BUCKET_NAME)

        yield conn


@pytest.fixture
def bucket_storage(mock_s3):
    """S3 storage backend bound to the mocked bucket.

    Returns:
        BlobBucketStorage instance.
    """
    return BlobBucketStorage(
        bucket_name=_BUCKET_NAME,
        region_name='us-east-1',
        file_overwrite=False,
    )


@pytest.fixture
def blob_store(bucket_storage):
    """Blob store over the mocked bucket.

    Returns:
        BlobStore instance.
    """
    return BlobStore(bucket_storage)


@pytest.fixture
def metadata_store(db):
    """Metadata store over the test database.

    Returns:
        MetadataStore instance.
    """
    return MetadataStore()


@pytest.fixture
def file_service(metadata_store, blob_store):
    """File service wired to the test stores.

    Returns:
        FileService instance with a 10 MiB upload ceiling.
    """
    return FileService(
        metadata_store,
        blob_store,
        max_upload_bytes=_MAX_UPLOAD_BYTES,
    )


@pytest.fixture
def api_client(user, mock_s3):
    """API client authenticated as the test user.

    Returns:
        APIClient instance.
    """
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def other_api_client(other_user, mock_s3):
    """API client authenticated as the second user.

    Returns:
        APIClient instance.
    """
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client
