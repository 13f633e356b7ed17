"""Shared fixtures for server-side copy tests."""

import os
import sys
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

# Add lambda source to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src", "lambda"))

MiB = 1024 * 1024


@pytest.fixture(autouse=True)
def aws_env(monkeypatch):
    """Set AWS environment variables for testing."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("COPY_PART_SIZE_BYTES", raising=False)
    monkeypatch.delenv("COPY_MAX_CONCURRENCY", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")


@pytest.fixture
def mock_context():
    """Create a mock Lambda context."""
    ctx = MagicMock()
    ctx.aws_request_id = "test-request-id-12345"
    ctx.function_name = "test-function"
    ctx.memory_limit_in_mb = 256
    ctx.invoked_function_arn = "arn:aws:lambda:us-east-1:000000000000:function:test"
    return ctx


@pytest.fixture
def stub_client():
    """MagicMock S3 client answering the multipart copy calls.

    ``upload_part_copy`` returns ``etag<part_number>`` so completion order
    can be checked against part numbers.
    """
    client = MagicMock()
    client.head_object.return_value = {"ContentLength": 300 * MiB}
    client.copy_object.return_value = {"CopyObjectResult": {"ETag": '"copied"'}}
    client.create_multipart_upload.return_value = {"UploadId": "id"}
    client.upload_part_copy.side_effect = lambda **kwargs: {
        "CopyPartResult": {"ETag": f"etag{kwargs['PartNumber']}"}
    }
    client.complete_multipart_upload.return_value = {"ETag": '"final"'}
    return client


@pytest.fixture
def s3_client():
    """Create a moto-mocked S3 client with source and destination buckets."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket="source-bucket")
        client.create_bucket(Bucket="destination-bucket")
        yield client
