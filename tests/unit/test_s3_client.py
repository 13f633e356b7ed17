"""Tests for the S3 operation wrappers."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from s3copy.exceptions import NotFoundError
from s3copy.locator import ObjectLocator, resolve
from s3copy.s3_client import (
    abort_multipart_upload,
    complete_multipart_upload,
    copy_object,
    create_multipart_upload,
    head_object,
    operation_parameters,
    upload_part_copy,
)

MiB = 1024 * 1024


def _client_error(code, operation="HeadObject"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestHeadObject:
    def test_head_object(self, s3_client):
        s3_client.put_object(Bucket="source-bucket", Key="data/file.txt", Body=b"x" * 42)
        meta = head_object(s3_client, ObjectLocator("source-bucket", "data/file.txt"))
        assert meta["ContentLength"] == 42

    def test_missing_object_raises_not_found(self, s3_client):
        with pytest.raises(NotFoundError) as exc_info:
            head_object(s3_client, ObjectLocator("source-bucket", "missing.txt"))
        assert isinstance(exc_info.value.__cause__, ClientError)
        assert exc_info.value.details["key"] == "missing.txt"

    def test_passes_version_id(self):
        client = MagicMock()
        client.head_object.return_value = {"ContentLength": 1}
        head_object(client, ObjectLocator("b", "k", "v1"))
        client.head_object.assert_called_once_with(Bucket="b", Key="k", VersionId="v1")

    def test_other_errors_propagate_unchanged(self):
        client = MagicMock()
        error = _client_error("AccessDenied")
        client.head_object.side_effect = error
        with pytest.raises(ClientError) as exc_info:
            head_object(client, ObjectLocator("b", "k"))
        assert exc_info.value is error


class TestCopyObject:
    def test_copy_object(self, s3_client):
        s3_client.put_object(Bucket="source-bucket", Key="data/file0.txt", Body=b"content-0" * 50)
        copy_object(
            s3_client,
            ObjectLocator("destination-bucket", "copied/file0.txt"),
            resolve({"bucket": "source-bucket", "key": "data/file0.txt"}).copy_source,
        )
        response = s3_client.get_object(Bucket="destination-bucket", Key="copied/file0.txt")
        assert response["Body"].read() == b"content-0" * 50

    def test_extra_fields_forwarded(self, s3_client):
        s3_client.put_object(Bucket="source-bucket", Key="a.txt", Body=b"hello")
        copy_object(
            s3_client,
            ObjectLocator("destination-bucket", "b.txt"),
            "source-bucket/a.txt",
            extra={"ContentType": "text/plain", "MetadataDirective": "REPLACE"},
        )
        head = s3_client.head_object(Bucket="destination-bucket", Key="b.txt")
        assert head["ContentType"] == "text/plain"

    def test_errors_propagate_unchanged(self):
        client = MagicMock()
        error = _client_error("NoSuchBucket", "CopyObject")
        client.copy_object.side_effect = error
        with pytest.raises(ClientError) as exc_info:
            copy_object(client, ObjectLocator("b", "k"), "src/k")
        assert exc_info.value is error


class TestMultipartCalls:
    def test_lifecycle_against_moto(self, s3_client):
        body = b"a" * (5 * MiB) + b"b" * 1024
        s3_client.put_object(Bucket="source-bucket", Key="large.bin", Body=body)
        destination = ObjectLocator("destination-bucket", "copied.bin")

        upload_id = create_multipart_upload(s3_client, destination)
        etag1 = upload_part_copy(
            s3_client, destination, upload_id, 1, "source-bucket/large.bin",
            f"bytes=0-{5 * MiB - 1}",
        )
        etag2 = upload_part_copy(
            s3_client, destination, upload_id, 2, "source-bucket/large.bin",
            f"bytes={5 * MiB}-{len(body) - 1}",
        )
        complete_multipart_upload(
            s3_client,
            destination,
            upload_id,
            [{"ETag": etag1, "PartNumber": 1}, {"ETag": etag2, "PartNumber": 2}],
        )

        result = s3_client.get_object(Bucket="destination-bucket", Key="copied.bin")
        assert result["Body"].read() == body

    def test_abort(self, s3_client):
        destination = ObjectLocator("destination-bucket", "aborted.bin")
        upload_id = create_multipart_upload(s3_client, destination)
        abort_multipart_upload(s3_client, destination, upload_id)
        uploads = s3_client.list_multipart_uploads(Bucket="destination-bucket")
        assert not uploads.get("Uploads")


class TestOperationParameters:
    def test_reads_service_model(self):
        params = operation_parameters("CompleteMultipartUpload")
        assert "RequestPayer" in params
        assert "UploadId" in params
        assert "ACL" not in params
        assert "ContentType" not in params

    def test_copy_object_accepts_metadata_fields(self):
        params = operation_parameters("CopyObject")
        assert {"ACL", "ContentType", "MetadataDirective"} <= params
