"""Thin wrappers over the S3 operations a server-side copy consumes.

Retries and backoff are left to botocore's own retry handler; errors other
than a missing source object propagate as the client raised them.
"""

import functools
from typing import Any, Dict, List

import botocore.session
from botocore.exceptions import ClientError

from s3copy.exceptions import NotFoundError
from s3copy.locator import ObjectLocator
from s3copy.logger import get_logger

logger = get_logger(__name__)

_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound", "NoSuchVersion")


def head_object(s3_client, source: ObjectLocator) -> Dict[str, Any]:
    """Get object metadata, raising NotFoundError when the object is absent."""
    kwargs = {"Bucket": source.bucket, "Key": source.key}
    if source.version_id:
        kwargs["VersionId"] = source.version_id

    try:
        response = s3_client.head_object(**kwargs)
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "")
        if error_code in _NOT_FOUND_CODES:
            raise NotFoundError(
                f"Source object {source} not found",
                details={
                    "bucket": source.bucket,
                    "key": source.key,
                    "version_id": source.version_id,
                    "error_code": error_code,
                },
            ) from e
        raise
    return response


def copy_object(
    s3_client,
    destination: ObjectLocator,
    copy_source: str,
    extra: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Single server-side copy; ``extra`` is merged into the request verbatim."""
    logger.info("Copying %s -> %s", copy_source, destination)
    response = s3_client.copy_object(
        Bucket=destination.bucket,
        Key=destination.key,
        CopySource=copy_source,
        **(extra or {}),
    )
    logger.info("Copy complete: %s", destination)
    return response


def create_multipart_upload(s3_client, destination: ObjectLocator) -> str:
    response = s3_client.create_multipart_upload(
        Bucket=destination.bucket,
        Key=destination.key,
    )
    return response["UploadId"]


def upload_part_copy(
    s3_client,
    destination: ObjectLocator,
    upload_id: str,
    part_number: int,
    copy_source: str,
    copy_source_range: str,
) -> str:
    """Copy one byte range into a multipart upload and return the part ETag."""
    response = s3_client.upload_part_copy(
        Bucket=destination.bucket,
        Key=destination.key,
        PartNumber=part_number,
        CopySource=copy_source,
        CopySourceRange=copy_source_range,
        UploadId=upload_id,
    )
    return response["CopyPartResult"]["ETag"]


def complete_multipart_upload(
    s3_client,
    destination: ObjectLocator,
    upload_id: str,
    parts: List[Dict[str, Any]],
    extra: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    return s3_client.complete_multipart_upload(
        Bucket=destination.bucket,
        Key=destination.key,
        UploadId=upload_id,
        MultipartUpload={"Parts": parts},
        **(extra or {}),
    )


def abort_multipart_upload(s3_client, destination: ObjectLocator, upload_id: str) -> None:
    s3_client.abort_multipart_upload(
        Bucket=destination.bucket,
        Key=destination.key,
        UploadId=upload_id,
    )


@functools.lru_cache(maxsize=None)
def operation_parameters(operation_name: str) -> frozenset:
    """Request parameter names the S3 service model accepts for an operation."""
    service_model = botocore.session.get_session().get_service_model("s3")
    return frozenset(service_model.operation_model(operation_name).input_shape.members)
