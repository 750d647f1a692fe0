"""Functions for issuing presigned URLs so clients transfer objects directly with S3."""

import os
import uuid
from typing import (
    TYPE_CHECKING,
    Optional,
)

import boto3

from clouddrive.utils.decorators import log_execution_time

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

DEFAULT_CONTENT_TYPE = "application/octet-stream"
UPLOAD_URL_EXPIRES_IN_SECONDS = 60 * 5
DOWNLOAD_URL_EXPIRES_IN_SECONDS = 60 * 60


def generate_unique_file_name(original_name: str) -> str:
    """
    Make a collision-free file name that still reads like the original.

    `report.final.pdf` becomes `report.final-<uuid4>.pdf`. Uniqueness relies only
    on the random identifier; nothing checks the bucket for an existing key.

    :param original_name: The file name as selected by the user.
    """
    base_name = os.path.basename(original_name)
    name, ext = os.path.splitext(base_name)
    return f"{name}-{uuid.uuid4()}{ext}"


def build_upload_key(file_name: str, prefix: str = "uploads/") -> str:
    """Storage key of an upload: `<prefix><file_name>`."""
    return f"{prefix}{file_name}"


@log_execution_time
def generate_presigned_upload_url(
    bucket_name: str,
    object_key: str,
    content_type: Optional[str] = None,
    expires_in: int = UPLOAD_URL_EXPIRES_IN_SECONDS,
    s3_client: Optional["S3Client"] = None,
) -> str:
    """
    Generate a presigned PUT URL scoped to exactly one key and content type.

    Generating the URL does not create or reserve the object.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path the object will be written to.
    :param content_type: The MIME type the client must send when it PUTs the object.
    :param expires_in: Lifetime of the URL in seconds.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    """
    s3_client = s3_client or boto3.client("s3")
    return s3_client.generate_presigned_url(
        ClientMethod="put_object",
        Params={
            "Bucket": bucket_name,
            "Key": object_key,
            "ContentType": content_type or DEFAULT_CONTENT_TYPE,
        },
        ExpiresIn=expires_in,
    )


@log_execution_time
def generate_presigned_download_url(
    bucket_name: str,
    object_key: str,
    expires_in: int = DOWNLOAD_URL_EXPIRES_IN_SECONDS,
    s3_client: Optional["S3Client"] = None,
) -> str:
    """
    Generate a presigned GET URL for an object.

    The key is not checked; a URL for a missing object fails only when fetched.
    """
    s3_client = s3_client or boto3.client("s3")
    return s3_client.generate_presigned_url(
        ClientMethod="get_object",
        Params={"Bucket": bucket_name, "Key": object_key},
        ExpiresIn=expires_in,
    )
