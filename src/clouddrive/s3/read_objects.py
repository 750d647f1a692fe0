"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import (
    TYPE_CHECKING,
    List,
    Optional,
)

import boto3

from clouddrive.utils.decorators import log_execution_time

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import ObjectTypeDef

DEFAULT_MAX_KEYS = 100


def object_public_url(bucket_name: str, region: str, object_key: str) -> str:
    """Canonical virtual-hosted style URL of an object."""
    return f"https://{bucket_name}.s3.{region}.amazonaws.com/{object_key}"


def file_name_from_key(object_key: str) -> str:
    """The part of the key after the last `/`."""
    return object_key.split("/")[-1]


@log_execution_time
def fetch_s3_objects_metadata(
    bucket_name: str,
    prefix: Optional[str] = None,
    max_keys: int = DEFAULT_MAX_KEYS,
    s3_client: Optional["S3Client"] = None,
) -> List["ObjectTypeDef"]:
    """
    Fetch a single page of object metadata from an S3 bucket.

    Objects past the first page are not returned; there is no continuation.

    :param bucket_name: The name of the S3 bucket.
    :param prefix: The prefix to filter objects by.
    :param max_keys: The maximum number of keys to return.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.

    :return: The listing entries in the order S3 returns them.
    """
    s3_client = s3_client or boto3.client("s3")
    response = s3_client.list_objects_v2(
        Bucket=bucket_name,
        Prefix=prefix or "",
        MaxKeys=max_keys,
    )
    # `Contents` is absent when nothing matches the prefix
    return response.get("Contents", [])
