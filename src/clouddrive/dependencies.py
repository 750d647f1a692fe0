"""Request-scoped dependencies: the settings and the S3 client owned by the app."""
from typing import TYPE_CHECKING

import boto3
from botocore.client import Config
from fastapi import Request

from clouddrive.config.settings import Settings
from clouddrive.errors import ConfigurationError

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


def build_s3_client(settings: Settings) -> "S3Client":
    """Create the S3 client the app hands to its request handlers."""
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        config=Config(signature_version="s3v4"),
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_s3_client(request: Request) -> "S3Client":
    return request.app.state.s3_client


def get_bucket_name(request: Request) -> str:
    """The configured bucket, or a `ConfigurationError` when it is unset."""
    settings: Settings = request.app.state.settings
    if not settings.s3_bucket_name:
        raise ConfigurationError("S3 bucket name not configured")
    return settings.s3_bucket_name
