"""Logging around the calls CloudDrive makes to S3."""
import functools
import inspect
import logging
import time
from typing import Any, Callable, TypeVar, cast

from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])

# arguments of the s3/ helpers that name the object being touched
TARGET_ARGUMENTS = ("object_key", "prefix")


def describe_target(bound: inspect.BoundArguments) -> str:
    """`s3://bucket/key` (or `/prefix`) for a call to one of the s3/ helpers."""
    arguments = bound.arguments
    bucket_name = arguments.get("bucket_name", "?")
    for name in TARGET_ARGUMENTS:
        if arguments.get(name) is not None:
            return f"s3://{bucket_name}/{arguments[name]}"
    return f"s3://{bucket_name}"


def log_execution_time(func: F) -> F:
    """
    Log how long an S3 helper took and which object it touched.

    Failures are logged with their duration, and with the S3 error code when
    S3 answered with one, then re-raised unchanged.
    """
    signature = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        target = describe_target(signature.bind_partial(*args, **kwargs))
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except ClientError as err:
            duration_ms = (time.perf_counter() - start_time) * 1000
            code = err.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"{func.__name__} {target} failed with {code} after {duration_ms:.0f}ms")
            raise
        except Exception as err:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(f"{func.__name__} {target} failed after {duration_ms:.0f}ms: {err}")
            raise
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"{func.__name__} {target} completed in {duration_ms:.0f}ms")
        return result

    return cast(F, wrapper)
