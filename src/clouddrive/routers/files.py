import logging
from typing import List

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
)
from fastapi import (
    APIRouter,
    Depends,
    Request,
)

from clouddrive.config.settings import Settings
from clouddrive.dependencies import (
    get_bucket_name,
    get_s3_client,
    get_settings,
)
from clouddrive.errors import (
    UpstreamError,
    ValidationError,
)
from clouddrive.s3.delete_objects import delete_s3_object
from clouddrive.s3.presign import (
    DEFAULT_CONTENT_TYPE,
    build_upload_key,
    generate_presigned_download_url,
    generate_presigned_upload_url,
    generate_unique_file_name,
)
from clouddrive.s3.read_objects import (
    fetch_s3_objects_metadata,
    file_name_from_key,
    object_public_url,
)
from clouddrive.schemas import (
    ConfirmUploadRequest,
    ConfirmUploadResponse,
    DeleteFileResponse,
    DownloadUrlResponse,
    FileMetadata,
    GeneratePresignedUrlsRequest,
    GeneratePresignedUrlsResponse,
    ListFilesResponse,
    ObjectKeyRequest,
    PresignedUpload,
    UploadedFile,
)

logger = logging.getLogger(__name__)

router = APIRouter()

STORAGE_ERRORS = (BotoCoreError, ClientError)


def require_object_key(body: ObjectKeyRequest) -> str:
    """Reject an absent or empty key before anything talks to S3."""
    if not body.key:
        raise ValidationError("File key is required")
    return body.key


@router.post("/generate-presigned-urls", response_model=GeneratePresignedUrlsResponse)
def generate_presigned_urls(
    request: Request,
    body: GeneratePresignedUrlsRequest,
    settings: Settings = Depends(get_settings),
    s3_client=Depends(get_s3_client),
) -> GeneratePresignedUrlsResponse:
    """
    Issue one presigned PUT URL per requested file.

    The response lists the uploads in the same order as `files`; clients pair them up
    by position. If signing fails for any file the whole request fails and no URL is
    returned.
    """
    if not body.files:
        raise ValidationError("No files provided")

    bucket_name = get_bucket_name(request)

    presigned_data: List[PresignedUpload] = []
    for file in body.files:
        file_name = generate_unique_file_name(file.name)
        s3_key = build_upload_key(file_name, prefix=settings.upload_prefix)
        content_type = file.content_type or DEFAULT_CONTENT_TYPE
        try:
            presigned_url = generate_presigned_upload_url(
                bucket_name=bucket_name,
                object_key=s3_key,
                content_type=content_type,
                expires_in=settings.upload_url_expires_in,
                s3_client=s3_client,
            )
        except STORAGE_ERRORS as err:
            raise UpstreamError(f"Failed to generate presigned URL for {file.name}: {err}") from err

        presigned_data.append(
            PresignedUpload(
                original_name=file.name,
                file_name=file_name,
                presigned_url=presigned_url,
                s3_key=s3_key,
                size=file.size,
                content_type=content_type,
            )
        )

    logger.info(f"Issued {len(presigned_data)} presigned upload URL(s)")
    return GeneratePresignedUrlsResponse(
        message="Presigned URLs generated successfully",
        presigned_data=presigned_data,
        count=len(presigned_data),
    )


@router.post("/confirm-upload", response_model=ConfirmUploadResponse)
async def confirm_upload(
    request: Request,
    body: ConfirmUploadRequest,
    settings: Settings = Depends(get_settings),
) -> ConfirmUploadResponse:
    """
    Hand back the public URL of an uploaded object.

    Nothing is verified against S3; this only builds the display URL in one place.
    """
    bucket_name = get_bucket_name(request)
    return ConfirmUploadResponse(
        message="Upload confirmed",
        uploaded_file=UploadedFile(
            original_name=body.original_name,
            file_name=body.file_name,
            url=object_public_url(bucket_name, settings.aws_region, body.s3_key),
            size=body.size,
            content_type=body.content_type,
        ),
    )


@router.get("/list-files", response_model=ListFilesResponse)
def list_files(
    request: Request,
    settings: Settings = Depends(get_settings),
    s3_client=Depends(get_s3_client),
) -> ListFilesResponse:
    """List the first page of uploaded objects, as ordered by S3."""
    bucket_name = get_bucket_name(request)
    try:
        objects = fetch_s3_objects_metadata(
            bucket_name=bucket_name,
            prefix=settings.upload_prefix,
            max_keys=settings.list_max_keys,
            s3_client=s3_client,
        )
    except STORAGE_ERRORS as err:
        raise UpstreamError(str(err)) from err

    files = [
        FileMetadata(
            key=obj["Key"],
            file_name=file_name_from_key(obj["Key"]),
            url=object_public_url(bucket_name, settings.aws_region, obj["Key"]),
            size=obj["Size"],
            last_modified=obj["LastModified"],
            etag=obj.get("ETag"),
        )
        for obj in objects
    ]
    return ListFilesResponse(
        message="Files retrieved successfully",
        files=files,
        count=len(files),
    )


@router.post("/download-url", response_model=DownloadUrlResponse)
def generate_download_url(
    request: Request,
    body: ObjectKeyRequest,
    settings: Settings = Depends(get_settings),
    s3_client=Depends(get_s3_client),
) -> DownloadUrlResponse:
    """Issue a presigned GET URL for a key. The key is not checked for existence."""
    key = require_object_key(body)
    bucket_name = get_bucket_name(request)
    try:
        download_url = generate_presigned_download_url(
            bucket_name=bucket_name,
            object_key=key,
            expires_in=settings.download_url_expires_in,
            s3_client=s3_client,
        )
    except STORAGE_ERRORS as err:
        raise UpstreamError(str(err)) from err

    return DownloadUrlResponse(
        message="Download URL generated successfully",
        download_url=download_url,
        expires_in=settings.download_url_expires_in,
    )


@router.delete("/delete-file", response_model=DeleteFileResponse)
def delete_file(
    request: Request,
    body: ObjectKeyRequest,
    s3_client=Depends(get_s3_client),
) -> DeleteFileResponse:
    """Delete an object. Deleting a key that does not exist also succeeds."""
    key = require_object_key(body)
    bucket_name = get_bucket_name(request)
    try:
        delete_s3_object(bucket_name=bucket_name, object_key=key, s3_client=s3_client)
    except STORAGE_ERRORS as err:
        raise UpstreamError(str(err)) from err

    logger.info(f"Deleted s3://{bucket_name}/{key}")
    return DeleteFileResponse(message="File deleted successfully", deleted_key=key)
