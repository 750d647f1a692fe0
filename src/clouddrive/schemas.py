####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Fields are snake_case in Python and camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FileDescriptor(CamelModel):
    """A file the client wants to upload, as described by the client."""
    name: str = Field(
        min_length=1,
        description="Original file name.",
        json_schema_extra={"example": "holiday.jpg"},
    )
    content_type: str = Field(
        "",
        alias="type",
        description="Declared MIME type; may be empty when the client cannot tell.",
    )
    size: int = Field(0, ge=0, description="Declared size in bytes.")


class GeneratePresignedUrlsRequest(CamelModel):
    """Request model for `POST /generate-presigned-urls`."""
    files: Optional[List[FileDescriptor]] = None


class PresignedUpload(CamelModel):
    """A single-object write credential plus the key it is scoped to."""
    original_name: str
    file_name: str = Field(description="Generated, unique file name.")
    presigned_url: str = Field(description="Presigned PUT URL, valid for 5 minutes.")
    s3_key: str = Field(json_schema_extra={"example": "uploads/holiday-5f0c...-9b1e.jpg"})
    size: int
    content_type: str = Field(
        alias="type",
        description="Content-Type the PUT must carry to match the signature.",
    )


class GeneratePresignedUrlsResponse(CamelModel):
    """Response model for `POST /generate-presigned-urls`."""
    message: str
    presigned_data: List[PresignedUpload] = Field(
        description="One entry per requested file, in request order."
    )
    count: int


class ConfirmUploadRequest(CamelModel):
    """Request model for `POST /confirm-upload`."""
    s3_key: str = Field(min_length=1)
    original_name: str = ""
    file_name: str = ""
    size: int = 0
    content_type: str = Field("", alias="type")


class UploadedFile(CamelModel):
    original_name: str
    file_name: str
    url: str = Field(description="Public URL of the object.")
    size: int
    content_type: str = Field(alias="type")


class ConfirmUploadResponse(CamelModel):
    """Response model for `POST /confirm-upload`."""
    message: str
    uploaded_file: UploadedFile


class FileMetadata(CamelModel):
    """Metadata of a stored object."""
    key: str = Field(
        description="The storage key of the object.",
        json_schema_extra={"example": "uploads/holiday-5f0c...-9b1e.jpg"},
    )
    file_name: str = Field(description="The part of the key after the last `/`.")
    url: str = Field(description="Public URL of the object.")
    size: int = Field(description="The size of the object in bytes.")
    last_modified: datetime = Field(description="The last modified date of the object.")
    etag: Optional[str] = None


class ListFilesResponse(CamelModel):
    """Response model for `GET /list-files`."""
    message: str
    files: List[FileMetadata]
    count: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Files retrieved successfully",
                "files": [
                    {
                        "key": "uploads/holiday-5f0c...-9b1e.jpg",
                        "fileName": "holiday-5f0c...-9b1e.jpg",
                        "url": "https://my-bucket.s3.us-east-1.amazonaws.com/uploads/holiday-5f0c...-9b1e.jpg",
                        "size": 512,
                        "lastModified": "2024-01-01T00:00:00Z",
                        "etag": "\"9b2cf535f27731c974343645a3985328\"",
                    }
                ],
                "count": 1,
            }
        }
    )


class ObjectKeyRequest(CamelModel):
    """Request model for `POST /download-url` and `DELETE /delete-file`."""
    key: Optional[str] = None


class DownloadUrlResponse(CamelModel):
    """Response model for `POST /download-url`."""
    message: str
    download_url: str
    expires_in: int = Field(description="Lifetime of `download_url` in seconds.")


class DeleteFileResponse(CamelModel):
    """Response model for `DELETE /delete-file`."""
    message: str
    deleted_key: str


class ServiceInfoResponse(BaseModel):
    """Response model for `GET /`."""
    message: str
    status: str


class HealthResponse(BaseModel):
    """Response model for `GET /health`."""
    status: str
    timestamp: datetime
