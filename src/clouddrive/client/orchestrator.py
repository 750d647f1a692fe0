"""
Upload orchestration: presign, direct PUT to S3, confirm.

A batch runs as an explicit sequence of states, one network call at a time::

    IDLE -> REQUESTING_CREDENTIALS -> UPLOADING(0) -> ... -> UPLOADING(n-1) -> SUCCEEDED
                      |                    |                        |
                      +--------------------+-----------> FAILED <---+

The first failed PUT ends the batch: later files are never attempted and the
caller gets one `UploadBatchError` naming the failing file. Objects already
stored by earlier PUTs stay in the bucket unless `delete_orphans` is set.
A failed confirm does not end the batch; the file is listed in
`unconfirmed_files` instead.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import httpx

from clouddrive.client.api import ApiError, FilesApiClient
from clouddrive.client.selection import PendingFile

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class UploadState(str, Enum):
    IDLE = "idle"
    REQUESTING_CREDENTIALS = "requesting_credentials"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class UploadBatchError(Exception):
    """The batch was aborted. `file_name` is the file that failed, if any."""

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.file_name = file_name


@dataclass
class UploadBatch:
    """Progress record of one batch."""
    files: List[PendingFile]
    state: UploadState = UploadState.IDLE
    current_index: Optional[int] = None
    presigned: List[Dict[str, Any]] = field(default_factory=list)
    stored_keys: List[str] = field(default_factory=list)
    uploaded_files: List[Dict[str, Any]] = field(default_factory=list)
    # stored in S3, but /confirm-upload did not answer with a URL
    unconfirmed_files: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.files)

    @property
    def progress(self) -> float:
        """Percent of files started, `(index + 1) / total * 100`. Not byte-level."""
        if self.state is UploadState.SUCCEEDED:
            return 100.0
        if self.current_index is None or not self.files:
            return 0.0
        return progress_percent(self.current_index, self.total)


def progress_percent(index: int, total: int) -> float:
    return (index + 1) / total * 100


class UploadOrchestrator:
    """
    Uploads a batch of files straight to S3 using server-issued presigned URLs.

    :param api: Client for the CloudDrive API.
    :param storage_http: HTTP client used for the PUTs to S3. Kept separate from
        the API client since presigned URLs are absolute and carry their own auth.
    :param on_progress: Called with the batch percentage before each PUT.
    :param delete_orphans: After a failed PUT, delete the objects stored earlier
        in the same batch. Off by default.
    """

    def __init__(
        self,
        api: FilesApiClient,
        storage_http: Optional[httpx.Client] = None,
        on_progress: Optional[ProgressCallback] = None,
        delete_orphans: bool = False,
    ):
        self.api = api
        self.storage_http = storage_http or httpx.Client()
        self.on_progress = on_progress
        self.delete_orphans = delete_orphans

    def run(self, files: List[PendingFile]) -> UploadBatch:
        """
        Upload `files` in order and return the finished batch.

        :raises UploadBatchError: on the first failure; nothing after it is attempted.
        """
        batch = UploadBatch(files=list(files))
        if not batch.files:
            return batch

        batch.state = UploadState.REQUESTING_CREDENTIALS
        try:
            batch.presigned = self.api.generate_presigned_urls(batch.files)
        except (ApiError, httpx.HTTPError) as err:
            batch.state = UploadState.FAILED
            raise UploadBatchError(str(err)) from err

        if len(batch.presigned) != batch.total:
            batch.state = UploadState.FAILED
            raise UploadBatchError(
                f"Expected {batch.total} presigned URLs, got {len(batch.presigned)}"
            )

        # presigned URLs pair up with files by position
        for index, (file, presigned) in enumerate(zip(batch.files, batch.presigned)):
            batch.state = UploadState.UPLOADING
            batch.current_index = index
            self._report_progress(progress_percent(index, batch.total))
            try:
                self._upload_one(batch, file, presigned)
            except UploadBatchError:
                batch.state = UploadState.FAILED
                self._handle_orphans(batch)
                raise

        batch.state = UploadState.SUCCEEDED
        logger.info(f"Uploaded {batch.total} file(s)")
        return batch

    def _upload_one(self, batch: UploadBatch, file: PendingFile, presigned: Dict[str, Any]) -> None:
        try:
            response = self.storage_http.put(
                presigned["presignedUrl"],
                content=file.data,
                headers={"Content-Type": presigned["type"]},
            )
        except httpx.HTTPError as err:
            raise UploadBatchError(f"Failed to upload {file.name}: {err}", file_name=file.name) from err

        if response.is_error:
            raise UploadBatchError(
                f"Failed to upload {file.name}: S3 upload failed for {file.name}",
                file_name=file.name,
            )
        batch.stored_keys.append(presigned["s3Key"])

        # the object is already stored; a failed confirm only loses its display URL
        try:
            uploaded_file = self.api.confirm_upload(presigned)
        except (ApiError, httpx.HTTPError) as err:
            logger.warning(f"Stored {presigned['s3Key']} but could not confirm it: {err}")
            batch.unconfirmed_files.append(file.name)
            return
        batch.uploaded_files.append(uploaded_file)

    def _report_progress(self, percent: float) -> None:
        if self.on_progress is not None:
            self.on_progress(percent)

    def _handle_orphans(self, batch: UploadBatch) -> None:
        if not batch.stored_keys:
            return
        if not self.delete_orphans:
            logger.warning(f"Batch failed; leaving {len(batch.stored_keys)} stored object(s) in place: {batch.stored_keys}")
            return
        for key in batch.stored_keys:
            try:
                self.api.delete_file(key)
            except (ApiError, httpx.HTTPError) as err:
                logger.error(f"Could not delete orphaned object {key}: {err}")
