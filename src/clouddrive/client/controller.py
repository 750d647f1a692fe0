"""The client application: one pending-file selection, one status board, one directory view."""
import logging
from typing import Iterable, List, Optional

import httpx

from clouddrive.client.api import FilesApiClient
from clouddrive.client.directory import DirectoryView, ViewMode
from clouddrive.client.orchestrator import (
    ProgressCallback,
    UploadBatch,
    UploadBatchError,
    UploadOrchestrator,
)
from clouddrive.client.selection import FileSelection, PendingFile
from clouddrive.client.status import StatusBoard

logger = logging.getLogger(__name__)


class CloudDriveController:
    """
    Owns all client state. Nothing here is module-level; dropping the
    controller drops the selection with it.

    Failures never propagate out of `upload`: they become status messages and
    the controller stays usable.
    """

    def __init__(
        self,
        api: FilesApiClient,
        storage_http: Optional[httpx.Client] = None,
        on_progress: Optional[ProgressCallback] = None,
        view: ViewMode = ViewMode.GRID,
        delete_orphans: bool = False,
    ):
        storage_http = storage_http or httpx.Client()
        self.api = api
        self.selection = FileSelection()
        self.status = StatusBoard()
        self.directory = DirectoryView(api, self.status, storage_http=storage_http, view=view)
        self.orchestrator = UploadOrchestrator(
            api,
            storage_http=storage_http,
            on_progress=on_progress,
            delete_orphans=delete_orphans,
        )

    def add_files(self, files: Iterable[PendingFile]) -> int:
        return self.selection.add(files)

    def remove_file(self, index: int) -> PendingFile:
        return self.selection.remove(index)

    def clear_files(self) -> None:
        self.selection.clear()
        self.status.clear()

    def upload(self) -> Optional[UploadBatch]:
        """Upload the whole selection. Returns the batch on success, None otherwise."""
        if not self.selection:
            return None

        self.status.clear()
        try:
            batch = self.orchestrator.run(self.selection.files)
        except UploadBatchError as err:
            self.status.error(f"Upload error: {err.message}")
            return None

        self.status.success("Files uploaded successfully!")
        if batch.uploaded_files:
            self.status.info(
                "Uploaded files:",
                links=[(uploaded["originalName"], uploaded["url"]) for uploaded in batch.uploaded_files],
            )
        if batch.unconfirmed_files:
            self.status.info(f"Stored without a link: {', '.join(batch.unconfirmed_files)}")
        self.selection.clear()
        self.directory.refresh()
        return batch

    @property
    def pending_files(self) -> List[PendingFile]:
        return self.selection.files
