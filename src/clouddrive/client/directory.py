"""Terminal rendering of the stored files, plus the per-file download and delete actions."""
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx

from clouddrive.client.api import ApiError, FilesApiClient
from clouddrive.client.formatting import file_icon, format_file_size
from clouddrive.client.status import StatusBoard

logger = logging.getLogger(__name__)

GRID_COLUMNS = 3
GRID_CELL_WIDTH = 32

ConfirmCallback = Callable[[str], bool]


class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"


def _upload_date(file: Dict[str, Any]) -> str:
    last_modified = file.get("lastModified")
    if not last_modified:
        return "-"
    try:
        return datetime.fromisoformat(str(last_modified).replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return str(last_modified)


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 1] + "…"


class DirectoryView:
    """
    The stored-file listing.

    Every `refresh` and every view toggle fetches the listing again; nothing is cached
    between calls.
    """

    def __init__(
        self,
        api: FilesApiClient,
        status: StatusBoard,
        storage_http: Optional[httpx.Client] = None,
        view: ViewMode = ViewMode.GRID,
    ):
        self.api = api
        self.status = status
        self.storage_http = storage_http or httpx.Client()
        self.view = ViewMode(view)
        self.files: List[Dict[str, Any]] = []
        self.error: Optional[str] = None

    def refresh(self) -> List[Dict[str, Any]]:
        """Fetch the listing. On failure the view shows the error instead of files."""
        try:
            self.files = self.api.list_files()
            self.error = None
        except ApiError as err:
            self.files = []
            self.error = f"Failed to load files: {err.message}"
        except httpx.HTTPError as err:
            self.files = []
            self.error = f"Error loading files: {err}"
        return self.files

    def toggle_view(self, view: ViewMode) -> None:
        self.view = ViewMode(view)
        self.refresh()

    def render(self) -> str:
        if self.error:
            return f"⚠️  Error loading files\n{self.error}"
        if not self.files:
            return "📁 No files found\nUpload some files to get started!"
        if self.view is ViewMode.LIST:
            return self._render_list()
        return self._render_grid()

    def _render_list(self) -> str:
        name_width = max(len(file["fileName"]) for file in self.files)
        lines = []
        for file in self.files:
            lines.append(
                f"{file_icon(file['fileName'])}  {file['fileName']:<{name_width}}  "
                f"{format_file_size(file['size']):>10}  {_upload_date(file)}"
            )
        return "\n".join(lines)

    def _render_grid(self) -> str:
        rows = []
        for start in range(0, len(self.files), GRID_COLUMNS):
            cards = self.files[start:start + GRID_COLUMNS]
            cells = [
                [
                    f"{file_icon(card['fileName'])} {_truncate(card['fileName'], GRID_CELL_WIDTH - 3)}",
                    f"📏 {format_file_size(card['size'])}",
                    f"📅 {_upload_date(card)}",
                ]
                for card in cards
            ]
            for line_index in range(3):
                rows.append(
                    "".join(f"{cell[line_index]:<{GRID_CELL_WIDTH}}" for cell in cells).rstrip()
                )
            rows.append("")
        return "\n".join(rows).rstrip()

    def find(self, key: str) -> Optional[Dict[str, Any]]:
        return next((file for file in self.files if file["key"] == key), None)

    @staticmethod
    def preview(file: Dict[str, Any]) -> str:
        """Metadata only. No content is fetched for any file type."""
        return "\n".join(
            [
                f"{file_icon(file['fileName'])}  {file['fileName']}",
                f"Size: {format_file_size(file['size'])}",
                f"Uploaded: {_upload_date(file)}",
            ]
        )

    def download(self, key: str, file_name: str, destination: Optional[Path] = None) -> Optional[str]:
        """
        Get a download URL for `key`; with `destination`, also fetch the object into it.

        Returns the presigned URL, or None if anything failed (reported on the status board).
        """
        self.status.info(f"Generating download link for {file_name}...")
        try:
            url = self.api.download_url(key)
        except ApiError as err:
            self.status.error(f"Download failed: {err.message}")
            return None
        except httpx.HTTPError as err:
            self.status.error(f"Download error: {err}")
            return None

        if destination is not None:
            try:
                self._fetch(url, destination)
            except httpx.HTTPError as err:
                self.status.error(f"Download error: {err}")
                return None

        self.status.success(f"Download started for {file_name}")
        return url

    def _fetch(self, url: str, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.storage_http.stream("GET", url) as response:
                response.raise_for_status()
                with destination.open("wb") as out:
                    for chunk in response.iter_bytes():
                        out.write(chunk)
        except httpx.HTTPError:
            # no truncated file left behind
            destination.unlink(missing_ok=True)
            raise
        logger.info(f"Saved {url.split('?')[0]} to {destination}")

    def delete(self, key: str, file_name: str, confirm: ConfirmCallback) -> bool:
        """Delete `key` once `confirm` agrees, then refresh. Returns whether it was deleted."""
        if not confirm(f'Are you sure you want to delete "{file_name}"? This action cannot be undone.'):
            return False

        self.status.info(f"Deleting {file_name}...")
        try:
            self.api.delete_file(key)
        except ApiError as err:
            self.status.error(f"Delete failed: {err.message}")
            return False
        except httpx.HTTPError as err:
            self.status.error(f"Delete error: {err}")
            return False

        self.status.success(f"Successfully deleted {file_name}")
        self.refresh()
        return True
