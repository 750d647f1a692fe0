"""HTTP client for the CloudDrive API."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from clouddrive.client.selection import PendingFile

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A non-success response from the API, carrying the server's `error` message."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class FilesApiClient:
    """
    Thin wrapper over the CloudDrive endpoints.

    Responses are returned as the decoded JSON dictionaries (camelCase keys),
    the shape the server documents.

    :param base_url: Root URL of the API, e.g. `http://localhost:3000`.
    :param http_client: An optional `httpx.Client`; tests pass FastAPI's `TestClient`.
    """

    def __init__(self, base_url: str = "http://localhost:3000", http_client: Optional[httpx.Client] = None):
        self._http = http_client or httpx.Client(base_url=base_url)

    def _request(self, method: str, path: str, json: Any = None) -> Dict[str, Any]:
        response = self._http.request(method, path, json=json)
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.is_error:
            message = payload.get("error") if isinstance(payload, dict) else None
            raise ApiError(response.status_code, message or f"HTTP {response.status_code}")
        return payload

    def generate_presigned_urls(self, files: List[PendingFile]) -> List[Dict[str, Any]]:
        """One presigned upload per file, in the order of `files`."""
        payload = self._request(
            "POST",
            "/generate-presigned-urls",
            json={
                "files": [
                    {"name": file.name, "type": file.content_type, "size": file.size}
                    for file in files
                ]
            },
        )
        return payload["presignedData"]

    def confirm_upload(self, presigned: Dict[str, Any]) -> Dict[str, Any]:
        payload = self._request(
            "POST",
            "/confirm-upload",
            json={
                "s3Key": presigned["s3Key"],
                "originalName": presigned["originalName"],
                "fileName": presigned["fileName"],
                "size": presigned["size"],
                "type": presigned["type"],
            },
        )
        return payload["uploadedFile"]

    def list_files(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/list-files")["files"]

    def download_url(self, key: str) -> str:
        return self._request("POST", "/download-url", json={"key": key})["downloadUrl"]

    def delete_file(self, key: str) -> str:
        return self._request("DELETE", "/delete-file", json={"key": key})["deletedKey"]

    def close(self) -> None:
        self._http.close()
