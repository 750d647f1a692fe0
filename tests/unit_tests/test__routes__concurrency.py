import threading
import time

from fastapi import status
from fastapi.testclient import TestClient

from clouddrive.routers import files as files_router

SLOW_FETCH_SECONDS = 1.0


def test_slow_listing_does_not_block_health(offline_client: TestClient, monkeypatch):
    def slow_fetch(**kwargs):
        time.sleep(SLOW_FETCH_SECONDS)
        return []

    monkeypatch.setattr(files_router, "fetch_s3_objects_metadata", slow_fetch)

    list_responses = []
    listing = threading.Thread(target=lambda: list_responses.append(offline_client.get("/list-files")))
    started = time.monotonic()
    listing.start()
    time.sleep(0.1)

    health_response = offline_client.get("/health")
    health_elapsed = time.monotonic() - started
    listing.join()

    assert health_response.status_code == status.HTTP_200_OK
    assert health_elapsed < SLOW_FETCH_SECONDS / 2
    assert list_responses[0].status_code == status.HTTP_200_OK
    assert list_responses[0].json()["files"] == []
