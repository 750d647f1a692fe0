import httpx
import pytest
from fastapi.testclient import TestClient

from clouddrive.client.api import FilesApiClient
from clouddrive.client.directory import DirectoryView, ViewMode
from clouddrive.client.status import StatusBoard, StatusKind
from clouddrive.main import create_app
from tests.consts import TEST_BUCKET_NAME
from tests.fixtures.app_client import make_settings


@pytest.fixture
def status() -> StatusBoard:
    return StatusBoard()


@pytest.fixture
def view(api: FilesApiClient, storage_http, status) -> DirectoryView:
    return DirectoryView(api, status, storage_http=storage_http)


@pytest.fixture
def stored(s3_client):
    s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key="uploads/report.pdf", Body=b"x" * 1536)
    s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key="uploads/photo.jpg", Body=b"y" * 2048)
    return ["uploads/report.pdf", "uploads/photo.jpg"]


def test_empty_state(view: DirectoryView):
    view.refresh()
    assert view.render() == "📁 No files found\nUpload some files to get started!"


def test_list_and_grid_render(view: DirectoryView, stored):
    view.toggle_view(ViewMode.LIST)
    listing = view.render()
    assert len(listing.splitlines()) == 2
    assert "report.pdf" in listing
    assert "1.5 KB" in listing
    assert "2 KB" in listing

    view.toggle_view(ViewMode.GRID)
    grid = view.render()
    # one row of cards, three lines each
    assert len(grid.splitlines()) == 3
    assert "📏 1.5 KB" in grid


def test_toggle_view_refetches(view: DirectoryView, monkeypatch):
    calls = []
    monkeypatch.setattr(view.api, "list_files", lambda: calls.append(1) or [])

    view.toggle_view(ViewMode.LIST)
    view.toggle_view(ViewMode.GRID)

    assert len(calls) == 2


def test_listing_error_is_rendered(status, storage_http, mocked_aws):
    with TestClient(create_app(settings=make_settings(s3_bucket_name="does-not-exist"))) as client:
        view = DirectoryView(FilesApiClient(http_client=client), status, storage_http=storage_http)
        view.refresh()

    assert view.files == []
    assert "Error loading files" in view.render()
    assert "NoSuchBucket" in view.render()


def test_preview_shows_metadata_only(view: DirectoryView, stored, fake_s3):
    view.refresh()
    file = view.find("uploads/report.pdf")

    preview = view.preview(file)

    assert "report.pdf" in preview
    assert "Size: 1.5 KB" in preview
    assert "Uploaded: " in preview
    assert fake_s3.requests == []


def test_download_returns_url(view: DirectoryView, status, stored):
    url = view.download("uploads/report.pdf", "report.pdf")

    assert "uploads/report.pdf" in url
    assert [message.kind for message in status.messages] == [StatusKind.INFO, StatusKind.SUCCESS]


def test_download_to_destination(view: DirectoryView, stored, tmp_path):
    destination = tmp_path / "out" / "report.pdf"

    view.download("uploads/report.pdf", "report.pdf", destination=destination)

    assert destination.read_bytes() == b"x" * 1536


def test_download_with_empty_key_reports_error(view: DirectoryView, status):
    assert view.download("", "nothing") is None
    assert status.messages[-1].text == "Download failed: File key is required"


def test_delete_needs_confirmation(view: DirectoryView, stored, monkeypatch):
    calls = []
    monkeypatch.setattr(view.api, "delete_file", lambda key: calls.append(key))
    prompts = []

    def decline(prompt: str) -> bool:
        prompts.append(prompt)
        return False

    assert view.delete("uploads/report.pdf", "report.pdf", confirm=decline) is False
    assert calls == []
    assert prompts == ['Are you sure you want to delete "report.pdf"? This action cannot be undone.']


def test_delete_then_refresh(view: DirectoryView, status, stored):
    view.refresh()
    assert len(view.files) == 2

    assert view.delete("uploads/report.pdf", "report.pdf", confirm=lambda prompt: True) is True

    assert [file["key"] for file in view.files] == ["uploads/photo.jpg"]
    assert status.messages[-1].text == "Successfully deleted report.pdf"


class BrokenStream(httpx.SyncByteStream):
    """Sends part of the body, then drops the connection."""

    def __iter__(self):
        yield b"x" * 512
        raise httpx.ReadError("connection reset")


def test_interrupted_download_leaves_no_file(api: FilesApiClient, status, stored, tmp_path):
    broken_http = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, stream=BrokenStream())))
    view = DirectoryView(api, status, storage_http=broken_http)
    destination = tmp_path / "report.pdf"

    assert view.download("uploads/report.pdf", "report.pdf", destination=destination) is None

    assert not destination.exists()
    assert status.messages[-1].text == "Download error: connection reset"
