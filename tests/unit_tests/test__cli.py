import pytest
from click.testing import CliRunner

from clouddrive.cli import cli
from clouddrive.client.api import FilesApiClient
from clouddrive.client.selection import PendingFile
from clouddrive.config.settings import get_settings
from tests.consts import TEST_BUCKET_NAME


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def cli_obj(api: FilesApiClient, storage_http) -> dict:
    return {"api": api, "storage_http": storage_http}


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    monkeypatch.setenv("S3_BUCKET_NAME", TEST_BUCKET_NAME)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_ls_empty(runner: CliRunner, cli_obj):
    result = runner.invoke(cli, ["ls"], obj=cli_obj)

    assert result.exit_code == 0, result.output
    assert "No files found" in result.output


def test_upload_then_ls(runner: CliRunner, cli_obj, tmp_path, s3_client):
    first = tmp_path / "first.txt"
    first.write_bytes(b"hello")
    second = tmp_path / "second.csv"
    second.write_bytes(b"a,b\n1,2\n")

    result = runner.invoke(cli, ["upload", str(first), str(second)], obj=cli_obj)

    assert result.exit_code == 0, result.output
    assert "Uploading... 50%" in result.output
    assert "Uploading... 100%" in result.output
    assert "Files uploaded successfully!" in result.output
    assert "first.txt <https://" in result.output
    assert len(s3_client.list_objects_v2(Bucket=TEST_BUCKET_NAME)["Contents"]) == 2

    result = runner.invoke(cli, ["ls", "--view", "list"], obj=cli_obj)
    assert result.exit_code == 0
    assert "first" in result.output
    assert "second" in result.output


def test_upload_rejects_too_many_files(runner: CliRunner, cli_obj, tmp_path, fake_s3):
    paths = []
    for i in range(11):
        path = tmp_path / f"file{i}.txt"
        path.write_bytes(b"x" * (i + 1))
        paths.append(str(path))

    result = runner.invoke(cli, ["upload", *paths], obj=cli_obj)

    assert result.exit_code == 2
    assert "Too many files. Maximum is 10 files." in result.output
    assert fake_s3.requests == []


def test_upload_failure_exits_nonzero(runner: CliRunner, cli_obj, tmp_path, fake_s3):
    fake_s3.fail_on = {0}
    path = tmp_path / "a.txt"
    path.write_bytes(b"a")

    result = runner.invoke(cli, ["upload", str(path)], obj=cli_obj)

    assert result.exit_code == 1
    assert "Upload error: Failed to upload a.txt" in result.output


def test_upload_rejects_oversized_file_without_reading_it(runner: CliRunner, cli_obj, tmp_path, fake_s3, monkeypatch):
    monkeypatch.setenv("MAX_FILE_SIZE_BYTES", "4")
    get_settings.cache_clear()
    reads = []
    monkeypatch.setattr(PendingFile, "from_path", classmethod(lambda cls, path: reads.append(path)))
    path = tmp_path / "big.bin"
    path.write_bytes(b"x" * 10)

    result = runner.invoke(cli, ["upload", str(path)], obj=cli_obj)

    assert result.exit_code == 2
    assert "File too large: big.bin." in result.output
    assert reads == []
    assert fake_s3.requests == []


def test_download_prints_url(runner: CliRunner, cli_obj, s3_client):
    s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key="uploads/a.txt", Body=b"a")

    result = runner.invoke(cli, ["download", "uploads/a.txt"], obj=cli_obj)

    assert result.exit_code == 0, result.output
    assert any("X-Amz-Signature=" in line for line in result.output.splitlines())


def test_preview(runner: CliRunner, cli_obj, s3_client):
    s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key="uploads/a.txt", Body=b"a" * 1536)

    result = runner.invoke(cli, ["preview", "uploads/a.txt"], obj=cli_obj)

    assert result.exit_code == 0, result.output
    assert "Size: 1.5 KB" in result.output

    result = runner.invoke(cli, ["preview", "uploads/missing.txt"], obj=cli_obj)
    assert result.exit_code == 1


def test_rm_asks_first(runner: CliRunner, cli_obj, s3_client):
    s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key="uploads/a.txt", Body=b"a")

    result = runner.invoke(cli, ["rm", "uploads/a.txt"], obj=cli_obj, input="n\n")
    assert result.exit_code == 1
    assert "Cancelled" in result.output
    assert "Contents" in s3_client.list_objects_v2(Bucket=TEST_BUCKET_NAME)

    result = runner.invoke(cli, ["rm", "uploads/a.txt"], obj=cli_obj, input="y\n")
    assert result.exit_code == 0, result.output
    assert "Successfully deleted a.txt" in result.output
    assert "Contents" not in s3_client.list_objects_v2(Bucket=TEST_BUCKET_NAME)


def test_show_config_masks_secrets(runner: CliRunner, monkeypatch):
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "supersecretvalue")
    get_settings.cache_clear()

    result = runner.invoke(cli, ["show-config"])

    assert result.exit_code == 0
    assert f"S3 Bucket: {TEST_BUCKET_NAME}" in result.output
    assert "supersecretvalue" not in result.output
    assert "supe************" in result.output
