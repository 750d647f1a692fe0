# cli.py
import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from clouddrive.client.api import FilesApiClient
from clouddrive.client.controller import CloudDriveController
from clouddrive.client.directory import ViewMode
from clouddrive.client.formatting import format_file_size
from clouddrive.client.selection import PendingFile
from clouddrive.client.status import StatusBoard, StatusKind
from clouddrive.config.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)

STATUS_COLORS = {
    StatusKind.INFO: "blue",
    StatusKind.SUCCESS: "green",
    StatusKind.ERROR: "red",
}


def _mask(value: Optional[str]) -> str:
    if not value:
        return "<unset>"
    return f"{value[:4]}{'*' * max(len(value) - 4, 0)}"


def echo_status(status: StatusBoard) -> None:
    for message in status.messages:
        click.secho(message.render(), fg=STATUS_COLORS[message.kind], err=message.kind is StatusKind.ERROR)


def make_controller(ctx: click.Context, **kwargs) -> CloudDriveController:
    """
    Build the controller for the API URL given on the command line (or settings).

    An `api` or `storage_http` client already in `ctx.obj` is used as is.
    """
    api = ctx.obj.get("api") or FilesApiClient(base_url=ctx.obj["api_url"])
    return CloudDriveController(api, storage_http=ctx.obj.get("storage_http"), **kwargs)


@click.group()
@click.option("--api-url", default=None, help="CloudDrive API base URL (defaults to CLOUDDRIVE_API_URL)")
@click.pass_context
def cli(ctx: click.Context, api_url: Optional[str]):
    """CloudDrive: serve the API, or manage files through it."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url or settings.clouddrive_api_url


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST)")
@click.option("--port", default=None, type=int, help="Port to bind (defaults to PORT)")
def serve(host: Optional[str], port: Optional[int]):
    """Run the API server"""
    import uvicorn

    from clouddrive.main import create_app

    settings = get_settings()
    app = create_app(settings)
    host = host or settings.host
    port = port or settings.port
    click.echo(f"🚀 Backend server running on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  AWS Region: {settings.aws_region}")
    click.echo(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    click.echo(f"  AWS Access Key ID: {_mask(settings.aws_access_key_id)}")
    click.echo(f"  AWS Secret Access Key: {_mask(settings.aws_secret_access_key)}")
    click.echo(f"  S3 Bucket: {settings.s3_bucket_name}")
    click.echo(f"  Upload Prefix: {settings.upload_prefix}")
    click.echo(f"  Upload URL Expiry: {settings.upload_url_expires_in}s")
    click.echo(f"  Download URL Expiry: {settings.download_url_expires_in}s")
    click.echo(f"  Max File Size: {format_file_size(settings.max_file_size_bytes)}")
    click.echo(f"  Max Files Per Batch: {settings.max_files_per_batch}")
    click.echo(f"  API URL: {settings.clouddrive_api_url}")

    missing = settings.missing_required_settings()
    if missing:
        click.secho(f"⚠️  Missing environment variables: {', '.join(missing)}", fg="yellow")


@cli.command(name="ls")
@click.option("--view", type=click.Choice([mode.value for mode in ViewMode]), default=ViewMode.GRID.value)
@click.pass_context
def list_files(ctx: click.Context, view: str):
    """List stored files"""
    controller = make_controller(ctx, view=ViewMode(view))
    controller.directory.refresh()
    click.echo(controller.directory.render())
    if controller.directory.error:
        ctx.exit(1)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--delete-orphans", is_flag=True, help="Delete files already stored if a later file fails")
@click.pass_context
def upload(ctx: click.Context, paths: Tuple[Path, ...], delete_orphans: bool):
    """Upload files directly to storage"""
    settings = get_settings()

    def show_progress(percent: float) -> None:
        click.echo(f"Uploading... {round(percent)}%")

    # checked on disk so an oversized file is never read
    for path in paths:
        if path.stat().st_size > settings.max_file_size_bytes:
            raise click.UsageError(
                f"File too large: {path.name}. Maximum size is {format_file_size(settings.max_file_size_bytes)}."
            )

    controller = make_controller(ctx, on_progress=show_progress, delete_orphans=delete_orphans)
    added = controller.add_files(PendingFile.from_path(path) for path in paths)
    if added > settings.max_files_per_batch:
        raise click.UsageError(f"Too many files. Maximum is {settings.max_files_per_batch} files.")

    batch = controller.upload()
    echo_status(controller.status)
    if batch is None:
        ctx.exit(1)
    click.echo(controller.directory.render())


@cli.command()
@click.argument("key")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Save the file here instead of printing the download URL")
@click.pass_context
def download(ctx: click.Context, key: str, output: Optional[Path]):
    """Get a download link for a stored file"""
    controller = make_controller(ctx)
    file_name = key.split("/")[-1]
    url = controller.directory.download(key, file_name, destination=output)
    echo_status(controller.status)
    if url is None:
        ctx.exit(1)
    if output is None:
        click.echo(url)


@cli.command()
@click.argument("key")
@click.pass_context
def preview(ctx: click.Context, key: str):
    """Show a stored file's metadata"""
    controller = make_controller(ctx)
    controller.directory.refresh()
    file = controller.directory.find(key)
    if file is None:
        click.secho(controller.directory.error or f"File not found: {key}", fg="red", err=True)
        ctx.exit(1)
    click.echo(controller.directory.preview(file))


@cli.command(name="rm")
@click.argument("key")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove(ctx: click.Context, key: str, yes: bool):
    """Delete a stored file"""
    controller = make_controller(ctx)
    file_name = key.split("/")[-1]

    def confirm(prompt: str) -> bool:
        return yes or click.confirm(prompt, default=False)

    deleted = controller.directory.delete(key, file_name, confirm=confirm)
    echo_status(controller.status)
    if not deleted:
        if not controller.status.messages:
            click.echo("Cancelled")
        ctx.exit(1)
    click.echo(controller.directory.render())


if __name__ == "__main__":
    cli()
