from textwrap import dedent
import logging
import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware

from clouddrive.config.settings import Settings
from clouddrive.dependencies import build_s3_client
from clouddrive.errors import (
    CloudDriveError,
    handle_broad_exceptions,
    handle_clouddrive_errors,
    handle_pydantic_validation_errors,
    handle_request_validation_errors,
)
from clouddrive.routers.files import router as files_router
from clouddrive.routers.health import router as health_router

# Set up logging
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, s3_client=None) -> FastAPI:
    """
    Create a FastAPI application.

    :param settings: Application settings; read from the environment when omitted.
    :param s3_client: The boto3 S3 client handed to every request; built from
        `settings` when omitted.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="CloudDrive API",
        summary="Presigned direct-to-S3 uploads, listing, downloads and deletes",
        version="v1",  # a fancier version would read the semver from pkg metadata
        description=dedent(
            """\
        Files never pass through this server. Clients ask for presigned URLs and
        transfer bytes directly with S3.

        | Step | Endpoint |
        | --- | --- |
        | 1. get upload URLs | `POST /generate-presigned-urls` |
        | 2. PUT each file to its URL | S3 |
        | 3. get the display URL | `POST /confirm-upload` |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.state.settings = settings
    app.state.s3_client = s3_client if s3_client is not None else build_s3_client(settings)

    missing = settings.missing_required_settings()
    if missing:
        logger.warning(f"Missing environment variables: {', '.join(missing)}. Please check your .env file")
    else:
        logger.info("All required environment variables are set")

    app.include_router(files_router, tags=["files"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=CloudDriveError,
        handler=handle_clouddrive_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
