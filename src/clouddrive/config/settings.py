# src/clouddrive/config/settings.py
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

MiB = 1024 * 1024


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Values passed to the constructor (tests, app factory callers)
    2. Environment variables
    3. .env file (if exists)
    4. Default values in this class (lowest priority)

    Usage:
        from clouddrive.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    app_name: str = Field(
        default="CloudDrive Backend API",
        description="Application name, reported by `GET /`"
    )

    # AWS Core Settings
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    aws_region: str = Field(
        default="us-east-1",
        description="Region of the bucket; also used to build public object URLs"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        description="Override for S3-compatible endpoints (localstack, moto server)"
    )

    # S3 Configuration
    s3_bucket_name: Optional[str] = Field(
        default=None,
        description="Bucket holding every uploaded object"
    )

    upload_prefix: str = Field(
        default="uploads/",
        description="Key prefix for uploads and for the directory listing"
    )

    list_max_keys: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Single-page cap for `GET /list-files`"
    )

    # Presigned URL lifetimes, in seconds
    upload_url_expires_in: int = Field(default=300, gt=0)
    download_url_expires_in: int = Field(default=3600, gt=0)

    # Documented upload policy. Not enforced on the presign/list/delete paths.
    max_file_size_bytes: int = Field(default=100 * MiB, gt=0)
    max_files_per_batch: int = Field(default=10, gt=0)

    # HTTP server
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Client
    clouddrive_api_url: str = Field(
        default="http://localhost:3000",
        description="Base URL the client commands talk to"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("upload_prefix")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """The prefix is a directory-like namespace, e.g. `uploads/`."""
        v = v.lstrip("/")
        if v and not v.endswith("/"):
            v = f"{v}/"
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    def missing_required_settings(self) -> List[str]:
        """Return the environment variable names of required settings that are unset."""
        required = {
            "AWS_ACCESS_KEY_ID": self.aws_access_key_id,
            "AWS_SECRET_ACCESS_KEY": self.aws_secret_access_key,
            "S3_BUCKET_NAME": self.s3_bucket_name,
        }
        return [name for name, value in required.items() if not value]

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
