from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from clouddrive.config.settings import Settings
from clouddrive.dependencies import get_settings
from clouddrive.schemas import HealthResponse, ServiceInfoResponse

router = APIRouter()

@router.get("/", response_model=ServiceInfoResponse)
async def service_info(settings: Settings = Depends(get_settings)):
    """Identify the service."""
    return ServiceInfoResponse(message=settings.app_name, status="running")

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness check for monitoring.

    Does not contact S3; a misconfigured bucket shows up on the file endpoints instead.
    """
    return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc))
