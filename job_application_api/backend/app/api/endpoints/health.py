# File: backend/app/api/endpoints/health.py
from datetime import datetime, timezone

from fastapi import APIRouter

from app.schemas.application import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check():
    return HealthResponse(
        status="OK",
        message="Job Application API is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
