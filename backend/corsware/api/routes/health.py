from datetime import UTC, datetime

from fastapi import APIRouter

from corsware.core.config import get_settings
from corsware.cors.options import classify_origin

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    settings = get_settings()
    policy = classify_origin(settings.get_cors_origin())
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": settings.environment,
        "cors": type(policy).__name__ if policy is not None else "disabled",
    }


@router.get("/health/live")
def liveness():
    return {"status": "alive", "timestamp": datetime.now(UTC).isoformat()}
