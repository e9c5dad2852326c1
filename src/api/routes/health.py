from datetime import datetime, timezone

from fastapi import APIRouter

from src.api.schemas.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(
        message="Booth booking API is running",
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/test")
def test_endpoint():
    return {
        "message": "API server is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
