"""Router – health check."""

from fastapi import APIRouter

from src.neon_upload.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe; uploads are never persisted, so there is nothing else to check."""
    return {"status": "ok", "storage": "mock", "publicBaseUrl": settings.public_base_url}
