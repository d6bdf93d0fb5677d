"""Health check endpoint — no dependencies, always available."""

from fastapi import APIRouter

from studyrag.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Returns the application health status and the active retrieval setup."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "vector_backend": settings.vector_backend,
        "embedding_model": settings.embedding_model,
        "answer_model": settings.answer_model,
    }
