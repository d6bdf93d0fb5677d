"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from studyrag.presentation.api.v1.endpoints.health import router as health_router
from studyrag.presentation.api.v1.documents_controller import router as documents_router
from studyrag.presentation.api.v1.chat_controller import router as chat_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(documents_router)
router.include_router(chat_router)
