"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from crud_template.presentation.api.v1.endpoints.examples import router as examples_router
from crud_template.presentation.api.v1.endpoints.health import router as health_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(examples_router)
