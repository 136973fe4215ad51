"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from scenario_manager.presentation.api.v1.endpoints.health import router as health_router
from scenario_manager.presentation.api.v1.endpoints.businesses import router as businesses_router
from scenario_manager.presentation.api.v1.endpoints.scenarios import router as scenarios_router
from scenario_manager.presentation.api.v1.endpoints.comments import router as comments_router
from scenario_manager.presentation.api.v1.endpoints.quick_labels import router as quick_labels_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(businesses_router)
router.include_router(scenarios_router)
router.include_router(comments_router)
router.include_router(quick_labels_router)
