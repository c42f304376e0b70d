"""Master API router: includes all sub-routers."""

from fastapi import APIRouter

from .routes.templates import router as templates_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(templates_router)
