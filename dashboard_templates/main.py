"""Dashboard templates: FastAPI entry point with lifespan management."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .api.router import api_router
from .database import close_engine, create_tables
from .dependencies import get_app_config
from .middleware.error_handler import register_error_handlers
from .middleware.request_id import RequestIDMiddleware
from .utils.logging import get_logger, setup_logging

logger = get_logger("dashboard_templates.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_app_config()
    await create_tables(config)
    logger.info("startup_complete", app=config.app_name, database=config.database_url.split("://")[0])
    yield
    await close_engine()
    logger.info("shutdown_complete")


def create_app() -> FastAPI:
    config = get_app_config()
    setup_logging(
        debug=config.debug,
        log_dir=config.log_dir,
        log_max_bytes=config.log_max_bytes,
        log_backup_count=config.log_backup_count,
    )

    app = FastAPI(title=config.app_name, lifespan=lifespan)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def run() -> None:
    config = get_app_config()
    uvicorn.run(
        "dashboard_templates.main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    run()
