"""API gateway entrypoint."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from services.api_gateway.config import get_settings
from services.api_gateway.dependencies import get_backends
from services.api_gateway.logging_config import setup_logging
from services.api_gateway.presentation.http.errors import register_error_handlers
from services.api_gateway.presentation.http.routes import router

settings = get_settings()
setup_logging(settings.LOG_LEVEL, json_output=settings.is_production)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    backends = get_backends()
    logger.info(
        "Starting %s v%s [%s] notifications=%s block_list=%s storage=%s",
        settings.APP_NAME,
        settings.APP_VERSION,
        settings.ENVIRONMENT,
        backends.notifications_enabled,
        backends.block_list_enabled,
        settings.STORAGE_BACKEND,
    )
    yield
    backends.close()
    logger.info("Shutting down %s", settings.APP_NAME)


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)
app.include_router(router)


def main() -> None:
    uvicorn.run(
        "services.api_gateway.app:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
