"""
FastAPI application entry point for the time capsule backend.
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from timecapsule.config import get_settings
from timecapsule.errors import ApiError, api_error_handler, validation_error_handler
from timecapsule.routes import router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    app = FastAPI(title="Time Capsule Backend", version="0.1.0")
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    logger.info("Server running on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
