"""Academy Records API - application factory"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from app.api.api import api_router
from app.core.config import settings
from app.core.exceptions import (
    NotFoundError,
    register_exception_handlers,
    unhandled_exception_handler,
)
from app.core.logging_config import setup_logging
from app.db.mongo import MongoDatabase

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}


def create_app(mongo: Optional[MongoDatabase] = None, static_dir: Optional[str] = None) -> FastAPI:
    """Build the application around a MongoDB connection handle.

    When ``mongo`` is already open (tests, scripts) startup skips the
    connection step; otherwise startup waits until MongoDB answers.
    """
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    mongo = mongo or MongoDatabase.from_settings()
    static_root = Path(static_dir or settings.STATIC_DIR).resolve()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s...", settings.PROJECT_NAME)
        if not mongo.is_open:
            await mongo.connect()
        mongo.start_monitor()
        yield
        logger.info("Shutting down %s...", settings.PROJECT_NAME)
        await mongo.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.DESCRIPTION,
        version=settings.PROJECT_VERSION,
        lifespan=lifespan
    )
    app.state.mongo = mongo

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception as exc:
            response = await unhandled_exception_handler(request, exc)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    # Added last so CORS wraps the header middleware, error responses included.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.api_route(
        settings.API_PREFIX + "/{rest:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False
    )
    async def unknown_api_route(rest: str):
        raise NotFoundError("Not found")

    @app.get("/health", tags=["health"])
    async def health(request: Request):
        connected = await request.app.state.mongo.ping()
        return {
            "status": "ok",
            "storage": "connected" if connected else "disconnected"
        }

    @app.get("/{full_path:path}", include_in_schema=False)
    async def application_shell(full_path: str):
        """Serve files from the static directory, falling back to index.html"""
        if full_path == "api" or full_path.startswith("api/"):
            raise NotFoundError("Not found")

        if full_path:
            candidate = (static_root / full_path).resolve()
            if candidate.is_file() and candidate.is_relative_to(static_root):
                return FileResponse(candidate)

        index = static_root / "index.html"
        if not index.is_file():
            raise NotFoundError("Not found")
        return FileResponse(index)

    return app


app = create_app()
