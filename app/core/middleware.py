# app/core/middleware.py
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.settings import settings
from app.core.exceptions import InternalError, SalesError

logger = logging.getLogger(__name__)

def setup_middleware(app: FastAPI):
    """CORS, request timing and engine error handlers"""

    # ==================== CORS ====================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin"],
        expose_headers=["X-Process-Time"],
        max_age=3600
    )

    # ==================== REQUEST TIMING ====================

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} in {elapsed * 1000:.1f}ms"
        )
        return response

    setup_exception_handlers(app)

def setup_exception_handlers(app: FastAPI):
    """Render every error as {"error", "code"} with its HTTP status"""

    @app.exception_handler(SalesError)
    async def sales_error_handler(request: Request, exc: SalesError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.code} - {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc.code} - {exc.message}")

        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} crashed: {exc!r}")
        error = InternalError("Internal server error.")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())
