# backend/rentdesk/main.py
from contextlib import asynccontextmanager
from typing import Optional
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

from rentdesk.api.v1.router import api_router
from rentdesk.core.config import Settings, settings as default_settings
from rentdesk.core.exceptions import RentDeskError, UpstreamError
from rentdesk.core.logging import logger
from rentdesk.db.database import Database


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or default_settings
    database = database or Database(settings.DATABASE_URL, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Starting {settings.PROJECT_NAME} API")
        yield
        # Shutdown
        logger.info(f"Shutting down {settings.PROJECT_NAME} API")
        await database.dispose()

    app = FastAPI(
        title=f"{settings.PROJECT_NAME} API",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=("/api/docs" if settings.ENVIRONMENT == "development" else None),
        redoc_url=("/api/redoc" if settings.ENVIRONMENT == "development" else None),
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # CORS Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        """Tag the request with an id, time it and log the outcome"""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(process_time * 1000, 2),
            },
        )
        return response

    @app.exception_handler(RentDeskError)
    async def rentdesk_error_handler(request: Request, exc: RentDeskError):
        if exc.status_code >= 500:
            logger.error(
                f"{type(exc).__name__}: {exc.message}",
                extra={"request_id": getattr(request.state, "request_id", None)},
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": "Validation failed", "errors": errors})

    @app.exception_handler(OperationalError)
    @app.exception_handler(PoolTimeoutError)
    async def store_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Data store error: {exc}",
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        error = UpstreamError()
        return JSONResponse(status_code=error.status_code, content={"detail": error.message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.exception("Unhandled exception while handling request", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # Include routers
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
        }

    return app


app = create_app()
