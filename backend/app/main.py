"""
LTI ATS - Main FastAPI application
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from app.core.config import Settings, settings
from app.core.database import Database
from app.core.logging_config import configure_logging
from app.core.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    ExceptionHandlerMiddleware,
)
from app.core.exceptions import AppError
from app.core.responses import error_body
from app.core.schemas import error_details
from app.candidates.router import router as candidates_router
from app.documents.router import router as documents_router
from app.documents.storage import LocalFileStorage

logger = structlog.get_logger()


def create_app(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    storage: Optional[LocalFileStorage] = None,
) -> FastAPI:
    """Build the application around an explicitly constructed database handle"""
    app_settings = app_settings or settings
    configure_logging(app_settings.LOG_LEVEL, app_settings.LOG_JSON)

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=app_settings.APP_VERSION,
        description="Applicant Tracking System API",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.settings = app_settings
    app.state.database = database or Database(
        app_settings.DATABASE_URL,
        pool_size=app_settings.DATABASE_POOL_SIZE,
        max_overflow=app_settings.DATABASE_MAX_OVERFLOW,
        echo=app_settings.DEBUG,
    )
    app.state.storage = storage or LocalFileStorage(app_settings.UPLOAD_DIR)

    # Add middleware
    app.add_middleware(CorrelationIDMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ExceptionHandlerMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[app_settings.FRONTEND_URL],
        allow_credentials=app_settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Typed errors carry their own status and code"""
        if exc.status_code >= 500:
            logger.error("request_error", code=exc.code, path=request.url.path)
        else:
            logger.info("request_rejected", code=exc.code, path=request.url.path)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.to_dict()))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Malformed JSON bodies and non-numeric path ids"""
        return JSONResponse(
            status_code=400,
            content=error_body(
                {
                    "code": "VALIDATION_ERROR",
                    "message": "Validation failed",
                    "details": error_details(exc.errors(), skip=("body", "query", "path")),
                }
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            error = {
                "code": "NOT_FOUND",
                "message": f"Route {request.method} {request.url.path} not found",
            }
        elif exc.status_code == 405:
            error = {"code": "METHOD_NOT_ALLOWED", "message": str(exc.detail)}
        else:
            error = {"code": "HTTP_ERROR", "message": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=error_body(error))

    # Health check
    @app.get("/")
    async def root():
        """Health check endpoint"""
        return {
            "success": True,
            "message": f"{app_settings.APP_NAME} server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": app_settings.APP_VERSION,
        }

    # Include routers
    app.include_router(candidates_router)
    app.include_router(documents_router)

    @app.on_event("startup")
    async def startup_event():
        """Initialize on startup"""
        logger.info("application_starting", version=app_settings.APP_VERSION)
        app.state.database.connect()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown"""
        logger.info("application_shutting_down")
        app.state.database.dispose()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
