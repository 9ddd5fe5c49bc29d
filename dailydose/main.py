"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dailydose.core.config import Settings, get_settings
from dailydose.core.database import Database
from dailydose.core.errors import DailyDoseError
from dailydose.api.auth import router as auth_router
from dailydose.api.daily_questions import router as daily_router
from dailydose.api.author import router as author_router
from dailydose.api.subjects import router as subjects_router
from dailydose.api.student import router as student_router
from dailydose.api.questions import router as questions_router
from dailydose.api.admin import router as admin_router

logger = logging.getLogger(__name__)

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(DailyDoseError)
    async def domain_exception_handler(request: Request, exc: DailyDoseError):
        """Render domain errors in the common envelope."""
        return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": {"message": exc.detail, "type": "http_error", "status_code": exc.status_code}},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        return JSONResponse(
            status_code=422,
            content={"error": {"message": "Validation error", "type": "validation_error",
                               "status_code": 422, "details": jsonable_errors(exc)}},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
        message = "An internal error occurred" if settings.is_production() else str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": {"message": message, "type": "internal_error", "status_code": 500}},
        )

def jsonable_errors(exc: RequestValidationError) -> list:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()]

def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s %s (%s)", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
        if settings.CREATE_TABLES:
            database.create_all()
        yield
        database.dispose()
        logger.info("Shutdown complete")

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database

    app.add_middleware(CORSMiddleware, allow_origins=settings.CORS_ORIGINS, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])
    _register_exception_handlers(app, settings)

    prefix = settings.API_V1_PREFIX
    app.include_router(auth_router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(daily_router, prefix=f"{prefix}/daily-questions", tags=["daily-questions"])
    app.include_router(author_router, prefix=f"{prefix}/author", tags=["authoring"])
    app.include_router(subjects_router, prefix=f"{prefix}/subjects", tags=["subjects"])
    app.include_router(student_router, prefix=f"{prefix}/student", tags=["student"])
    app.include_router(questions_router, prefix=f"{prefix}/questions", tags=["questions"])
    app.include_router(admin_router, prefix=f"{prefix}/admin", tags=["admin"])

    @app.get("/health")
    def health(): return {"status": "ok"}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("dailydose.main:app", host="0.0.0.0", port=8000)
