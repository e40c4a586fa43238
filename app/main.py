from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.core.config import AppSettings
from app.core.errors import DomainError, StorageUnavailable
from app.api import api_router
from app.db.database import init_models
from app.schemas.response import ApiErrorResponse


def get_app_settings() -> AppSettings:
    try:
        return AppSettings()
    except Exception as e:
        logger.error(f"Error loading settings: {e}")
        raise

def setup_logging(settings: AppSettings):
    logger.add(
        settings.log_file,
        level=settings.app_log_level.value.upper(),
        rotation=settings.log_rotation,
        compression=settings.log_compression.value,
        format=settings.log_format,
    )

def _error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    body = ApiErrorResponse(status_code=status_code, message=message, errors=errors or [])
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

def register_exception_handlers(app: FastAPI):
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        return _error_response(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"{request.method} {request.url.path} invalid request: {exc.errors()}")
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation failed",
            [{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in exc.errors()],
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(f"Storage error on {request.method} {request.url.path}: {exc}")
        error = StorageUnavailable()
        return _error_response(error.status_code, error.message)

def create_app(settings: AppSettings = None):
    settings = settings or get_app_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_tables:
            await init_models()
            logger.info("Database tables ensured")
        yield

    app = FastAPI(
        title=settings.app_name,
        description="Videos, comments, likes, subscriptions, playlists and tweets",
        version="1.0.0",
        lifespan=lifespan,
    )
    register_exception_handlers(app)

    @app.get("/")
    def read_root():
        return {"message": f"Welcome to {settings.app_name}"}
    @app.get("/health")
    async def health_check():
        return {"status": "ok"}
    app.include_router(api_router, prefix=settings.api_prefix)

    return app

if __name__ == "__main__":
    app_settings = get_app_settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=app_settings.app_host,
        port=app_settings.app_port,
        reload=app_settings.app_reload,
    )
