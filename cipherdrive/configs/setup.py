from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import ConnectionFailure, PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse
from starlette import status
from scalar_fastapi import get_scalar_api_reference
from cipherdrive.schemas.response import ApiError, ErrorDetail
from cipherdrive.configs.settings import settings
from cipherdrive.core.exceptions import AppError, UpstreamError, database_unavailable_error
from cipherdrive.utils import setup_logging, get_logger
from cipherdrive.middlewares import init_sentry
from cipherdrive.databases import mongodb
from cipherdrive.models import DOCUMENT_MODELS
from cipherdrive.services import get_object_storage, init_trash_sweeper, shutdown_trash_sweeper
from cipherdrive.api import folder_router, file_router, health_router

logger = get_logger(__name__)


async def _setup_logging() -> None:
    """Setup application logging configuration"""
    setup_logging(
        level="DEBUG" if settings.APP_DEBUG else "INFO",
        app_name=settings.APP_NAME,
        enable_json=settings.APP_ENV == "prod",
        log_file="logs/app.log" if settings.APP_ENV == "prod" else None
    )
    logger.info("Logging configuration initialized")


async def _setup_sentry() -> None:
    """Setup Sentry monitoring for production environment"""
    if not settings.SENTRY_DSN:
        logger.warning("Sentry DSN not configured - monitoring disabled")
        return

    if settings.APP_ENV != "prod":
        logger.info("Sentry monitoring disabled - not in production environment")
        return

    try:
        init_sentry(
            dsn=settings.SENTRY_DSN,
            environment=settings.APP_ENV,
            release=settings.RELEASE,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
            send_default_pii=settings.SENTRY_SEND_DEFAULT_PII
        )
        logger.info("Sentry monitoring initialized for production environment")
    except Exception as e:
        # Monitoring is optional; startup continues without it
        logger.error(f"Failed to initialize Sentry: {str(e)}")


async def _setup_storage() -> None:
    """Connect the metadata store and make sure the object store bucket exists"""
    try:
        await mongodb.connect(document_models=DOCUMENT_MODELS)
        logger.info("MongoDB connection established successfully")
    except Exception as e:
        logger.error(f"Failed to initialize MongoDB: {str(e)}")
        raise

    try:
        await get_object_storage().ensure_bucket()
        logger.info("Object store bucket ready")
    except Exception as e:
        logger.error(f"Failed to initialize object store: {str(e)}")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Starting CipherDrive API...")

    try:
        await _setup_logging()
        await _setup_sentry()
        await _setup_storage()

        if settings.DRIVE_SWEEP_ENABLED:
            init_trash_sweeper(interval=settings.DRIVE_SWEEP_INTERVAL_SECONDS)

        logger.info("Application startup completed successfully")

        yield

    except Exception as e:
        logger.error(f"Application startup failed: {str(e)}")
        raise
    finally:
        logger.info("Shutting down CipherDrive API...")
        try:
            shutdown_trash_sweeper()
            await mongodb.disconnect()
            logger.info("Application shutdown completed successfully")
        except Exception as e:
            logger.error(f"Error during shutdown: {str(e)}")


def _error_body(message: str, errors: list) -> dict:
    return ApiError(
        success=False,
        message=message,
        errors=[ErrorDetail(**e) for e in errors] or None
    ).model_dump(mode="json", exclude_none=True)


async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    """Handle custom application errors"""
    errors = list(exc.errors or [])
    errors.append({
        "code": exc.code,
        "message": exc.message,
        "field": exc.field
    })
    return JSONResponse(content=_error_body(exc.message, errors), status_code=exc.status_code)


async def _handle_store_error(request: Request, exc: PyMongoError) -> JSONResponse:
    """Metadata store failures surface as upstream errors"""
    logger.error(f"Metadata store error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    if isinstance(exc, ConnectionFailure):
        error = database_unavailable_error(exc)
    else:
        error = UpstreamError("Metadata store request failed.")
    return await _handle_app_error(request, error)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions from Starlette"""
    return JSONResponse(
        content=_error_body(str(exc.detail), []),
        status_code=exc.status_code,
    )


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors"""
    errors = []
    for error in exc.errors():
        location = ".".join(
            str(x) for x in error.get("loc", [])
            if x not in ("body",)
        )
        errors.append({
            "code": error.get("type", "validation_error"),
            "message": error.get("msg", ""),
            "field": location or None
        })

    return JSONResponse(
        content=_error_body("Validation error", errors),
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
    )


def install_cors_middleware(app: FastAPI) -> None:
    """Install CORS middleware for the application"""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
        expose_headers=settings.CORS_EXPOSE_HEADERS,
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Install all exception handlers for the application"""
    app.exception_handler(AppError)(_handle_app_error)
    app.exception_handler(PyMongoError)(_handle_store_error)
    app.exception_handler(StarletteHTTPException)(_handle_http_exception)
    app.exception_handler(RequestValidationError)(_handle_validation_error)

    logger.info("Exception handlers installed successfully")


def _create_api_prefix(endpoint_name: str) -> str:
    """Create API prefix for router endpoints"""
    return f"/api/v1/{endpoint_name}"


def include_routers(app: FastAPI) -> None:
    """Include all API routers with proper configuration"""
    routers_config = [
        (folder_router, "folders"),
        (file_router, "files"),
    ]

    if settings.APP_ENV == "dev":
        @app.get("/scalar", include_in_schema=False)
        async def scalar_html():
            return get_scalar_api_reference(
                openapi_url=app.openapi_url,
                title=settings.APP_NAME,
            )

    for router, prefix_name in routers_config:
        app.include_router(
            router,
            prefix=_create_api_prefix(prefix_name)
        )
    app.include_router(health_router)

    logger.info(f"Included {len(routers_config)} API routers successfully")


def create_app() -> FastAPI:
    """Create and configure FastAPI application with all components"""
    app = FastAPI(
        title=settings.APP_NAME,
        description="CipherDrive encrypted file and folder API",
        version="1.0.0",
        debug=settings.APP_DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if settings.APP_DEBUG else None,
        redoc_url="/redoc" if settings.APP_DEBUG else None,
    )

    install_cors_middleware(app)
    install_exception_handlers(app)
    include_routers(app)

    logger.info("FastAPI application created and configured successfully")
    return app
