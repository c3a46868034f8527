from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded

from kosmos_notifications.core.limits import limiter, rate_limit_handler
from kosmos_notifications.core.error_handlers import setup_exception_handlers
from kosmos_notifications.core.database import db_manager
from kosmos_notifications.core.middleware import setup_middleware
from kosmos_notifications.core.logging_utils import (
    setup_logging,
    get_logger,
    error_tracker,
)
from kosmos_notifications.core.config import (
    validate_config,
    API_PREFIX,
    APP_NAME,
    APP_VERSION,
    CORS_ORIGINS,
    CREATE_TABLES_ON_STARTUP,
    DEBUG,
    LOG_LEVEL,
    LOG_FORMAT,
)
from kosmos_notifications.notifications import routers as notifications

setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    try:
        validate_config()
        logger.info("Configuration validated")

        await db_manager.check_connection()
        logger.info("Content store connection established")

        if CREATE_TABLES_ON_STARTUP:
            await db_manager.create_tables()

        logger.info("Application startup completed")

    except Exception as e:
        logger.error(f"Application startup failed: {str(e)}")
        error_tracker.track_error(
            "STARTUP_ERROR",
            str(e),
            {"component": "application_startup", "version": APP_VERSION},
        )
        raise

    yield

    logger.info("Shutting down application...")
    await db_manager.close_connections()
    logger.info("Application shutdown completed")


app = FastAPI(
    title=APP_NAME,
    description="Active notifications feed",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
    expose_headers=["ETag", "Last-Modified"],
)

setup_exception_handlers(app)

setup_middleware(
    app,
    {
        "slow_request_threshold": 2.0,
        "exclude_paths": [
            "/health",
            "/docs",
            "/openapi.json",
            "/redoc",
            "/favicon.ico",
        ],
    },
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

app.include_router(notifications.router, prefix=API_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "ok",
        "service": APP_NAME,
        "version": APP_VERSION,
        "errors": error_tracker.get_stats()["total_errors"],
    }
