import signal
import asyncio
import structlog
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from app.config import settings
from app.core.dependencies import get_config_repository
from app.core.errors import validation_exception_handler
from app.core.logging import configure_logging
from app.services.seed import seed_default_configs
from app.shutdown import reset_shutdown, set_shutdown

# IMPORT ROUTERS
from app.routers.health import router as health_router
from app.routers.configs import router as configs_router
from app.routers.runs import router as runs_router
from app.routers.runs import worker_router as run_worker_router
from app.routers.analytics import router as analytics_router
from app.routers.stats import router as stats_router

logger = structlog.get_logger(__name__)


# SWAGGER UI: tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Scoring Configs"},
    {"name": "Runs"},
    {"name": "Analytics"},
    {"name": "Stats"},
    {"name": "Worker Callbacks"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=f"{settings.APP_NAME} API",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# REGISTER EXCEPTION HANDLERS
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)           # Health
app.include_router(configs_router)          # Scoring Configs
app.include_router(runs_router)             # Runs
app.include_router(analytics_router)        # Analytics
app.include_router(stats_router)            # Stats
app.include_router(run_worker_router)       # Worker Callbacks


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": f"{settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    configure_logging(settings)
    reset_shutdown()
    logger.info(
        "app_starting",
        env=settings.APP_ENV,
        store=settings.STORE_BACKEND,
        worker=settings.EVALUATION_WORKER,
    )

    if settings.SEED_DEFAULT_CONFIGS:
        seed_default_configs(get_config_repository())

    # Register signal handlers for graceful shutdown (Ctrl+C / kill)
    loop = asyncio.get_running_loop()

    def _signal_handler(sig):
        logger.warning("shutdown_signal_received", signal=sig.name)
        set_shutdown(f"signal {sig.name}")

    try:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _signal_handler, sig)
    except (NotImplementedError, RuntimeError):
        # Windows, or the loop is not on the main thread (e.g. test clients);
        # the shutdown event below still sets the flag.
        logger.info("signal_handlers_unavailable")


# SHUTDOWN EVENT
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("app_shutting_down")
    set_shutdown()  # Ensure flag is set even if signal handler didn't fire


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
