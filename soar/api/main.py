"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Application initialization
2. Router registration
3. Middleware configuration (audit & security headers)
4. Exception handlers
5. Startup/shutdown (ledger tables, background writes)

Run with: uvicorn soar.api.main:app --reload
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from soar import __version__
from soar.core.config import get_settings
from soar.core.logging_config import setup_logging, get_logger
from soar.core.exceptions import SoarException, RateLimitExceeded
from soar.core.audit import AuditMiddleware, SecurityHeadersMiddleware
from soar.api.routes import chat_router, health_router, sync_router


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level, settings.log_dir)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: create the sync ledger table if missing
    - Shutdown: let pending statement writes finish, close the ledger pool
    """
    from soar.database import get_database, init_ledger_tables
    from soar.services.background import shutdown_background_runner

    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(
        f"LLM models: classifier={settings.llm_model_classifier}, "
        f"chat={settings.llm_model_chat}, search={settings.llm_model_search}"
    )
    logger.info(f"Rate Limit: {settings.rate_limit_per_minute} req/min")
    logger.info(f"Audit Logging: {settings.enable_audit_logging}")

    init_ledger_tables()

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")
    shutdown_background_runner(wait=True)
    get_database().close()


app = FastAPI(
    title="Soar Travel Assistant API",
    description="""
    Chat and memory-sync backend of the Soar travel assistant.

    ## Features

    - **Chat**: questions are answered from the user's travel memories,
      statements are remembered, general travel questions go to web search
    - **Memory sync**: trips and flight bookings are mirrored into the
      memory store once per entity
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware Configuration (Order matters!)
# ============================================================

app.add_middleware(SecurityHeadersMiddleware)

if settings.enable_audit_logging:
    app.add_middleware(AuditMiddleware)
    logger.info("Audit logging middleware enabled")

if settings.is_development():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.warning("CORS configured for development (all origins allowed)")


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers={"Retry-After": str(exc.retry_after)}
    )


@app.exception_handler(SoarException)
async def soar_exception_handler(request: Request, exc: SoarException):
    """Handle all application exceptions (validation, ledger, remote services)."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Error details are only included in development mode.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": str(exc) if settings.is_development() else None,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(chat_router)
app.include_router(sync_router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": "Soar Travel Assistant API",
        "version": __version__,
        "documentation": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "soar.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development()
    )
