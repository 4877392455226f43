"""
Health Check Routes - liveness and readiness probes.

/health only says the process is up. /health/ready also checks that the
sync ledger database answers; the remote memory and LLM APIs are not
probed (every probe would cost a paid request).
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from soar import __version__
from soar.core.logging_config import get_logger
from soar.database.connection import get_database
from soar.models.chat import HealthResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get(
    "",
    response_model=HealthResponse,
    summary="Liveness check",
)
async def health_check() -> HealthResponse:
    """Return 200 while the API process is running."""
    logger.debug("Health check requested")
    return HealthResponse(status="healthy", version=__version__)


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check",
    responses={503: {"model": HealthResponse, "description": "Ledger database unreachable"}},
)
def readiness_check():
    """Return 200 if the sync ledger database is reachable, 503 otherwise."""
    logger.debug("Readiness check requested")

    if get_database().check_connection():
        return HealthResponse(status="ready", version=__version__, ledger="ok")

    body = HealthResponse(status="not_ready", version=__version__, ledger="unreachable")
    return JSONResponse(status_code=503, content=body.model_dump(mode="json"))
