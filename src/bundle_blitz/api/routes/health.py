from fastapi import APIRouter, Depends, Response, status

from bundle_blitz.api.dependencies import get_state
from bundle_blitz.api.schemas import HealthResponse, ReadinessResponse
from bundle_blitz.api.state import WorkspaceState

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.get("/healthz/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse()


@router.get("/healthz/ready", response_model=ReadinessResponse)
async def readiness(
    response: Response,
    state: WorkspaceState = Depends(get_state),
) -> ReadinessResponse:
    """Readiness probe: checks the session store can be read."""
    store = state.tools.store
    if store is None:
        return ReadinessResponse(status="ok", store="disabled")
    try:
        await store.get("__ping__")
    except OSError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status="degraded", store="down")
    return ReadinessResponse(status="ok", store="up")
