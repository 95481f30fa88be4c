from fastapi import APIRouter, Depends, Query

from bundle_blitz.api.dependencies import ensure_idle, get_state
from bundle_blitz.api.schemas import InsightsResponse, PlacementsResponse, RefactorRequest
from bundle_blitz.api.state import WorkspaceState
from bundle_blitz.core.insights import accept_refactor, run_ai_lint, run_audit, run_discovery, run_refactor
from bundle_blitz.core.placement import place

router = APIRouter(prefix="/insights", tags=["insights"])


def _response(state: WorkspaceState) -> InsightsResponse:
    return InsightsResponse(insights=state.session.insights, diagnostics=state.session.diagnostics.list())


@router.get("", response_model=InsightsResponse)
async def get_insights(state: WorkspaceState = Depends(get_state)) -> InsightsResponse:
    return _response(state)


@router.post("/audit", response_model=InsightsResponse)
async def audit(state: WorkspaceState = Depends(get_state)) -> InsightsResponse:
    async with state.lock:
        state.commit(await run_audit(state.session, state.tools.ai))
    return _response(state)


@router.post("/lint", response_model=InsightsResponse)
async def lint(state: WorkspaceState = Depends(get_state)) -> InsightsResponse:
    async with state.lock:
        state.commit(await run_ai_lint(state.session, state.tools.ai))
    return _response(state)


@router.post("/components", response_model=InsightsResponse)
async def components(state: WorkspaceState = Depends(get_state)) -> InsightsResponse:
    async with state.lock:
        state.commit(await run_discovery(state.session, state.tools.ai))
    return _response(state)


@router.post("/refactor", response_model=InsightsResponse)
async def refactor(body: RefactorRequest, state: WorkspaceState = Depends(get_state)) -> InsightsResponse:
    async with state.lock:
        state.commit(await run_refactor(state.session, state.tools.ai, body.instruction))
    return _response(state)


@router.post("/refactor/accept", response_model=InsightsResponse)
async def accept(state: WorkspaceState = Depends(get_state)) -> InsightsResponse:
    ensure_idle(state)
    async with state.lock:
        state.commit(accept_refactor(state.session))
    return _response(state)


@router.get("/placements", response_model=PlacementsResponse)
async def placements(
    line_height: int | None = Query(default=None, gt=0),
    state: WorkspaceState = Depends(get_state),
) -> PlacementsResponse:
    height = line_height or state.settings.line_height_px
    return PlacementsResponse(line_height_px=height, placements=place(state.session.insights.lint_issues, height))
