from fastapi import APIRouter, Depends, HTTPException, status

from bundle_blitz.api.dependencies import get_state
from bundle_blitz.api.schemas import BundleResponse, WorkspaceResponse
from bundle_blitz.api.routes.workspace import _summary
from bundle_blitz.api.state import WorkspaceState
from bundle_blitz.core.build import run_build
from bundle_blitz.core.exceptions import BuildInProgressError

router = APIRouter(tags=["build"])


@router.post("/build", response_model=WorkspaceResponse)
async def build(state: WorkspaceState = Depends(get_state)) -> WorkspaceResponse:
    tools = state.tools
    try:
        async with state.guard.hold(), state.lock:
            session = await run_build(
                state.session,
                transform=tools.transform,
                formatter=tools.formatter,
                analyzer=tools.analyzer,
                store=tools.store,
            )
            state.commit(session)
    except BuildInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from None
    return _summary(state)


@router.get("/bundle", response_model=BundleResponse)
async def get_bundle(state: WorkspaceState = Depends(get_state)) -> BundleResponse:
    if state.session.bundle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No bundle has been built yet.")
    return BundleResponse(bundle=state.session.bundle, diagnostics=state.session.diagnostics.list())
