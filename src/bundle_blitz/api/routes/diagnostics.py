from fastapi import APIRouter, Depends, Response, status

from bundle_blitz.api.dependencies import get_state
from bundle_blitz.api.state import WorkspaceState
from bundle_blitz.models import Diagnostic

router = APIRouter(prefix="/diagnostics", tags=["diagnostics"])


@router.get("", response_model=list[Diagnostic])
async def list_diagnostics(state: WorkspaceState = Depends(get_state)) -> list[Diagnostic]:
    return state.session.diagnostics.list()


@router.delete("/{diagnostic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def dismiss(diagnostic_id: str, state: WorkspaceState = Depends(get_state)) -> Response:
    """Dismiss one diagnostic. Unknown ids are ignored."""
    async with state.lock:
        draft = state.session.draft()
        draft.diagnostics.dismiss(diagnostic_id)
        state.commit(draft)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
