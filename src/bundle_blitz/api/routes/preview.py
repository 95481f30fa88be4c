from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import HTMLResponse

from bundle_blitz.api.dependencies import get_state
from bundle_blitz.api.schemas import PreviewHandleResponse
from bundle_blitz.api.state import WorkspaceState

router = APIRouter(prefix="/preview", tags=["preview"])


@router.post("", response_model=PreviewHandleResponse, status_code=status.HTTP_201_CREATED)
async def open_preview(state: WorkspaceState = Depends(get_state)) -> PreviewHandleResponse:
    """Synthesize a fresh preview; any previously open preview is released."""
    document = state.previews.acquire(state.session.files)
    return PreviewHandleResponse(handle=document.handle, url=f"/preview/{document.handle}")


@router.get("/{handle}", response_class=HTMLResponse)
async def get_preview(handle: str, state: WorkspaceState = Depends(get_state)) -> HTMLResponse:
    document = state.previews.get(handle)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preview has been released.")
    return HTMLResponse(document.html)


@router.delete("/{handle}", status_code=status.HTTP_204_NO_CONTENT)
async def close_preview(handle: str, state: WorkspaceState = Depends(get_state)) -> Response:
    state.previews.release(handle)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
