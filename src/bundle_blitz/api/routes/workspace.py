from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from bundle_blitz.api.dependencies import ensure_idle, get_state
from bundle_blitz.api.schemas import FileSummary, OptionsUpdate, WorkspaceResponse
from bundle_blitz.api.state import WorkspaceState
from bundle_blitz.core.bundle import compute_stats
from bundle_blitz.core.classifier import classify
from bundle_blitz.core.exceptions import UnknownFileError
from bundle_blitz.core.ingest import ingest_files
from bundle_blitz.core.session import clear_workspace, forget_session, remove_file, update_options
from bundle_blitz.models import BundleStats, RawFile

router = APIRouter(tags=["workspace"])


def _summary(state: WorkspaceState) -> WorkspaceResponse:
    session = state.session
    return WorkspaceResponse(
        files=[
            FileSummary(id=f.id, name=f.name, size_bytes=f.size_bytes, mime_hint=f.mime_hint, kind=classify(f.name))
            for f in session.files
        ],
        options=session.options,
        has_bundle=session.bundle is not None,
        building=state.guard.busy,
        diagnostics=session.diagnostics.list(),
    )


@router.get("/workspace", response_model=WorkspaceResponse)
async def get_workspace(state: WorkspaceState = Depends(get_state)) -> WorkspaceResponse:
    return _summary(state)


@router.post("/workspace/files", response_model=WorkspaceResponse, status_code=status.HTTP_201_CREATED)
async def upload_files(
    files: list[UploadFile] = File(...),
    state: WorkspaceState = Depends(get_state),
) -> WorkspaceResponse:
    ensure_idle(state)
    raw_files: list[RawFile] = []
    for upload in files:
        data = await upload.read()
        raw_files.append(
            RawFile(
                name=upload.filename or "untitled",
                size_bytes=len(data),
                data=data,
                mime_hint=upload.content_type or "",
            )
        )
    async with state.lock:
        state.commit(ingest_files(state.session, raw_files), files_changed=True)
    return _summary(state)


@router.delete("/workspace/files/{file_id}", response_model=WorkspaceResponse)
async def delete_file(file_id: str, state: WorkspaceState = Depends(get_state)) -> WorkspaceResponse:
    ensure_idle(state)
    async with state.lock:
        try:
            session = remove_file(state.session, file_id)
        except UnknownFileError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
        state.commit(session, files_changed=True)
    return _summary(state)


@router.delete("/workspace", response_model=WorkspaceResponse)
async def clear(state: WorkspaceState = Depends(get_state)) -> WorkspaceResponse:
    ensure_idle(state)
    async with state.lock:
        if state.tools.store is not None:
            await forget_session(state.tools.store)
        state.commit(clear_workspace(state.session), files_changed=True)
    return _summary(state)


@router.put("/workspace/settings", response_model=WorkspaceResponse)
async def update_settings(body: OptionsUpdate, state: WorkspaceState = Depends(get_state)) -> WorkspaceResponse:
    ensure_idle(state)
    changes = body.model_dump(exclude_none=True)
    async with state.lock:
        state.commit(update_options(state.session, **changes))
    return _summary(state)


@router.get("/stats", response_model=BundleStats)
async def stats(state: WorkspaceState = Depends(get_state)) -> BundleStats:
    return compute_stats(state.session.files)
