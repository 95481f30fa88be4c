from __future__ import annotations

from fastapi import FastAPI

from bundle_blitz.api.lifespan import lifespan
from bundle_blitz.api.routes.build import router as build_router
from bundle_blitz.api.routes.diagnostics import router as diagnostics_router
from bundle_blitz.api.routes.health import router as health_router
from bundle_blitz.api.routes.insights import router as insights_router
from bundle_blitz.api.routes.preview import router as preview_router
from bundle_blitz.api.routes.root import router as root_router
from bundle_blitz.api.routes.workspace import router as workspace_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="BundleBlitz API",
        description="Bundle, preview and inspect ad-hoc workspaces of text files.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(root_router, include_in_schema=False)
    app.include_router(health_router, include_in_schema=False)
    app.include_router(workspace_router)
    app.include_router(build_router)
    app.include_router(diagnostics_router)
    app.include_router(preview_router)
    app.include_router(insights_router)

    return app
