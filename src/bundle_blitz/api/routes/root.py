from __future__ import annotations

from typing import Any

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """Root discovery endpoint listing the main resources."""
    return {
        "meta": {
            "title": "BundleBlitz API",
            "description": "Bundle and preview ad-hoc workspaces of text files.",
            "version": "0.1.0",
        },
        "links": {
            "self": "/",
            "workspace": "/workspace",
            "build": "/build",
            "bundle": "/bundle",
            "diagnostics": "/diagnostics",
            "preview": "/preview",
            "insights": "/insights",
            "stats": "/stats",
            "openapi": "/openapi.json",
            "docs": "/docs",
        },
    }
