from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bundle_blitz.api.dependencies import init_state, shutdown_state

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    state = await init_state()
    logger.info("Workspace ready with %d file(s)", len(state.session.files))
    yield
    shutdown_state()
