"""FastAPI application wiring for Skirmish."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skirmish import __version__
from skirmish.api import routes
from skirmish.api.runtime import ApiState, build_state
from skirmish.config import get_settings
from skirmish.domain.errors import RunStateError, SkirmishError

logger = logging.getLogger(__name__)


async def _skirmish_error(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for engine errors a route did not translate itself."""

    if isinstance(exc, LookupError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, RunStateError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=code, content={"detail": str(exc)})


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Build the simulator API with its session registry bound to the app lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        logger.info(
            "simulator API ready (default ticks %s, limit %s)",
            state.settings.default_max_ticks,
            state.settings.max_ticks_limit,
        )
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="Skirmish API", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SkirmishError, _skirmish_error)
    app.include_router(routes.router)
    return app


app = create_app()
