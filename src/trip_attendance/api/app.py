"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trip_attendance.api.members import router as members_router
from trip_attendance.api.sessions import router as sessions_router
from trip_attendance.app_logging import configure_logging
from trip_attendance.containers import AppContainer
from trip_attendance.domain.errors import (
    ConflictError,
    NotFoundError,
    TripAttendanceError,
    ValidationError,
)

_ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    # No auth boundary exists, so every origin may call the API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(sessions_router, prefix=container.settings.api_prefix)
    app.include_router(members_router, prefix=container.settings.api_prefix)

    @app.exception_handler(TripAttendanceError)
    async def trip_error_handler(
        request: Request, exc: TripAttendanceError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Unexpected failure on %s %s",
                request.method,
                request.url.path,
                exc_info=exc,
            )
            return JSONResponse(
                status_code=status_code, content={"error": "Internal server error"}
            )
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request body",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "OK", "timestamp": datetime.now(tz=UTC).isoformat()}

    return app


def _status_for(exc: TripAttendanceError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
