"""
Global Error Handling
Maps fatal sync errors to structured responses and catches everything else
"""
import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.services.sync.errors import ConnectionNotFound, SyncCouldNotStart, TokenRefreshFailed

logger = logging.getLogger(__name__)

# Fatal sync errors → HTTP status
SYNC_ERROR_STATUS = {
    ConnectionNotFound: 404,
    TokenRefreshFailed: 502,
}


async def sync_could_not_start_handler(request: Request, exc: SyncCouldNotStart) -> JSONResponse:
    """
    Exception handler for fatal sync errors.
    Registered on the app for SyncCouldNotStart (and subclasses).
    """
    status_code = SYNC_ERROR_STATUS.get(type(exc), 500)

    logger.warning(f"Sync could not start ({exc.error_type}) on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": f"Sync could not start: {exc}",
            "error_type": exc.error_type,
            "path": request.url.path
        }
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handler middleware.
    Catches all unhandled exceptions and returns JSON error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            logger.error(
                "Unhandled exception during request",
                exc_info=True,
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "client_host": request.client.host if request.client else None
                }
            )

            return JSONResponse(
                status_code=500,
                content={
                    "detail": "Internal server error",
                    "error_type": type(exc).__name__,
                    "path": request.url.path
                }
            )
