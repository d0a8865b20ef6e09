"""
Exception handlers for the FastAPI application.

Domain errors raised by the service layer carry their own HTTP status and
are returned as ``{"detail": ...}``. Anything else is logged with an error id
and returned as a generic 500.
"""

import uuid
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from marine_ops.exceptions import MarineOpsError

logger = logging.getLogger(__name__)


async def domain_exception_handler(request: Request, exc: MarineOpsError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception with request context.

    The error id in the response lets a client quote the failure when
    reporting it.
    """
    error_id = uuid.uuid4().hex[:12]

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
        }
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the exception handlers on ``app``."""
    app.add_exception_handler(MarineOpsError, domain_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
