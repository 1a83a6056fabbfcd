"""
Domain errors and their HTTP rendering.

Services raise ``HSEError`` subclasses; the handlers registered here turn them
into the notification payload the dashboard shows as a toast.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class NotificationKind:
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class HSEError(Exception):
    status_code = 400
    kind = NotificationKind.ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(HSEError):
    status_code = 400


class NotFound(HSEError):
    status_code = 404


class InUse(HSEError):
    """Deletion refused because other records still reference the target."""
    status_code = 409


class AccessDenied(HSEError):
    status_code = 403


def _payload(kind: str, message, **extra) -> dict:
    return {"error": True, "kind": kind, "message": message, **extra}


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HSEError)
    async def hse_error_handler(request: Request, exc: HSEError):
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=_payload(exc.kind, exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("HTTP %s - %s", exc.status_code, exc.detail)
        else:
            logger.warning("HTTP %s - %s", exc.status_code, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=_payload(NotificationKind.ERROR, exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=422,
            content=_payload(
                NotificationKind.ERROR,
                "Please fill in all fields correctly.",
                details=jsonable_errors(exc),
            ),
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold the raw exception object, which is not JSON serializable
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
