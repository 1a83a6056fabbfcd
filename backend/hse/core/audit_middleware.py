"""
Audit logging middleware for medical data.
Records every request to personnel, medical-record and visit endpoints.
"""
import base64
import binascii
from typing import Dict

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..services.audit import record_access
from .config import settings

MEDICAL_PATH_PREFIXES = (
    "/api/v1/personnel",
    "/api/v1/medical-records",
    "/api/v1/visits",
)

ACTION_MAP = {
    "GET": "view",
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "delete",
}


def basic_auth_username(header: str) -> str:
    """Username from an ``Authorization: Basic`` header, or ``anonymous``."""
    if not header.startswith("Basic "):
        return "anonymous"
    try:
        decoded = base64.b64decode(header[6:]).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return "anonymous"
    username, _, _ = decoded.partition(":")
    return username or "anonymous"


def access_entry(method: str, path: str, auth_header: str, client_host, status_code: int) -> Dict:
    # /api/v1/<resource>/<id>/...
    parts = [p for p in path.split("/") if p]
    return {
        "username": basic_auth_username(auth_header),
        "action": ACTION_MAP[method],
        "resource_type": parts[2] if len(parts) >= 3 else "unknown",
        "resource_id": parts[3] if len(parts) >= 4 else "*",
        "ip_address": client_host,
        "request_method": method,
        "request_path": path,
        "status_code": str(status_code),
    }


class AuditMiddleware(BaseHTTPMiddleware):
    """Middleware that auto-logs access to medical endpoints."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        path = request.url.path
        if not settings.AUDIT_MEDICAL_ACCESS:
            return response
        if not path.startswith(MEDICAL_PATH_PREFIXES) or request.method not in ACTION_MAP:
            return response

        entry = access_entry(
            request.method,
            path,
            request.headers.get("Authorization", ""),
            request.client.host if request.client else None,
            response.status_code,
        )
        # Session work is blocking
        await run_in_threadpool(record_access, entry)
        return response
