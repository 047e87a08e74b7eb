"""Centralized exception handlers for a FastAPI host app.

Register with register_exception_handlers(app). Maps engine exceptions to
HTTP responses: guests get 401, forbidden principals 403, store outages 503.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from warden.domain.exceptions import WardenException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "PERMISSION_NOT_FOUND": 404,
    "ROLE_NOT_FOUND": 404,
    "ROLE_ALREADY_EXISTS": 409,
    "PERMISSION_ALREADY_EXISTS": 409,
    "INVALID_PERMISSION_FORMAT": 400,
    "STORE_UNAVAILABLE": 503,
    "SERVICE_UNAVAILABLE": 503,
}


def _warden_exception_handler(request: Request, exc: WardenException) -> JSONResponse:
    """Return JSON from WardenException.to_dict() with the mapped status code.

    Denied permission names stay in the server log; the response carries
    only the generic message.
    """
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    content = exc.to_dict()
    if exc.error_code == "PERMISSION_DENIED":
        logger.info(
            "Forbidden %s %s: checked %s",
            request.method,
            request.url.path,
            exc.details.get("permissions", []),
        )
        content["details"] = {}
    elif status >= 500:
        logger.error("Authorization unavailable: %s", exc.message)
    return JSONResponse(status_code=status, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Register engine exception handlers on the FastAPI app.

    Call once after creating the app. Handles WardenException and subclasses.
    """
    app.add_exception_handler(WardenException, _warden_exception_handler)
