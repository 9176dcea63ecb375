"""
Exception Handlers
Turns every failure into a uniform JSON payload:

    {"statusCode", "message", "errors"?, "error"?, "timestamp", "path"}

- Request validation failures   -> 400 with field-level messages
- Bond calculation errors       -> status from the error kind (422 by default)
- Other HTTP exceptions         -> their own status
- Anything else                 -> 500 without internal details
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fixed_income.exceptions import BondCalculationException, ErrorKind
from fixed_income.validation import format_validation_errors

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.BUSINESS_RULE: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}

VALIDATION_FAILED = "Validation failed"
INTERNAL_SERVER_ERROR = "Internal server error"


def status_for_kind(kind: ErrorKind) -> int:
    """HTTP status code for an error kind"""
    return ERROR_STATUS_CODES.get(kind, 500)


def error_payload(
    request: Request,
    status_code: int,
    message: Any,
    errors: Optional[List[Dict[str, Any]]] = None,
    error: Optional[str] = None
) -> Dict[str, Any]:
    """Build the error body returned for every failed request"""
    payload: Dict[str, Any] = {
        "statusCode": status_code,
        "message": message,
    }
    if error:
        payload["error"] = error
    if errors is not None:
        payload["errors"] = errors
    payload["timestamp"] = datetime.now(timezone.utc).isoformat()
    payload["path"] = request.url.path
    return payload


def _log_exception(request: Request, exc: Exception, body: Any = None):
    logger.error(f"[EXCEPTION] URL: {request.url}")
    logger.error(f"[EXCEPTION] Method: {request.method}")
    if body is not None:
        logger.error(f"[EXCEPTION] Body: {body}")
    logger.error(f"[EXCEPTION] Exception: {type(exc).__name__}: {exc}")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    _log_exception(request, exc, body=getattr(exc, "body", None))
    errors = format_validation_errors(exc.errors())
    logger.error(f"[EXCEPTION] Returning status 400, errors: {errors}")
    return JSONResponse(
        status_code=400,
        content=error_payload(request, 400, VALIDATION_FAILED, errors=errors)
    )


async def bond_calculation_exception_handler(request: Request, exc: BondCalculationException):
    _log_exception(request, exc)
    status_code = status_for_kind(exc.kind)
    logger.error(f"[EXCEPTION] Returning status {status_code}, message: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=error_payload(request, status_code, exc.message, errors=exc.errors, error=exc.error)
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    _log_exception(request, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(request, exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None)
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    _log_exception(request, exc)
    logger.error("[EXCEPTION] Stack trace", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_payload(request, 500, INTERNAL_SERVER_ERROR)
    )


def register_exception_handlers(app: FastAPI):
    """Install all handlers on the application"""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BondCalculationException, bond_calculation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
