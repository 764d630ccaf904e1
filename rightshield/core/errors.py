import logging
from typing import Any, Dict

from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class RightShieldError(Exception):
    """Base class for errors reported to API callers."""
    status_code = 500


class InvalidInputError(RightShieldError):
    status_code = 400


class LLMError(RightShieldError):
    status_code = 502


class LLMNotConfiguredError(LLMError):
    status_code = 503


class StoreError(RightShieldError):
    status_code = 502


def describe_validation_error(exc: ValidationError) -> str:
    """
    Flattens a pydantic ValidationError into one readable line,
    e.g. "originalScores.privacy_data_score: Input should be less than or equal to 100".
    """
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts) or "Invalid input"


def error_response(exc: Exception) -> JSONResponse:
    """
    Maps an exception onto the {"success": false, "error": ...} envelope.
    Unknown exceptions are logged with traceback and reported as 500.
    """
    if isinstance(exc, RightShieldError):
        status = exc.status_code
        message = str(exc)
    else:
        logger.exception("Unhandled error: %s", exc)
        status = 500
        message = "Internal server error"

    body: Dict[str, Any] = {"success": False, "error": message}
    return JSONResponse(body, status_code=status)
