"""
Exception → error envelope mapping.

Every failure leaves the API as ``{"status": "error", "code": ..., "message": ...}``
with the HTTP status equal to ``code``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.features.messaging.api.schemas import ResponseEnvelope
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


def status_code_for(exc: Exception) -> int:
    """Use the failure's own code when it is a usable HTTP error status."""
    code = getattr(exc, "code", None)
    if isinstance(code, int) and not isinstance(code, bool) and 400 <= code <= 599:
        return code
    return 500


def error_response(exc: Exception) -> JSONResponse:
    code = status_code_for(exc)
    envelope = ResponseEnvelope.error(code=code, message=str(exc))
    return JSONResponse(status_code=code, content=envelope.model_dump(mode="json"))


def success_response(envelope: ResponseEnvelope) -> JSONResponse:
    return JSONResponse(status_code=200, content=envelope.model_dump(mode="json"))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Malformed request body", path=request.url.path, errors=len(exc.errors()))
    envelope = ResponseEnvelope.error(code=400, message="Malformed request body")
    return JSONResponse(status_code=400, content=envelope.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
