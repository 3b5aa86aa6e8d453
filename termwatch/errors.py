"""
Error types and the JSON error body every endpoint shares.

Body shape: {"error": str, "messages"?: [str], "details"?: str}
- request validation, invalid merged updates, bad document references -> 400
- HTTPException (not found, upload limits) -> its own status
- anything else -> 500, including records read back from storage that no
  longer validate; the traceback stays in the server log
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class UnknownDocumentError(ValueError):
    """A reminder or event points at a document id that does not exist."""

    def __init__(self, document_id):
        self.document_id = str(document_id)
        super().__init__(f"documentId {self.document_id} does not reference an existing document")


class InvalidUpdateError(ValueError):
    """A partial update would leave the stored record invalid."""

    def __init__(self, errors):
        self.messages = _format_errors(errors)
        super().__init__("; ".join(self.messages))


def _format_errors(errors) -> list[str]:
    messages = []
    for err in errors:
        # Drop the "body"/"query"/"path" prefix FastAPI adds to locations
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


def error_body(error: str, messages: list[str] | None = None, details: str | None = None) -> dict:
    body: dict = {"error": error}
    if messages:
        body["messages"] = messages
    if details:
        body["details"] = details
    return body


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation Error", _format_errors(exc.errors())),
    )


async def invalid_update_handler(request: Request, exc: InvalidUpdateError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation Error", exc.messages),
    )


async def unknown_document_handler(request: Request, exc: UnknownDocumentError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation Error", [str(exc)]),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal Server Error", details=str(exc)),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(InvalidUpdateError, invalid_update_handler)
    app.add_exception_handler(UnknownDocumentError, unknown_document_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
