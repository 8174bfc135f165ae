"""HTTP error shape for the storefront API.

Every non-validation failure is rendered as ``{"error": <message>}`` so browser clients
can surface the message verbatim. Request validation keeps FastAPI's 422 everywhere except
payment verification, which answers in its own {verified, error} shape.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.extra = extra


def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    del request
    return JSONResponse(status_code=exc.status_code, content={**exc.extra, "error": exc.message})


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    del request
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# The checkout client treats any verification response as {verified, error}.
VERIFY_PAYMENT_PATH = "/api/razorpay/verify-payment"


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if request.url.path != VERIFY_PAYMENT_PATH:
        return await request_validation_exception_handler(request, exc)

    logger.warning(
        "Rejected malformed payment verification", extra={"errors": len(exc.errors())}
    )
    return JSONResponse(
        status_code=400, content={"verified": False, "error": "Invalid order details"}
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
