"""
Exception Handlers

Translate the application error hierarchy into JSON error responses.
"""

from typing import List, Tuple, Type

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from inventory_soft.errors import (
    AuthenticationError,
    InventoryError,
    InventoryValidationError,
    RecordNotFoundError,
    RecordStoreError,
)

logger = structlog.get_logger(__name__)

# Most specific first
STATUS_CODES: List[Tuple[Type[InventoryError], int]] = [
    (AuthenticationError, 401),
    (RecordNotFoundError, 404),
    (InventoryValidationError, 400),
    (RecordStoreError, 502),
]


def status_for(exc: InventoryError) -> int:
    for error_type, status_code in STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message, error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": exc.message},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"error": "InventoryValidationError", "detail": problems},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
