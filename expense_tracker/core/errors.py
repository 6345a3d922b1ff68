from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import math

logger = logging.getLogger("expense_tracker.errors")


# Domain errors -----------------------------------------------------
class LedgerError(Exception):
    """Base class for expense/wallet domain failures."""


class UnknownCurrencyError(LedgerError, ValueError):
    def __init__(self, code: str):
        super().__init__(f"unknown currency '{code}'")
        self.code = code


class ExpenseNotFoundError(LedgerError, LookupError):
    def __init__(self, expense_id: str):
        super().__init__(f"expense '{expense_id}' not found")
        self.expense_id = expense_id


class WalletNotFoundError(LedgerError, LookupError):
    def __init__(self, key: str):
        super().__init__(f"wallet '{key}' not found")
        self.key = key


class DuplicateWalletError(LedgerError):
    def __init__(self, name: str):
        super().__init__(f"a wallet named '{name}' already exists")
        self.name = name


class WalletInUseError(LedgerError):
    def __init__(self, name: str, references: int):
        super().__init__(
            f"wallet '{name}' cannot be deleted because it has {references} associated transaction(s)"
        )
        self.name = name
        self.references = references


# HTTP handlers -----------------------------------------------------
def http_error_handler(request: Request, exc: StarletteHTTPException):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "not_found",
                "detail": f"No route for {request.method} {request.url.path}",
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": _error_code(exc.status_code), "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": _json_safe(jsonable_encoder(exc.errors())),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )


def _error_code(status_code: int) -> str:
    return {
        400: "bad_request",
        404: "not_found",
        409: "conflict",
        500: "internal_error",
    }.get(status_code, "http_error")


def _json_safe(value):
    """Replace NaN/Infinity (e.g. a rejected `Infinity` input) with text."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value
