"""Exception handlers mapping failures to structured JSON responses"""

import logging
from typing import Sequence, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from loan_gateway.api.dependencies import get_request_id
from loan_gateway.api.v1.schemas import FIELD_ALIASES, FieldErrorSchema, ValidationErrorResponse
from loan_gateway.domain.exceptions import ValidationError


def public_field(field: str) -> str:
    """Translate a domain field path to its wire spelling (credit_score -> creditScore)"""
    head, _, last = field.rpartition(".")
    alias = FIELD_ALIASES.get(last, last)
    return f"{head}.{alias}" if head else alias


def location_to_field(loc: Sequence[Union[str, int]]) -> str:
    """('body', 'applications', 2, 'creditScore') -> 'applications[2].creditScore'"""
    parts = list(loc[1:]) if loc and loc[0] == "body" else list(loc)
    if not parts:
        return "body"

    field = ""
    for part in parts:
        if isinstance(part, int):
            field += f"[{part}]"
        else:
            field += f".{part}" if field else str(part)
    return field


def _error_response(errors) -> JSONResponse:
    body = ValidationErrorResponse(errors=errors)
    return JSONResponse(status_code=422, content=body.model_dump())


async def domain_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(
        [dict(error, field=public_field(error["field"])) for error in exc.as_dicts()]
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        [FieldErrorSchema(field=location_to_field(e["loc"]), message=e["msg"]) for e in exc.errors()]
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.error(f"Unexpected error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, domain_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
