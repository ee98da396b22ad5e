"""Render envelopes and domain errors as HTTP responses."""

from collections.abc import Mapping
from http import HTTPStatus
from typing import NamedTuple

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from task_api.errors import (
    DATABASE_ERROR,
    DUPLICATE_ENTRY,
    INTERNAL_ERROR,
    INVALID_INPUT,
    NOT_FOUND,
    VALIDATION_ERROR,
    DatabaseError,
    DomainError,
    DomainValidationError,
    DuplicateResourceError,
    InternalError,
    InvalidInputError,
    NotFoundError,
)
from task_api.schemas.error import ErrorResponse
from task_api.schemas.response import ApiResponse


class ErrorPolicy(NamedTuple):
    status_code: int
    code: str
    # None means the exception's own message is safe to show
    public_message: str | None = None


ERROR_POLICIES: dict[type[DomainError], ErrorPolicy] = {
    NotFoundError: ErrorPolicy(status.HTTP_404_NOT_FOUND, NOT_FOUND),
    DuplicateResourceError: ErrorPolicy(status.HTTP_409_CONFLICT, DUPLICATE_ENTRY),
    DomainValidationError: ErrorPolicy(status.HTTP_400_BAD_REQUEST, VALIDATION_ERROR),
    InvalidInputError: ErrorPolicy(status.HTTP_400_BAD_REQUEST, INVALID_INPUT),
    DatabaseError: ErrorPolicy(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        DATABASE_ERROR,
        "An error occurred with the database",
    ),
    InternalError: ErrorPolicy(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        INTERNAL_ERROR,
        "An internal server error occurred",
    ),
}


def error_policy(exc: DomainError) -> ErrorPolicy:
    """Look up the policy for an error, walking the MRO for subclasses."""
    for cls in type(exc).__mro__:
        if cls in ERROR_POLICIES:
            return ERROR_POLICIES[cls]
    return ERROR_POLICIES[InternalError]


def build_error_body(exc: DomainError, include_details: bool = True) -> ErrorResponse:
    policy = error_policy(exc)
    if policy.public_message is None:
        return ErrorResponse(error=policy.code, message=exc.message)
    return ErrorResponse(
        error=policy.code,
        message=policy.public_message,
        details=exc.message if include_details else None,
    )


def render_error(exc: DomainError, include_details: bool = True) -> JSONResponse:
    """
    Return the standardized error response for a domain error.

    4xx bodies echo the error message. 5xx bodies use a fixed message and move
    the original text to ``details`` (omitted when include_details is False).
    """
    body = build_error_body(exc, include_details=include_details)
    return JSONResponse(
        status_code=error_policy(exc).status_code,
        content=body.model_dump(exclude_none=True),
    )


def render(
    envelope: ApiResponse, headers: Mapping[str, str] | None = None
) -> Response:
    """
    Return the HTTP response for a success envelope.

    The body is the payload itself, never wrapped. Envelopes without a payload
    produce an empty body. Caller headers are applied last and win over the
    defaults (e.g. content-type).
    """
    status_code = int(envelope.status)
    if envelope.has_payload:
        response: Response = JSONResponse(
            status_code=status_code, content=jsonable_encoder(envelope.data)
        )
    else:
        response = Response(status_code=status_code)

    if headers:
        for name, value in headers.items():
            response.headers[name] = value
    return response


def render_http_error(
    status_code: int, message: str, headers: Mapping[str, str] | None = None
) -> JSONResponse:
    """
    Render a framework-level HTTP error (unknown route, wrong method) in the
    same ``{error, message}`` shape as domain errors.
    """
    try:
        code = HTTPStatus(status_code).name
    except ValueError:
        code = "HTTP_ERROR"
    body = ErrorResponse(error=code, message=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=dict(headers) if headers else None,
    )
