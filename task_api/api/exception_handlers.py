"""Global exception handlers that map domain exceptions to HTTP responses."""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_api.api.rendering import error_policy, render_error, render_http_error
from task_api.errors import DomainError, InternalError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def invalid_input_from_request_validation(exc: RequestValidationError) -> InvalidInputError:
    """Classify a request decoding failure (body or path) as InvalidInputError."""
    errors = exc.errors()
    if not errors:
        return InvalidInputError("Invalid request")
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ())]
    msg = first.get("msg", "invalid value")

    if first.get("type") == "json_invalid":
        return InvalidInputError(f"Invalid JSON: {msg}")
    if loc and loc[0] == "path":
        return InvalidInputError(f"Invalid {loc[-1]}: {msg}")
    if loc and loc[0] == "body":
        loc = loc[1:]
    if not loc:
        return InvalidInputError(f"Invalid JSON: {msg}")
    return InvalidInputError(f"{'.'.join(loc)}: {msg}")


def domain_error_from_http_exception(exc: StarletteHTTPException) -> DomainError | None:
    """
    Classify framework HTTP errors that have a domain counterpart.

    400 comes from body parsing (e.g. a body that is not UTF-8), 404 from an
    unknown route. Anything else has no domain kind and returns None.
    """
    if exc.status_code == 400:
        return InvalidInputError(str(exc.detail))
    if exc.status_code == 404:
        return NotFoundError(str(exc.detail))
    return None


def internal_from_unhandled(exc: Exception) -> InternalError:
    """Classify an exception nothing else recognised as InternalError."""
    return InternalError(str(exc) or type(exc).__name__)


def _respond(request: Request, exc: DomainError, log: bool = True) -> JSONResponse:
    include_details = request.app.state.settings.expose_error_details
    response = render_error(exc, include_details=include_details)
    if not log:
        return response
    if response.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message
        )
    else:
        logger.info(
            "%s %s -> %d %s",
            request.method,
            request.url.path,
            response.status_code,
            error_policy(exc).code,
        )
    return response


def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return _respond(request, exc)


def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _respond(request, invalid_input_from_request_validation(exc))


def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    error = domain_error_from_http_exception(exc)
    if error is None:
        logger.info("%s %s -> %d", request.method, request.url.path, exc.status_code)
        return render_http_error(exc.status_code, str(exc.detail), headers=exc.headers)

    response = _respond(request, error)
    # Keep framework headers such as Allow
    for name, value in (exc.headers or {}).items():
        response.headers[name] = value
    return response


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return _respond(request, internal_from_unhandled(exc), log=False)


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
