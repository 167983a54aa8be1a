"""Every failure leaves the API as an error envelope.

Services raise :mod:`blogapi.services._shared.errors`; views may raise an
:class:`APIError` directly. Both, plus marshmallow, werkzeug and SQLAlchemy
errors, are rendered here with a stable ``code`` and the ``request_id``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

from flask import Flask, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from blogapi.api.envelope import Envelope, failure
from blogapi.core.logger import ensure_request_id
from blogapi.services._shared.errors import (
    AuthError,
    AuthorizationError,
    ConflictError,
    IssuanceError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

log = logging.getLogger(__name__)


class APIError(Exception):
    """
    Error that maps one-to-one onto an HTTP response.

    Subclasses fix ``status_code``, ``code`` and ``default_message``.

    :param message: Client-safe summary; ``default_message`` when omitted.
    :param status_code: Overrides the class status.
    :param code: Overrides the class snake_case identifier.
    :param details: Returned as the envelope ``data``.
    """

    status_code: int = HTTPStatus.BAD_REQUEST
    code: str = "bad_request"
    default_message: str = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status_code = int(status_code or self.status_code)
        self.code = code or self.code
        self.details = details or {}

    def to_envelope(self) -> Envelope:
        return _envelope(self.status_code, self.code, self.message, self.details or None)


class NotFound(APIError):
    status_code = HTTPStatus.NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


class Conflict(APIError):
    status_code = HTTPStatus.CONFLICT
    code = "conflict"
    default_message = "Conflict"


class Unauthorized(APIError):
    status_code = HTTPStatus.UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized"


class Forbidden(APIError):
    status_code = HTTPStatus.FORBIDDEN
    code = "forbidden"
    default_message = "Forbidden"


class UnprocessableEntity(APIError):
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    code = "validation_error"
    default_message = "Validation failed"

    def __init__(self, message: str | None = None, errors: Any = None) -> None:
        super().__init__(message, details={"errors": errors} if errors else None)


class TokenIssuanceFailed(APIError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    code = "token_issuance_failed"
    default_message = "Could not create token"


_SERVICE_ERRORS: tuple[tuple[type[ServiceError], Callable[[Any], APIError]], ...] = (
    (ValidationError, lambda exc: UnprocessableEntity(errors=exc.messages)),
    (ConflictError, lambda exc: Conflict(exc.detail)),
    (NotFoundError, lambda exc: NotFound(f"{exc.entity} not found")),
    (AuthError, lambda exc: Unauthorized(exc.message)),
    (AuthorizationError, lambda exc: Forbidden(exc.message)),
    (IssuanceError, lambda exc: TokenIssuanceFailed(exc.message)),
)

# Raw driver messages stay server-side.
_DATABASE_ERRORS: dict[type[Exception], APIError] = {
    IntegrityError: Conflict("Resource conflict"),
    OperationalError: APIError(
        "Service temporarily unavailable",
        status_code=HTTPStatus.SERVICE_UNAVAILABLE,
        code="service_unavailable",
    ),
}


def translate_service_error(exc: ServiceError) -> APIError:
    """
    Map a service-layer error onto its HTTP counterpart.

    :param exc: Error raised inside a service.
    :rtype: APIError
    """
    for exc_type, build in _SERVICE_ERRORS:
        if isinstance(exc, exc_type):
            return build(exc)
    return APIError(str(exc) or None)


def _status_code_name(status: int) -> str:
    """``405`` -> ``"method_not_allowed"``; unknown statuses -> ``"error"``."""
    try:
        return HTTPStatus(status).phrase.lower().replace(" ", "_").replace("-", "_")
    except ValueError:
        return "error"


def _envelope(status: int, code: str, message: str, data: Any = None) -> Envelope:
    return failure(message, status, code=code, data=data, request_id=ensure_request_id())


def _render(envelope: Envelope, *, exc_info: bool = False):
    """Log ``envelope`` (4xx warning, 5xx error) and turn it into a response."""
    level = logging.ERROR if envelope.status >= 500 else logging.WARNING
    log.log(
        level,
        "request.failed",
        extra={"status": envelope.status, "code": envelope.code},
        exc_info=exc_info,
    )
    response = jsonify(envelope.to_dict())
    if envelope.status == HTTPStatus.UNAUTHORIZED:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response, envelope.status


def init_app(app: Flask) -> None:
    """Register the JSON error handlers on ``app``."""

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return _render(err.to_envelope())

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        api_error = translate_service_error(err)
        return _render(api_error.to_envelope(), exc_info=api_error.status_code >= 500)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        return _render(UnprocessableEntity(errors=err.messages).to_envelope())

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _status_code_name(status)
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        return _render(_envelope(status, code, message))

    def _database_handler(api_error: APIError):
        def handler(_err: Exception):
            return _render(api_error.to_envelope(), exc_info=True)

        return handler

    for exc_type, api_error in _DATABASE_ERRORS.items():
        app.register_error_handler(exc_type, _database_handler(api_error))

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        return _render(
            _envelope(HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"),
            exc_info=True,
        )
