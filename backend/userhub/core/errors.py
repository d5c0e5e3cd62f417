"""Centralized JSON (RFC 7807) error handling for the API.

Every failure leaves the app as ``application/problem+json`` with a stable
``code``, a client-safe ``detail`` and the request's ``request_id``. Stack
traces only go to the log.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, has_request_context, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from userhub.core.logger import ensure_request_id
from userhub.services._shared.errors import (
    AlreadyExistsError,
    InvalidIDError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
    StoreError,
)

log = logging.getLogger(__name__)

#: Codes for statuses raised by Werkzeug (routing, method, payload size...).
HTTP_STATUS_CODES: dict[int, str] = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    500: "internal_server_error",
    503: "service_unavailable",
}

#: One entry per service error kind: (status, code, default client message).
SERVICE_ERROR_MAP: dict[type[ServiceError], tuple[HTTPStatus, str, str]] = {
    InvalidInputError: (HTTPStatus.BAD_REQUEST, "validation_error", "Invalid request data"),
    InvalidIDError: (HTTPStatus.BAD_REQUEST, "invalid_id", "Invalid user ID format"),
    NotFoundError: (HTTPStatus.NOT_FOUND, "user_not_found", "User not found"),
    AlreadyExistsError: (
        HTTPStatus.CONFLICT,
        "user_exists",
        "User with this email already exists",
    ),
    StoreError: (HTTPStatus.INTERNAL_SERVER_ERROR, "internal_error", "Storage operation failed"),
}


def problem_body(
    *,
    status: int,
    code: str,
    detail: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details payload.

    :param status: HTTP status code.
    :param code: Stable machine-readable error code.
    :param detail: Human-readable summary, safe for clients.
    :param details: Optional structured extras (validation messages, store error text).
    :returns: Problem dictionary including ``request_id``.
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": detail,
        "instance": request.path if has_request_context() else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    return body


def _respond(
    status: int,
    code: str,
    detail: str,
    *,
    details: dict[str, Any] | None = None,
    exc: BaseException | None = None,
) -> tuple[Response, int]:
    body = problem_body(status=status, code=code, detail=detail, details=details)
    if status >= 500:
        log.error(
            "problem: code=%s status=%s request_id=%s",
            code,
            status,
            body["request_id"],
            exc_info=exc,
        )
    else:
        log.warning(
            "problem: code=%s status=%s detail=%s request_id=%s",
            code,
            status,
            detail,
            body["request_id"],
        )
    resp = jsonify(body)
    resp.mimetype = "application/problem+json"
    return resp, status


class APIError(Exception):
    """
    An error already resolved to its HTTP representation.

    Parameters
    ----------
    message : str
        Client-facing ``detail``.
    status_code : int, optional
        HTTP status, ``400`` by default.
    code : str, optional
        Machine-readable code, ``"bad_request"`` by default.
    details : dict[str, Any] | None, optional
        Structured extras rendered under ``details``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}


def service_error_to_api_error(exc: ServiceError) -> APIError:
    """
    Translate a service-layer error into an :class:`APIError`.

    Subclasses resolve through their MRO; a kind missing from
    :data:`SERVICE_ERROR_MAP` maps to ``400 bad_request``.

    :param exc: Error raised by a service.
    :returns: API error ready to be rendered.
    """
    entry = next(
        (SERVICE_ERROR_MAP[kind] for kind in type(exc).__mro__ if kind in SERVICE_ERROR_MAP),
        None,
    )
    if entry is None:
        return APIError(str(exc), status_code=HTTPStatus.BAD_REQUEST, code="bad_request")

    status, code, message = entry
    details: dict[str, Any] | None = None
    if isinstance(exc, InvalidInputError):
        message = exc.detail or message
        details = {"errors": exc.errors} if exc.errors else None
    elif isinstance(exc, StoreError):
        details = {"error": str(exc)}
    return APIError(message, status_code=status, code=code, details=details)


def init_app(app: Flask) -> None:
    """Register the problem+json error handlers on ``app``."""

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return _respond(
            err.status_code, err.code, err.message, details=err.details or None, exc=err
        )

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        api_err = service_error_to_api_error(err)
        return _respond(
            api_err.status_code, api_err.code, api_err.message, details=api_err.details or None, exc=err
        )

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
        return handle_service_error(InvalidInputError("Invalid request data", messages))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = HTTP_STATUS_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND and has_request_context():
            detail = f"Route '{request.path}' not found"
        else:
            detail = (err.description or HTTPStatus(status).phrase).strip()
        return _respond(status, code, detail)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        return _respond(HTTPStatus.CONFLICT, "conflict", "Resource conflict", exc=err)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        return _respond(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "service_unavailable",
            "Service temporarily unavailable",
            exc=err,
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        return _respond(
            HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error", exc=err
        )
