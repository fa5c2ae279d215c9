import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ShopError(Exception):
    """
    Base class for business-rule failures raised by the service layer.

    Carries the HTTP status the API answers with, a client-facing message and
    optional context fields merged into the error body.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message=None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def as_response_data(self) -> dict:
        return {"error": self.message, **self.context}


class ValidationError(ShopError):
    default_message = "All fields are required"


class Conflict(ShopError):
    default_message = "User with this email or username already exists"


class InvalidCredentials(ShopError):
    # Same message for unknown username and wrong password
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class NotFound(ShopError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidAmount(ShopError):
    default_message = "Invalid amount"


class InsufficientBalance(ShopError):
    default_message = "Insufficient balance"


def _first_error(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_error(value)
    if isinstance(detail, list) and detail:
        return _first_error(detail[0])
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render every API failure as `{"error": ...}`.

    Unexpected exceptions are logged with their traceback and answered with
    the view's generic `failure_message`.
    """
    view = context.get("view")

    if isinstance(exc, ShopError):
        return Response(exc.as_response_data(), status=exc.status_code)

    if isinstance(exc, exceptions.ValidationError):
        return Response(
            {"error": _first_error(exc.detail), "details": exc.detail},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, exceptions.NotAuthenticated):
            response.data = {"error": "Please authenticate"}
        else:
            response.data = {"error": _first_error(response.data)}
        return response

    failure_message = getattr(view, "failure_message", "Internal server error")
    logger.exception(
        "Unhandled error in %s: %s",
        view.__class__.__name__ if view else "unknown view",
        exc,
    )
    return Response(
        {"error": failure_message},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
