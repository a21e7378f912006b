import logging
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidRequest(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request."
    default_code = "invalid_request"


class Conflict(APIException):
    # Duplicate follow; the API has always answered this with 400
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Conflict."
    default_code = "conflict"


class UnsupportedFileType(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Unsupported file type."
    default_code = "unsupported_type"


class Forbidden(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"
    default_code = "forbidden"


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class ConfigError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Service is not configured."
    default_code = "config_error"


class GenerationFailed(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Generation failed. Please try again."
    default_code = "generation_failed"


class InternalError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
    default_code = "internal"


def _first_message(detail):
    """Pull one readable message out of a DRF error detail (str, list or dict)."""
    if isinstance(detail, dict):
        if not detail:
            return "Invalid request."
        field, value = next(iter(detail.items()))
        message = _first_message(value)
        if field in ("non_field_errors", "detail"):
            return message
        return f"{field}: {message}"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request."
    return str(detail)


def api_exception_handler(exc, context):
    """
    Every error leaves the API as {"error": "<message>"}.
    DRF exceptions keep their status; anything else is logged and becomes a 500.
    """
    response = exception_handler(exc, context)
    if response is not None:
        response.data = {"error": _first_message(response.data)}
        return response

    view = context.get("view")
    logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
    return Response({"error": InternalError.default_detail}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
