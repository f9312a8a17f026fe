"""
Mapping of catalog API failures to user-facing errors.
"""

import logging
from typing import Any, Optional

import requests

from .errors import KinopoiskError
from .i18n import MessageCatalog

logger = logging.getLogger(__name__)

NETWORK_ERROR_PATTERNS = (
    "net::",
    "NetworkError",
    "Failed to fetch",
    "ENOTFOUND",
    "ECONNREFUSED",
    "ETIMEDOUT",
)

NETWORK_EXCEPTIONS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)

STATUS_MESSAGE_KEYS = {
    400: "errorHandler.badRequest",
    401: "errorHandler.unauthorized",
    403: "errorHandler.forbidden",
    404: "errorHandler.notFound",
    429: "errorHandler.tooManyRequests",
    500: "errorHandler.internalServerError",
    502: "errorHandler.badGateway",
    503: "errorHandler.serviceUnavailable",
    504: "errorHandler.gatewayTimeout",
}


def is_network_error(error: Any) -> bool:
    """Connection/timeout failures, by type or by message."""
    if isinstance(error, NETWORK_EXCEPTIONS):
        return True
    if not isinstance(error, Exception):
        return False
    message = str(error)
    return any(pattern in message for pattern in NETWORK_ERROR_PATTERNS)


def _as_status(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def extract_status_code(error: Any) -> int:
    """Find an HTTP status on the error object, 0 when there is none."""
    if error is None:
        return 0

    status = _as_status(getattr(error, "status", None))
    if status is not None:
        return status

    response = getattr(error, "response", None)
    if response is not None:
        for attribute in ("status_code", "status"):
            status = _as_status(getattr(response, attribute, None))
            if status is not None:
                return status

    status = _as_status(getattr(error, "status_code", None))
    if status is not None:
        return status

    return 0


class ApiErrorHandler:
    """Turns arbitrary request failures into KinopoiskError with a localized message."""

    def __init__(self, messages: Optional[MessageCatalog] = None):
        self.messages = messages or MessageCatalog()

    def handle_api_error(self, error: Any) -> KinopoiskError:
        if is_network_error(error):
            return KinopoiskError(self.messages.lookup("errorHandler.networkError"))

        status = extract_status_code(error)

        message_key = STATUS_MESSAGE_KEYS.get(status)
        if message_key:
            return KinopoiskError(self.messages.lookup(message_key), status=status)

        if status > 0:
            message = self.messages.lookup_with_params("errorHandler.unknownStatusError", {"status": status})
            return KinopoiskError(message, status=status)

        return KinopoiskError(self.messages.lookup("errorHandler.unexpectedError"))

    def log_error(self, context: str, error: Any):
        logger.error(f"[{context}] Error: {error}")
