"""Error handling utilities for the application."""

import enum
import functools
import logging
from typing import Callable, TypeVar, Any, Optional, Awaitable

import httpx
from pydantic import ValidationError

# Define a generic type for function return value
T = TypeVar('T')

logger = logging.getLogger(__name__)

MISSING_PARAMETERS_MESSAGE = "Missing required parameters"
MISSING_API_KEY_MESSAGE = (
    "API key is not configured. Please set the PEXELS_API_KEY environment variable."
)


class DegradationReason(str, enum.Enum):
    """Why the proxy served placeholder data instead of upstream results."""
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    MALFORMED_RESPONSE = "malformed_response"


# Custom exceptions
class MissingParameterError(Exception):
    """Raised when the caller omitted the search query."""

    def __init__(self, message: str = MISSING_PARAMETERS_MESSAGE):
        super().__init__(message)
        self.message = message


class MisconfigurationError(Exception):
    """Raised when the upstream credential is not configured."""

    def __init__(self, message: str = MISSING_API_KEY_MESSAGE):
        super().__init__(message)
        self.message = message


class UpstreamFailure(Exception):
    """The upstream provider could not produce a usable response."""

    def __init__(self, reason: DegradationReason, message: str):
        super().__init__(f"{reason.value}: {message}")
        self.reason = reason
        self.message = message


class ClientFetchError(Exception):
    """The search proxy itself could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def handle_upstream_errors(
    error_message: str = "Upstream request failed",
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator translating transport and schema errors of an async upstream call
    into UpstreamFailure with a DegradationReason.

    Args:
        error_message: Base error message to log and include in the failure

    Returns:
        Decorated function
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except UpstreamFailure:
                raise
            except httpx.TimeoutException as e:
                reason, detail = DegradationReason.TIMEOUT, f"request timed out ({e.__class__.__name__})"
            except httpx.HTTPStatusError as e:
                body = e.response.text[:500]
                reason, detail = DegradationReason.HTTP_ERROR, f"status {e.response.status_code}, message: {body}"
            except httpx.RequestError as e:
                reason, detail = DegradationReason.NETWORK_ERROR, str(e) or e.__class__.__name__
            except ValidationError as e:
                reason, detail = DegradationReason.MALFORMED_RESPONSE, f"unexpected response format ({e.error_count()} errors)"
            except ValueError as e:
                # Body was not JSON
                reason, detail = DegradationReason.MALFORMED_RESPONSE, f"failed to parse response as JSON: {e}"

            full_error = f"{error_message}: {detail}"
            if reason is DegradationReason.TIMEOUT:
                logger.warning(full_error)
            else:
                logger.error(full_error)
            raise UpstreamFailure(reason, detail)

        return async_wrapper
    return decorator


def error_payload(message: str, **extra: Any) -> dict:
    """Build the JSON error body shared by every error response."""
    payload = {"error": message}
    payload.update(extra)
    return payload
