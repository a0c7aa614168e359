"""
Proxy error types and raise helpers.

Every fallible step of the chat handler raises one of these; a single
exception handler in ``chat_proxy.main`` turns them into the JSON error body.

Usage:
    from chat_proxy.utils.exceptions import raise_invalid_input

    raise_invalid_input("Invalid JSON in messages")
"""

from typing import NoReturn, Optional

from fastapi import status


class ProxyError(Exception):
    """Base class for errors reported to the caller as ``{error, detail?}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Proxy failed"

    def __init__(self, error: Optional[str] = None, detail: Optional[str] = None):
        if error is not None:
            self.error = error
        self.detail = detail
        super().__init__(self.error if detail is None else f"{self.error}: {detail}")


class MethodNotAllowed(ProxyError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    error = "Method not allowed"


class ServerMisconfigured(ProxyError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "OPENAI_API_KEY not configured"


class InvalidInput(ProxyError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid input"


class StreamingNotImplemented(ProxyError):
    # Client error: resend without streaming
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Streaming not enabled yet"


class ProxyFailed(ProxyError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Proxy failed"


def raise_misconfigured() -> NoReturn:
    """Raise HTTP 500 for a missing upstream credential."""
    raise ServerMisconfigured()


def raise_invalid_input(error: str, detail: Optional[str] = None) -> NoReturn:
    """Raise HTTP 400 Bad Request."""
    raise InvalidInput(error, detail)


def raise_streaming_not_implemented() -> NoReturn:
    """Raise HTTP 400 for a streaming request."""
    raise StreamingNotImplemented()


def raise_proxy_failed(detail: str) -> NoReturn:
    """Raise HTTP 500 Proxy Failed with the underlying message as detail."""
    raise ProxyFailed(detail=detail)
