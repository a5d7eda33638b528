"""Exceptions raised by the request and response helpers."""


class HttpKitError(Exception):
    """Base class for all httpkit failures."""


class PayloadEncodeError(HttpKitError, ValueError):
    """Raised when a payload cannot be serialized to JSON."""


class FormEncodeError(PayloadEncodeError):
    """Raised when a payload cannot be flattened into string form fields."""


class TransportError(HttpKitError):
    """Raised when a network failure occurs before the full body is read."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url


class RequestTimeout(TransportError):
    """Raised when a round trip exceeds its deadline."""
