"""Exception types raised by the WeCom bot client."""
from __future__ import annotations


class WeComError(Exception):
    """Base class for every error raised by this package."""


class KeyNotFoundError(WeComError):
    """Raised when the webhook key is missing or blank."""

    def __init__(self, message: str = "wecom bot key not set") -> None:
        super().__init__(message)


class MessageValidationError(WeComError, ValueError):
    """Raised when a message violates a vendor limit before it is sent."""


class NetworkError(WeComError):
    """Raised when the HTTP request could not be completed."""

    def __init__(self, source: Exception) -> None:
        super().__init__(f"network failed: {source}")
        self.source = source


class HttpStatusError(WeComError):
    """Raised when the WeCom server answers with a 5xx status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"wecom bot server error: {status_code}")
        self.status_code = status_code


class DecodeError(WeComError):
    """Raised when a response body cannot be parsed into the expected type."""

    def __init__(self, typename: str, source: Exception) -> None:
        super().__init__(f"could not parse {typename} data from JSON: {source}")
        self.typename = typename
        self.source = source


class ImageReadError(WeComError):
    """Raised when an image file cannot be read."""

    def __init__(self, source: OSError) -> None:
        super().__init__(f"failed to read image file: {source}")
        self.source = source


class FileReadError(WeComError):
    """Raised when a file cannot be read or is not acceptable for upload."""


class MediaTypeError(WeComError, ValueError):
    """Raised for an unknown upload media type."""

    def __init__(self, value: str) -> None:
        super().__init__(f"unknown upload media type: {value}")
        self.value = value


__all__ = [
    "DecodeError",
    "FileReadError",
    "HttpStatusError",
    "ImageReadError",
    "KeyNotFoundError",
    "MediaTypeError",
    "MessageValidationError",
    "NetworkError",
    "WeComError",
]
