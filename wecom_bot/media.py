"""Upload media types accepted by the webhook ``upload_media`` endpoint."""
from __future__ import annotations

from enum import Enum
from typing import Optional

from wecom_bot.errors import FileReadError, MediaTypeError

MIN_UPLOAD_BYTES = 5


class MediaType(str, Enum):
    FILE = "file"
    IMAGE = "image"
    VOICE = "voice"
    VIDEO = "video"

    @classmethod
    def parse(cls, value: "str | MediaType") -> "MediaType":
        """Return the media type for ``value``, ignoring case."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise MediaTypeError(str(value)) from exc

    @property
    def max_bytes(self) -> Optional[int]:
        return _MAX_UPLOAD_BYTES.get(self)

    def check_size(self, size: int) -> None:
        """Raise :class:`FileReadError` when ``size`` is outside the vendor limits."""

        if size <= MIN_UPLOAD_BYTES:
            raise FileReadError(f"upload must be larger than {MIN_UPLOAD_BYTES} bytes, got {size}")
        limit = self.max_bytes
        if limit is not None and size > limit:
            raise FileReadError(f"{self.value} upload exceeds {limit} bytes, got {size}")

    def __str__(self) -> str:
        return self.value


_MAX_UPLOAD_BYTES = {
    MediaType.FILE: 20 * 1024 * 1024,
    MediaType.VOICE: 2 * 1024 * 1024,
}


__all__ = ["MediaType", "MIN_UPLOAD_BYTES"]
