"""Raw image data prepared for ``image`` messages."""
from __future__ import annotations

import base64
import hashlib
from pathlib import Path

from wecom_bot.errors import ImageReadError


class Image:
    """Image content loaded from bytes or from a file.

    WeCom accepts JPG and PNG data up to 2 MB; the format itself is not
    inspected here.
    """

    def __init__(self, data: bytes) -> None:
        self.content = bytes(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "Image":
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise ImageReadError(exc) from exc
        return cls(data)

    def encode(self) -> tuple[str, str]:
        """Return the base64 text and hex md5 digest of the image data."""

        encoded = base64.b64encode(self.content).decode("ascii")
        digest = hashlib.md5(self.content).hexdigest()
        return encoded, digest

    def __len__(self) -> int:
        return len(self.content)

    def __repr__(self) -> str:
        return f"Image(size={len(self.content)})"


__all__ = ["Image"]
