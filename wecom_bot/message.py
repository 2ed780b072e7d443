"""Message model for the group bot webhook.

A :class:`Message` wraps exactly one body variant and serializes to the
envelope the webhook expects::

    {"msgtype": "<variant>", "<variant>": {...}}

Factories validate the vendor limits eagerly so that a bad message fails
here instead of being rejected by the server.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, Iterable, Mapping, Union

from pydantic import BaseModel, ValidationError

from wecom_bot.errors import MessageValidationError
from wecom_bot.image import Image
from wecom_bot.schemas import (
    IMAGE_MAX_BYTES,
    Article,
    ImageBody,
    MarkdownBody,
    MediaBody,
    NewsBody,
    TextBody,
)


class MessageType(str, Enum):
    TEXT = "text"
    MARKDOWN = "markdown"
    IMAGE = "image"
    NEWS = "news"
    FILE = "file"
    VOICE = "voice"


_BODY_TYPES: dict[MessageType, type[BaseModel]] = {
    MessageType.TEXT: TextBody,
    MessageType.MARKDOWN: MarkdownBody,
    MessageType.IMAGE: ImageBody,
    MessageType.NEWS: NewsBody,
    MessageType.FILE: MediaBody,
    MessageType.VOICE: MediaBody,
}


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def _build_body(msgtype: MessageType, **data: Any) -> BaseModel:
    body_type = _BODY_TYPES[msgtype]
    try:
        return body_type(**data)
    except ValidationError as exc:
        raise MessageValidationError(f"invalid {msgtype.value} message: {_format_errors(exc)}") from exc


def _clean_list(values: Iterable[str] | None) -> list[str] | None:
    if values is None:
        return None
    if isinstance(values, str):
        values = [values]
    cleaned = [str(value) for value in values]
    return cleaned or None


class Message:
    """A single outgoing bot message."""

    __slots__ = ("_msgtype", "_body")

    def __init__(self, msgtype: MessageType, body: BaseModel) -> None:
        msgtype = MessageType(msgtype)
        if not isinstance(body, _BODY_TYPES[msgtype]):
            raise MessageValidationError(f"{type(body).__name__} is not a {msgtype.value} body")
        self._msgtype = msgtype
        self._body = body

    @classmethod
    def text(
        cls,
        content: str,
        mentioned_list: Iterable[str] | None = None,
        mentioned_mobile_list: Iterable[str] | None = None,
    ) -> "Message":
        """Plain text, up to 2048 bytes.

        ``mentioned_list`` holds user ids and ``mentioned_mobile_list`` phone
        numbers of members to remind; ``"@all"`` reminds everyone.
        """

        body = _build_body(
            MessageType.TEXT,
            content=content,
            mentioned_list=_clean_list(mentioned_list),
            mentioned_mobile_list=_clean_list(mentioned_mobile_list),
        )
        return cls(MessageType.TEXT, body)

    @classmethod
    def markdown(cls, content: str) -> "Message":
        """Markdown text, up to 4096 bytes."""

        return cls(MessageType.MARKDOWN, _build_body(MessageType.MARKDOWN, content=content))

    @classmethod
    def image(cls, image: Union[Image, bytes]) -> "Message":
        if not isinstance(image, Image):
            image = Image(image)
        if not image.content:
            raise MessageValidationError("invalid image message: image data is empty")
        if len(image) > IMAGE_MAX_BYTES:
            raise MessageValidationError(
                f"invalid image message: image is {len(image)} bytes, limit is {IMAGE_MAX_BYTES}"
            )
        encoded, digest = image.encode()
        return cls(MessageType.IMAGE, _build_body(MessageType.IMAGE, base64=encoded, md5=digest))

    @classmethod
    def news(cls, articles: Iterable[Union[Article, Mapping[str, Any]]]) -> "Message":
        """Link cards, one to eight articles, shown in the given order."""

        items = list(articles)
        return cls(MessageType.NEWS, _build_body(MessageType.NEWS, articles=items))

    @classmethod
    def file(cls, media_id: str) -> "Message":
        """File previously uploaded with ``WeComBot.upload``."""

        return cls(MessageType.FILE, _build_body(MessageType.FILE, media_id=media_id))

    @classmethod
    def voice(cls, media_id: str) -> "Message":
        return cls(MessageType.VOICE, _build_body(MessageType.VOICE, media_id=media_id))

    @property
    def msgtype(self) -> MessageType:
        return self._msgtype

    @property
    def body(self) -> BaseModel:
        return self._body

    def mentioned_list(self, users: Iterable[str]) -> "Message":
        """Return a copy of this text message that reminds ``users``."""

        return self._with_mentions(mentioned_list=_clean_list(users))

    def mentioned_mobile_list(self, mobiles: Iterable[str]) -> "Message":
        """Return a copy of this text message that reminds the owners of ``mobiles``."""

        return self._with_mentions(mentioned_mobile_list=_clean_list(mobiles))

    def _with_mentions(self, **update: Any) -> "Message":
        if self._msgtype is not MessageType.TEXT:
            raise MessageValidationError(f"mentions are only supported on text messages, not {self._msgtype.value}")
        data = self._body.model_dump()
        data.update(update)
        return Message(MessageType.TEXT, _build_body(MessageType.TEXT, **data))

    def validate(self) -> None:
        """Re-check the body against the vendor limits."""

        _build_body(self._msgtype, **self._body.model_dump())

    def to_payload(self) -> dict[str, Any]:
        body = self._body.model_dump(exclude_none=True)
        return {"msgtype": self._msgtype.value, self._msgtype.value: body}

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), ensure_ascii=False, separators=(",", ":"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self._msgtype is other._msgtype and self._body == other._body

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Message(msgtype={self._msgtype.value!r})"


__all__ = ["Message", "MessageType"]
