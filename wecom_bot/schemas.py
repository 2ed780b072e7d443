"""Pydantic schemas for message bodies and webhook responses."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TEXT_MAX_BYTES = 2048
MARKDOWN_MAX_BYTES = 4096
IMAGE_MAX_BYTES = 2 * 1024 * 1024
ARTICLE_TITLE_MAX_BYTES = 128
ARTICLE_DESCRIPTION_MAX_BYTES = 512
NEWS_MAX_ARTICLES = 8


def _check_utf8_length(value: str, limit: int, label: str) -> str:
    size = len(value.encode("utf-8"))
    if size > limit:
        raise ValueError(f"{label} is {size} bytes, limit is {limit}")
    return value


class _Body(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TextBody(_Body):
    content: str = Field(min_length=1)
    mentioned_list: Optional[list[str]] = None
    mentioned_mobile_list: Optional[list[str]] = None

    @field_validator("content")
    @classmethod
    def _content_size(cls, value: str) -> str:
        return _check_utf8_length(value, TEXT_MAX_BYTES, "text content")


class MarkdownBody(_Body):
    content: str = Field(min_length=1)

    @field_validator("content")
    @classmethod
    def _content_size(cls, value: str) -> str:
        return _check_utf8_length(value, MARKDOWN_MAX_BYTES, "markdown content")


class ImageBody(_Body):
    base64: str = Field(min_length=1)
    md5: str = Field(min_length=32, max_length=32)


class Article(_Body):
    title: str = Field(min_length=1)
    url: str = Field(min_length=1)
    description: Optional[str] = None
    picurl: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_size(cls, value: str) -> str:
        return _check_utf8_length(value, ARTICLE_TITLE_MAX_BYTES, "article title")

    @field_validator("description")
    @classmethod
    def _description_size(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_utf8_length(value, ARTICLE_DESCRIPTION_MAX_BYTES, "article description")


class NewsBody(_Body):
    articles: list[Article] = Field(min_length=1, max_length=NEWS_MAX_ARTICLES)


class MediaBody(_Body):
    """Body shared by ``file`` and ``voice`` messages."""

    media_id: str = Field(min_length=1)


class SendResp(BaseModel):
    errcode: int
    errmsg: str = ""

    def is_ok(self) -> bool:
        return self.errcode == 0


class UploadResp(BaseModel):
    errcode: int
    errmsg: str = ""
    type: str = "file"
    media_id: str = ""
    created_at: str = ""

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        # The endpoint has returned both "1380000000" and 1380000000.
        if isinstance(value, int):
            return str(value)
        return value

    def is_ok(self) -> bool:
        return self.errcode == 0


__all__ = [
    "Article",
    "ImageBody",
    "MarkdownBody",
    "MediaBody",
    "NewsBody",
    "SendResp",
    "TextBody",
    "UploadResp",
    "ARTICLE_DESCRIPTION_MAX_BYTES",
    "ARTICLE_TITLE_MAX_BYTES",
    "IMAGE_MAX_BYTES",
    "MARKDOWN_MAX_BYTES",
    "NEWS_MAX_ARTICLES",
    "TEXT_MAX_BYTES",
]
