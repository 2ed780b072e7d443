"""Blocking and asyncio clients for the WeCom group bot webhook."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from wecom_bot.config import get_settings
from wecom_bot.errors import (
    DecodeError,
    FileReadError,
    HttpStatusError,
    KeyNotFoundError,
    NetworkError,
)
from wecom_bot.media import MediaType
from wecom_bot.message import Message
from wecom_bot.schemas import SendResp, UploadResp

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)
PathLike = Union[str, Path]

UPLOAD_FIELD = "media"


def _mask_key(key: str) -> str:
    if len(key) <= 8:
        return "***"
    return f"{key[:4]}***{key[-4:]}"


def _read_upload(path: PathLike, media_type: MediaType) -> tuple[str, bytes]:
    file_path = Path(path)
    try:
        if not file_path.is_file():
            raise FileNotFoundError(f"not a regular file: {file_path}")
        media_type.check_size(file_path.stat().st_size)
        content = file_path.read_bytes()
    except OSError as exc:
        raise FileReadError(f"failed to read upload file: {exc}") from exc
    # Size may have changed between stat and read.
    media_type.check_size(len(content))
    return file_path.name, content


def _decode(response: httpx.Response, model: type[ResponseT]) -> ResponseT:
    if response.status_code >= 500:
        raise HttpStatusError(response.status_code)
    try:
        return model.model_validate_json(response.content)
    except ValidationError as exc:
        raise DecodeError(model.__name__, exc) from exc


def _media_message(media_id: str, media_type: MediaType) -> Message:
    if media_type is MediaType.VOICE:
        return Message.voice(media_id)
    return Message.file(media_id)


class _BotBase:
    def __init__(
        self,
        key: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        send_url: Optional[str] = None,
        upload_url: Optional[str] = None,
    ) -> None:
        settings = get_settings()
        if key is None:
            key = settings.bot_key
        if key is None or not key.strip():
            raise KeyNotFoundError()
        self._key = key.strip()
        self.send_url = send_url or settings.send_url
        self.upload_url = upload_url or settings.upload_url
        self.timeout = timeout if timeout is not None else settings.timeout

    def _send_params(self) -> dict[str, str]:
        return {"key": self._key}

    def _upload_params(self, media_type: MediaType) -> dict[str, str]:
        return {"key": self._key, "type": media_type.value}

    def _log_result(self, action: str, result: Union[SendResp, UploadResp]) -> None:
        if result.is_ok():
            logger.debug("企业微信机器人%s成功 key=%s", action, _mask_key(self._key))
        else:
            logger.warning(
                "企业微信机器人%s失败 key=%s errcode=%s errmsg=%s",
                action,
                _mask_key(self._key),
                result.errcode,
                result.errmsg,
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.send_url!r}, key={_mask_key(self._key)!r})"


class WeComBot(_BotBase):
    """Blocking webhook client backed by :class:`httpx.Client`."""

    def __init__(
        self,
        key: Optional[str] = None,
        *,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
        send_url: Optional[str] = None,
        upload_url: Optional[str] = None,
    ) -> None:
        super().__init__(key, timeout=timeout, send_url=send_url, upload_url=upload_url)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self.timeout)

    def send(self, message: Message) -> SendResp:
        """Post ``message`` to the webhook and return the decoded reply."""

        message.validate()
        try:
            response = self._client.post(
                self.send_url,
                params=self._send_params(),
                content=message.to_json().encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as exc:
            raise NetworkError(exc) from exc
        result = _decode(response, SendResp)
        self._log_result(f"发送{message.msgtype.value}消息", result)
        return result

    def upload(self, path: PathLike, media_type: Union[MediaType, str] = MediaType.FILE) -> UploadResp:
        """Upload a local file and return the media descriptor."""

        media_type = MediaType.parse(media_type)
        filename, content = _read_upload(path, media_type)
        try:
            response = self._client.post(
                self.upload_url,
                params=self._upload_params(media_type),
                files={UPLOAD_FIELD: (filename, content, "application/octet-stream")},
            )
        except httpx.RequestError as exc:
            raise NetworkError(exc) from exc
        result = _decode(response, UploadResp)
        self._log_result(f"上传{media_type.value}", result)
        return result

    def send_file(self, path: PathLike, media_type: Union[MediaType, str] = MediaType.FILE) -> SendResp:
        """Upload ``path`` and send it as a file (or voice) message."""

        media_type = MediaType.parse(media_type)
        uploaded = self.upload(path, media_type)
        if not uploaded.is_ok():
            return SendResp(errcode=uploaded.errcode, errmsg=uploaded.errmsg)
        return self.send(_media_message(uploaded.media_id, media_type))

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "WeComBot":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class WeComBotAsync(_BotBase):
    """Asyncio webhook client backed by :class:`httpx.AsyncClient`."""

    def __init__(
        self,
        key: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        send_url: Optional[str] = None,
        upload_url: Optional[str] = None,
    ) -> None:
        super().__init__(key, timeout=timeout, send_url=send_url, upload_url=upload_url)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    async def send(self, message: Message) -> SendResp:
        message.validate()
        try:
            response = await self._client.post(
                self.send_url,
                params=self._send_params(),
                content=message.to_json().encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as exc:
            raise NetworkError(exc) from exc
        result = _decode(response, SendResp)
        self._log_result(f"发送{message.msgtype.value}消息", result)
        return result

    async def upload(self, path: PathLike, media_type: Union[MediaType, str] = MediaType.FILE) -> UploadResp:
        media_type = MediaType.parse(media_type)
        filename, content = await asyncio.to_thread(_read_upload, path, media_type)
        try:
            response = await self._client.post(
                self.upload_url,
                params=self._upload_params(media_type),
                files={UPLOAD_FIELD: (filename, content, "application/octet-stream")},
            )
        except httpx.RequestError as exc:
            raise NetworkError(exc) from exc
        result = _decode(response, UploadResp)
        self._log_result(f"上传{media_type.value}", result)
        return result

    async def send_file(self, path: PathLike, media_type: Union[MediaType, str] = MediaType.FILE) -> SendResp:
        media_type = MediaType.parse(media_type)
        uploaded = await self.upload(path, media_type)
        if not uploaded.is_ok():
            return SendResp(errcode=uploaded.errcode, errmsg=uploaded.errmsg)
        return await self.send(_media_message(uploaded.media_id, media_type))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WeComBotAsync":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["WeComBot", "WeComBotAsync", "UPLOAD_FIELD"]
