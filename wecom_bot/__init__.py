"""Client for sending messages through WeCom group bot webhooks."""
from wecom_bot.bot import WeComBot, WeComBotAsync
from wecom_bot.errors import (
    DecodeError,
    FileReadError,
    HttpStatusError,
    ImageReadError,
    KeyNotFoundError,
    MediaTypeError,
    MessageValidationError,
    NetworkError,
    WeComError,
)
from wecom_bot.image import Image
from wecom_bot.media import MediaType
from wecom_bot.message import Message, MessageType
from wecom_bot.schemas import Article, SendResp, UploadResp

__version__ = "0.1.0"

__all__ = [
    "Article",
    "DecodeError",
    "FileReadError",
    "HttpStatusError",
    "Image",
    "ImageReadError",
    "KeyNotFoundError",
    "MediaType",
    "MediaTypeError",
    "Message",
    "MessageType",
    "MessageValidationError",
    "NetworkError",
    "SendResp",
    "UploadResp",
    "WeComBot",
    "WeComBotAsync",
    "WeComError",
]
