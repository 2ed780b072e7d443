"""Client configuration and environment loading helpers."""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

WECOM_SEND_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/send"
WECOM_UPLOAD_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/upload_media"


class Settings(BaseSettings):
    """Settings loaded from ``WECOM_*`` environment variables."""

    bot_key: Optional[str] = None
    send_url: str = WECOM_SEND_URL
    upload_url: str = WECOM_UPLOAD_URL
    timeout: float = 10.0
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_max_bytes: int = 5 * 1024 * 1024  # 5 MB
    log_backup_count: int = 5

    model_config = SettingsConfigDict(
        env_prefix="WECOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings", "WECOM_SEND_URL", "WECOM_UPLOAD_URL"]
