"""Logging helpers to configure console and rotating file handlers."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable

from wecom_bot.config import get_settings

_CONFIGURED = False
LOG_FILE_NAME = "wecom_bot.log"


def _resolve_level(level_name: str) -> int:
    try:
        return int(level_name)
    except (TypeError, ValueError):
        return getattr(logging, str(level_name or "INFO").upper(), logging.INFO)


def _has_file_handler(handlers: Iterable[logging.Handler], path: Path) -> bool:
    for handler in handlers:
        if isinstance(handler, RotatingFileHandler):
            if Path(getattr(handler, "baseFilename", "")) == path:
                return True
    return False


def setup_logging(force: bool = False) -> None:
    """Configure root logging with a stream handler and, if enabled, a rotating file."""

    global _CONFIGURED  # noqa: PLW0603
    if _CONFIGURED and not force:
        return

    settings = get_settings()
    level = _resolve_level(settings.log_level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not any(isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)
               for handler in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # An empty log_dir turns file logging off.
    if settings.log_dir:
        log_dir = Path(settings.log_dir).expanduser().resolve()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / LOG_FILE_NAME

        if not _has_file_handler(root_logger.handlers, log_file):
            file_handler = RotatingFileHandler(
                str(log_file),
                maxBytes=int(settings.log_max_bytes),
                backupCount=int(settings.log_backup_count),
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    # httpx logs every request URL at INFO, and the URL carries the webhook key.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    _CONFIGURED = True


__all__ = ["setup_logging", "LOG_FILE_NAME"]
