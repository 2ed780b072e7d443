from pathlib import Path

import pytest

from wecom_bot.config import get_settings

RESOURCES_DIR = Path(__file__).resolve().parent / "resources"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in ("WECOM_BOT_KEY", "WECOM_SEND_URL", "WECOM_UPLOAD_URL", "WECOM_TIMEOUT", "WECOM_LOG_DIR"):
        monkeypatch.delenv(name, raising=False)
    # Keep a stray .env in the working tree out of the tests.
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def logo_path() -> Path:
    return RESOURCES_DIR / "tiny-logo.png"
