import json
from pathlib import Path

import httpx
import pytest

from wecom_bot import (
    DecodeError,
    FileReadError,
    HttpStatusError,
    KeyNotFoundError,
    MediaType,
    Message,
    MessageValidationError,
    MessageType,
    NetworkError,
    WeComBot,
)
from wecom_bot.config import WECOM_SEND_URL, WECOM_UPLOAD_URL
from wecom_bot.schemas import TextBody


class RecordingTransport:
    """Answer every request with queued responses and remember what was sent."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def make_bot(*responses: httpx.Response, key: str = "test-key") -> tuple[WeComBot, RecordingTransport]:
    recorder = RecordingTransport(*responses)
    client = httpx.Client(transport=httpx.MockTransport(recorder))
    return WeComBot(key, client=client), recorder


def test_missing_key_raises():
    with pytest.raises(KeyNotFoundError):
        WeComBot()
    with pytest.raises(KeyNotFoundError):
        WeComBot("   ")


def test_key_defaults_to_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("WECOM_BOT_KEY", "env-key-0001")

    with WeComBot() as bot:
        assert "env-key-0001" not in repr(bot)
        assert bot.send_url == WECOM_SEND_URL
        assert bot.upload_url == WECOM_UPLOAD_URL


def test_send_posts_envelope_with_key():
    bot, recorder = make_bot(httpx.Response(200, json={"errcode": 0, "errmsg": "ok"}))

    result = bot.send(Message.markdown("> hello world"))

    assert result.is_ok()
    assert result.errmsg == "ok"
    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url).split("?")[0] == WECOM_SEND_URL
    assert request.url.params["key"] == "test-key"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"msgtype": "markdown", "markdown": {"content": "> hello world"}}


def test_send_returns_api_failure_as_data():
    bot, _ = make_bot(httpx.Response(200, json={"errcode": 93000, "errmsg": "invalid key"}))

    result = bot.send(Message.text("hi"))

    assert not result.is_ok()
    assert result.errcode == 93000
    assert result.errmsg == "invalid key"


def test_send_server_error_raises_http_status():
    bot, _ = make_bot(httpx.Response(502, text="bad gateway"))

    with pytest.raises(HttpStatusError) as excinfo:
        bot.send(Message.text("hi"))

    assert excinfo.value.status_code == 502


def test_send_non_json_raises_decode_error():
    bot, _ = make_bot(httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(DecodeError) as excinfo:
        bot.send(Message.text("hi"))

    assert excinfo.value.typename == "SendResp"


def test_send_schema_mismatch_raises_decode_error():
    bot, _ = make_bot(httpx.Response(200, json={"status": "ok"}))

    with pytest.raises(DecodeError):
        bot.send(Message.text("hi"))


def test_send_transport_failure_raises_network_error():
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    bot = WeComBot("test-key", client=httpx.Client(transport=httpx.MockTransport(fail)))

    with pytest.raises(NetworkError) as excinfo:
        bot.send(Message.text("hi"))

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_send_undecodable_body_raises_network_error():
    bot, _ = make_bot(httpx.Response(200, headers={"Content-Encoding": "gzip"}, stream=httpx.ByteStream(b"definitely not gzip")))

    with pytest.raises(NetworkError) as excinfo:
        bot.send(Message.text("hi"))

    assert isinstance(excinfo.value.__cause__, httpx.DecodingError)


def test_send_revalidates_message_before_request():
    # model_construct skips the checks the factories would apply
    message = Message(MessageType.TEXT, TextBody.model_construct(content=""))
    bot, recorder = make_bot()

    with pytest.raises(MessageValidationError):
        bot.send(message)

    assert recorder.requests == []


def test_upload_sends_multipart_media(tmp_path: Path):
    report = tmp_path / "report.txt"
    report.write_bytes(b"quarterly numbers")
    bot, recorder = make_bot(
        httpx.Response(
            200,
            json={
                "errcode": 0,
                "errmsg": "ok",
                "type": "file",
                "media_id": "1G6nrLmr5EC3MMb_-zK1dDdzmd0p7cNliYu9V5w7o8K0",
                "created_at": "1380000000",
            },
        )
    )

    result = bot.upload(report)

    assert result.is_ok()
    assert result.media_id == "1G6nrLmr5EC3MMb_-zK1dDdzmd0p7cNliYu9V5w7o8K0"
    assert result.created_at == "1380000000"
    request = recorder.requests[0]
    assert str(request.url).split("?")[0] == WECOM_UPLOAD_URL
    assert request.url.params["key"] == "test-key"
    assert request.url.params["type"] == "file"
    assert request.headers["content-type"].startswith("multipart/form-data")
    body = request.read()
    assert b'name="media"' in body
    assert b'filename="report.txt"' in body
    assert b"quarterly numbers" in body


def test_upload_accepts_numeric_created_at(tmp_path: Path):
    clip = tmp_path / "clip.amr"
    clip.write_bytes(b"#!AMR\n" + b"\x00" * 32)
    bot, recorder = make_bot(
        httpx.Response(200, json={"errcode": 0, "errmsg": "ok", "type": "voice", "media_id": "m1", "created_at": 1380000000})
    )

    result = bot.upload(clip, "voice")

    assert result.created_at == "1380000000"
    assert recorder.requests[0].url.params["type"] == "voice"


def test_upload_missing_file_skips_network(tmp_path: Path):
    bot, recorder = make_bot()

    with pytest.raises(FileReadError):
        bot.upload(tmp_path / "missing.txt")

    assert recorder.requests == []


def test_upload_too_small_file_skips_network(tmp_path: Path):
    tiny = tmp_path / "tiny.txt"
    tiny.write_bytes(b"abc")
    bot, recorder = make_bot()

    with pytest.raises(FileReadError):
        bot.upload(tiny)

    assert recorder.requests == []


def test_upload_checks_size_before_reading(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    clip = tmp_path / "long.amr"
    with clip.open("wb") as handle:
        handle.truncate(2 * 1024 * 1024 + 1)
    bot, recorder = make_bot()

    def fail_read(self):
        raise AssertionError("oversized file should not be read")

    monkeypatch.setattr(Path, "read_bytes", fail_read)

    with pytest.raises(FileReadError):
        bot.upload(clip, MediaType.VOICE)

    assert recorder.requests == []


def test_upload_directory_raises_file_read_error(tmp_path: Path):
    bot, recorder = make_bot()

    with pytest.raises(FileReadError):
        bot.upload(tmp_path)

    assert recorder.requests == []


def test_send_file_uploads_then_sends(logo_path: Path):
    bot, recorder = make_bot(
        httpx.Response(200, json={"errcode": 0, "errmsg": "ok", "type": "file", "media_id": "media-1", "created_at": "1"}),
        httpx.Response(200, json={"errcode": 0, "errmsg": "ok"}),
    )

    result = bot.send_file(logo_path, MediaType.FILE)

    assert result.is_ok()
    assert len(recorder.requests) == 2
    assert json.loads(recorder.requests[1].content) == {"msgtype": "file", "file": {"media_id": "media-1"}}


def test_send_file_returns_upload_failure(logo_path: Path):
    bot, recorder = make_bot(httpx.Response(200, json={"errcode": 40009, "errmsg": "invalid media size"}))

    result = bot.send_file(logo_path)

    assert result.errcode == 40009
    assert result.errmsg == "invalid media size"
    assert len(recorder.requests) == 1


def test_close_leaves_injected_client_open():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    with WeComBot("test-key", client=client):
        pass

    assert not client.is_closed
    client.close()
