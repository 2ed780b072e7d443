#!/usr/bin/env python3
"""Send a quick WeCom group bot message for manual verification."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from wecom_bot import Image, MediaType, Message, SendResp, WeComBot, WeComError
from wecom_bot.logging_utils import setup_logging

DEFAULT_MESSAGE = "[wecom-bot] Webhook test message."


def build_message(args: argparse.Namespace) -> Message:
    if args.image:
        return Message.image(Image.from_file(args.image))
    if args.markdown:
        return Message.markdown(args.content)
    return Message.text(
        args.content,
        mentioned_list=args.mention or None,
        mentioned_mobile_list=args.mention_mobile or None,
    )


def send(bot: WeComBot, args: argparse.Namespace) -> SendResp:
    if args.file:
        return bot.send_file(args.file, MediaType.FILE)
    if args.voice:
        return bot.send_file(args.voice, MediaType.VOICE)
    return bot.send(build_message(args))


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send a test message to a WeCom group bot webhook.")
    parser.add_argument("content", nargs="?", default=DEFAULT_MESSAGE, help="Text or markdown content to send.")
    parser.add_argument("--key", help="Bot webhook key. Defaults to WECOM_BOT_KEY.")
    parser.add_argument("--markdown", action="store_true", help="Send the content as markdown.")
    parser.add_argument("--mention", action="append", default=[], metavar="USERID", help="User id to remind, '@all' for everyone.")
    parser.add_argument(
        "--mention-mobile",
        action="append",
        default=[],
        metavar="PHONE",
        help="Mobile number of a member to remind.",
    )
    media = parser.add_mutually_exclusive_group()
    media.add_argument("--image", help="Send a JPG/PNG image instead of text.")
    media.add_argument("--file", help="Upload a file and send it.")
    media.add_argument("--voice", help="Upload an AMR voice file and send it.")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds (default: WECOM_TIMEOUT or 10)",
    )
    args = parser.parse_args(argv)
    if (args.mention or args.mention_mobile) and (args.markdown or args.image or args.file or args.voice):
        parser.error("--mention and --mention-mobile only apply to plain text messages")
    return args


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()
    try:
        with WeComBot(args.key, timeout=args.timeout) as bot:
            result = send(bot, args)
    except WeComError as exc:
        sys.stderr.write(f"Request failed: {exc}\n")
        return 1
    if not result.is_ok():
        sys.stderr.write(f"WeCom returned errcode {result.errcode}: {result.errmsg}\n")
        return 1
    print(f"Message sent, response: {result.model_dump_json()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
