#!/usr/bin/env python3
"""Send a single chat message to Quills.

This is a small, generic "action" script intended to be:
- runnable as a standalone CLI
- a one-shot check of the same path the daemon uses on every tick

It authenticates once, sends once, and exits. No retries.

Env vars (loaded from `.env` if present):
- PRIVATE_KEY (required)
- CHAT_API_URL (required)
- MESSAGE_TEXT (optional, default: "Hello from bot!")
- QUILLS_TIMEOUT_S (optional, default: 30)
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import List

from dotenv import load_dotenv

from core.broadcaster import Broadcaster, SendError
from core.quills_auth import AuthError, authenticate
from core.quills_client import QuillsClient
from core.quills_daemon import DEFAULT_MESSAGE_TEXT, ConfigError, parse_timeout_s
from core.quills_identity import IdentityError, load_identity


def _parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Send one Quills chat message")
    p.add_argument(
        "--message",
        default=None,
        help="Message text (default: env MESSAGE_TEXT)",
    )
    p.add_argument(
        "--timeout-s",
        type=float,
        default=None,
        help="HTTP timeout seconds (default: env QUILLS_TIMEOUT_S or 30)",
    )
    return p.parse_args(argv)


def main(argv: List[str]) -> int:
    load_dotenv()

    private_key = os.getenv("PRIVATE_KEY")
    api_base = os.getenv("CHAT_API_URL")
    if not private_key or not api_base:
        print(
            "ERROR: PRIVATE_KEY and CHAT_API_URL must be set (check your .env)",
            file=sys.stderr,
        )
        return 2

    args = _parse_args(argv)

    message = args.message or os.getenv("MESSAGE_TEXT") or DEFAULT_MESSAGE_TEXT
    try:
        timeout_s = (
            float(args.timeout_s)
            if args.timeout_s is not None
            else parse_timeout_s(os.getenv("QUILLS_TIMEOUT_S", "30"))
        )
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    try:
        identity = load_identity(private_key)
    except IdentityError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    client = QuillsClient(api_base, timeout_s=timeout_s)

    try:
        token = authenticate(client, identity)
    except AuthError as e:
        print(f"ERROR: Authentication failed: {e.detail}", file=sys.stderr)
        return 1

    broadcaster = Broadcaster(client, token, message)
    try:
        resp = broadcaster.send_once(1)
    except SendError as e:
        print(f"ERROR: Failed to send message: {e.detail}", file=sys.stderr)
        return 1

    print(f"Message sent: {resp.get('status')}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
