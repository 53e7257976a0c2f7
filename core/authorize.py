#!/usr/bin/env python3
"""Authorize / validate wallet credentials against the Quills chat API.

This is a small helper intended for quick troubleshooting:
- loads PRIVATE_KEY and prints the derived wallet address
- signs and recovers a local nonce to check the key round-trips
- runs the nonce/signature login once
- prints a short token preview (or the full login JSON with --json)

Recommended invocation:
- python -m core.authorize

Env vars (loaded from `.env`):
- PRIVATE_KEY (required)
- CHAT_API_URL (required)
- QUILLS_TIMEOUT_S (optional, default: 30)
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import List

from dotenv import load_dotenv

from core.quills_auth import AuthError, authenticate, token_preview
from core.quills_client import QuillsClient
from core.quills_daemon import ConfigError, parse_timeout_s
from core.quills_identity import (
    IdentityError,
    load_identity,
    recover_signer,
    sign_nonce,
)


def _parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Authenticate with Quills chat API")
    p.add_argument(
        "--timeout-s",
        type=float,
        default=None,
        help="HTTP timeout seconds (default: env QUILLS_TIMEOUT_S or 30)",
    )
    p.add_argument(
        "--json",
        action="store_true",
        help="Print address and full token as JSON",
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
        identity = load_identity(private_key, rpc_url=os.getenv("RPC_URL"))
    except IdentityError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(f"Wallet address: {identity.address}", file=sys.stderr)

    # Local round trip before touching the network.
    check_nonce = "quills-authorize-self-check"
    signer = recover_signer(check_nonce, sign_nonce(identity, check_nonce))
    if signer != identity.address:
        print(
            f"ERROR: signature self-check failed: recovered {signer}, "
            f"expected {identity.address}",
            file=sys.stderr,
        )
        return 2

    client = QuillsClient(api_base, timeout_s=timeout_s)
    try:
        token = authenticate(client, identity)
    except AuthError as e:
        print(f"ERROR: authorization failed: {e.detail}", file=sys.stderr)
        return 1

    if args.json:
        print(
            json.dumps(
                {"address": identity.address, "token": token},
                indent=2,
                sort_keys=True,
            )
        )
    else:
        print(f"Authorized! Token: {token_preview(token)}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
