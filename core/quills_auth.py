#!/usr/bin/env python3
"""Nonce/signature login against the Quills chat API.

Flow:
1) GET /nonce?address=<wallet address>
2) sign the nonce text with the wallet key
3) POST /login {address, signature} -> bearer token

Every failure (network, non-2xx, missing field) becomes a single AuthError.
Callers treat it as fatal; nothing here retries.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from core.quills_client import QuillsAPIError, QuillsClient
from core.quills_identity import Identity, sign_nonce


logger = logging.getLogger("quills-daemon")


class AuthError(RuntimeError):
    """Raised when the login handshake fails."""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message)
        self.detail = detail if detail is not None else message


def _require_str(data: Dict[str, Any], key: str, step: str) -> str:
    value = data.get(key) if isinstance(data, dict) else None
    if not isinstance(value, str) or not value:
        raise AuthError(
            f"Malformed {step} response: missing '{key}'",
            detail=data,
        )
    return value


def authenticate(client: QuillsClient, identity: Identity) -> str:
    """Run the challenge handshake and return the bearer token."""

    try:
        nonce_resp = client.get_nonce(identity.address)
        nonce = _require_str(nonce_resp, "nonce", "nonce")
        logger.debug("Received nonce for %s", identity.address)

        signature = sign_nonce(identity, nonce)

        login_resp = client.login(identity.address, signature)
        return _require_str(login_resp, "token", "login")
    except QuillsAPIError as e:
        raise AuthError(str(e), detail=e.body) from e
    except requests.RequestException as e:
        raise AuthError(f"Request failed: {e}") from e


def token_preview(token: Optional[str], length: int = 10) -> str:
    """Short, log-safe rendition of a bearer token."""
    if not token:
        return ""
    return token[:length] + "..."


__all__ = ["AuthError", "authenticate", "token_preview"]
