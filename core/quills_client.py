#!/usr/bin/env python3
"""Quills chat API client.

This module intentionally contains only chat API communication logic so it
can be reused by the daemon and standalone scripts under `actions/`.

Endpoints (JSON in/out):
- GET  {base}/nonce?address=...           -> {"nonce": "..."}
- POST {base}/login {address, signature}  -> {"token": "..."}
- POST {base}/send  {message} + Bearer    -> {"status": "..."}

No retries: every failure surfaces to the caller on the first attempt.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import requests


logger = logging.getLogger("quills-daemon")


class QuillsAPIError(RuntimeError):
    """Raised when the chat API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class QuillsClient:
    """Client for the Quills chat API."""

    def __init__(
        self,
        api_base: Optional[str] = None,
        timeout_s: Optional[float] = None,
    ):
        """Initialize the client.

        Args:
            api_base: Base URL of the chat API (default: env CHAT_API_URL)
            timeout_s: Request timeout in seconds; None waits indefinitely,
                which is the requests default
        """
        base = api_base or os.getenv("CHAT_API_URL")
        if not base:
            raise ValueError(
                "Chat API base URL is not configured. "
                "Set CHAT_API_URL or pass api_base=..."
            )
        self.api_base = base.rstrip("/")
        self.timeout_s = timeout_s

        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        **kwargs,
    ) -> Dict[str, Any]:
        """Internal request helper.

        A redirect can strip the Authorization header, so bearer requests
        refuse to follow one instead of silently going out unauthenticated.
        """
        method_u = method.upper()
        url = f"{self.api_base}/{path.lstrip('/')}"
        kwargs.setdefault("timeout", self.timeout_s)

        if token is not None:
            headers = dict(kwargs.pop("headers", None) or {})
            headers["Authorization"] = f"Bearer {token}"
            kwargs["headers"] = headers
            kwargs.setdefault("allow_redirects", False)

        try:
            response = self.session.request(method_u, url, **kwargs)
        except requests.RequestException as e:
            logger.debug("Request failed (%s %s): %s", method_u, url, e)
            raise

        if token is not None and response.is_redirect:
            location = response.headers.get("Location")
            raise QuillsAPIError(
                "Chat API request was redirected; refusing to follow "
                f"with Authorization header. URL={url} Location={location}",
                status_code=response.status_code,
            )

        data: Any
        try:
            data = response.json()
        except ValueError:
            data = None

        if not 200 <= response.status_code < 300:
            body = data if data is not None else response.text
            raise QuillsAPIError(
                f"Chat API error {response.status_code} for "
                f"{method_u} {url}: {body}",
                status_code=response.status_code,
                body=body,
            )

        if isinstance(data, dict):
            return data
        return {"data": data}

    def get_nonce(self, address: str) -> Dict[str, Any]:
        """Request a one-time challenge for `address`."""
        return self._request("GET", "/nonce", params={"address": address})

    def login(self, address: str, signature: str) -> Dict[str, Any]:
        """Exchange a signed challenge for a bearer token."""
        payload = {"address": address, "signature": signature}
        return self._request("POST", "/login", json=payload)

    def send_message(self, token: str, message: str) -> Dict[str, Any]:
        """Post a chat message (authenticated)."""
        return self._request(
            "POST",
            "/send",
            json={"message": message},
            token=token,
        )


__all__ = ["QuillsAPIError", "QuillsClient"]
