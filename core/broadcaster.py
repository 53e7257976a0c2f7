#!/usr/bin/env python3
"""Periodic message sender for the Quills chat daemon.

Each tick fires on a fixed interval boundary and runs its send on its own
thread. Ticks are never awaited against each other: a slow server can have
several sends in flight at once, and their log lines may come out of order.
A failed send is logged and the timer keeps going.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict

import requests

from core.quills_client import QuillsAPIError, QuillsClient


logger = logging.getLogger("quills-daemon")


class SendError(RuntimeError):
    """Raised when a single tick fails to deliver the message."""

    def __init__(self, message: str, detail: Any = None):
        super().__init__(message)
        self.detail = detail if detail is not None else message


class Broadcaster:
    """Send a fixed message every `interval_ms` using one bearer token."""

    def __init__(
        self,
        client: QuillsClient,
        credential: str,
        message: str,
        interval_ms: int = 5000,
    ):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.client = client
        self.credential = credential
        self.message = message
        self.interval_ms = interval_ms
        self.running = False

    @property
    def interval_s(self) -> float:
        return self.interval_ms / 1000.0

    def send_once(self, tick: int) -> Dict[str, Any]:
        """Send the message once; raises SendError on any failure."""
        try:
            return self.client.send_message(self.credential, self.message)
        except QuillsAPIError as e:
            raise SendError(str(e), detail=e.body) from e
        except requests.RequestException as e:
            raise SendError(f"Tick {tick}: {e}") from e

    def _run_tick(self, tick: int) -> None:
        try:
            resp = self.send_once(tick)
        except SendError as e:
            logger.error(f"Error sending message: {e.detail}")
            return
        sent_at = time.strftime("%H:%M:%S")
        logger.info(f"Sent message at {sent_at}: {resp.get('status')}")

    def _fire(self, tick: int) -> None:
        worker = threading.Thread(
            target=self._run_tick,
            args=(tick,),
            name=f"quills-tick-{tick}",
            daemon=True,
        )
        worker.start()

    def start(self) -> None:
        """Run the timer until stop() or Ctrl-C. Never re-authenticates."""
        logger.info(
            f'Starting auto chat: sending "{self.message}" '
            f"every {self.interval_ms}ms"
        )
        self.running = True
        tick = 0
        next_at = time.monotonic() + self.interval_s

        try:
            while self.running:
                delay = next_at - time.monotonic()
                if delay > 0:
                    time.sleep(delay)
                if not self.running:
                    break

                tick += 1
                self._fire(tick)

                # Missed boundaries (e.g. after a suspend) are skipped, not replayed.
                next_at += self.interval_s
                now = time.monotonic()
                while next_at <= now:
                    next_at += self.interval_s
        except KeyboardInterrupt:
            logger.info("Received interrupt signal, shutting down...")
            self.running = False

    def stop(self) -> None:
        """Stop scheduling new ticks; in-flight sends finish on their own."""
        logger.info("Stopping broadcaster...")
        self.running = False


__all__ = ["Broadcaster", "SendError"]
