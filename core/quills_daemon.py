#!/usr/bin/env python3
"""
Quills Daemon - authenticate a wallet against the Quills chat API and keep
posting a fixed message on a timer.

Configuration comes from the environment (a `.env` file is loaded first):
- PRIVATE_KEY (required)
- CHAT_API_URL (required)
- RPC_URL (optional, wallet configuration only)
- MESSAGE_INTERVAL_MS (optional, default: 5000)
- MESSAGE_TEXT (optional, default: "Hello from bot!")
- QUILLS_TIMEOUT_S (optional, default: no timeout)
- QUILLS_LOG_FILE (optional, default: quills_daemon.log)
"""

import os
import sys
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from core.broadcaster import Broadcaster
from core.quills_auth import AuthError, authenticate, token_preview
from core.quills_client import QuillsClient
from core.quills_identity import IdentityError, load_identity


DEFAULT_INTERVAL_MS = 5000
DEFAULT_MESSAGE_TEXT = "Hello from bot!"
DEFAULT_LOG_FILE = "quills_daemon.log"

logger = logging.getLogger('quills-daemon')


class ConfigError(ValueError):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class DaemonConfig:
    private_key: str = field(repr=False)
    chat_api_url: str
    rpc_url: Optional[str] = None
    interval_ms: int = DEFAULT_INTERVAL_MS
    message_text: str = DEFAULT_MESSAGE_TEXT
    timeout_s: Optional[float] = None
    log_file: str = DEFAULT_LOG_FILE


def _interval_ms(raw):
    # Non-numeric, zero or negative values fall back to the default.
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return DEFAULT_INTERVAL_MS
    return value if value > 0 else DEFAULT_INTERVAL_MS


def parse_timeout_s(raw):
    """Parse a QUILLS_TIMEOUT_S value; blank means no timeout."""
    if raw is None or not str(raw).strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(
            f"QUILLS_TIMEOUT_S must be a number of seconds, got {raw!r}"
        ) from None
    return value if value > 0 else None


def load_config(environ: Optional[Mapping[str, str]] = None) -> DaemonConfig:
    """Read daemon settings from `environ` (default: os.environ)."""
    env = os.environ if environ is None else environ

    private_key = (env.get('PRIVATE_KEY') or '').strip()
    chat_api_url = (env.get('CHAT_API_URL') or '').strip()
    if not private_key:
        raise ConfigError("PRIVATE_KEY not set in .env file")
    if not chat_api_url:
        raise ConfigError("CHAT_API_URL not set in .env file")

    return DaemonConfig(
        private_key=private_key,
        chat_api_url=chat_api_url,
        rpc_url=env.get('RPC_URL') or None,
        interval_ms=_interval_ms(env.get('MESSAGE_INTERVAL_MS')),
        message_text=env.get('MESSAGE_TEXT') or DEFAULT_MESSAGE_TEXT,
        timeout_s=parse_timeout_s(env.get('QUILLS_TIMEOUT_S')),
        log_file=env.get('QUILLS_LOG_FILE') or DEFAULT_LOG_FILE,
    )


def _configure_logging(log_file):
    # Prefer UTF-8 on Windows consoles; message text may contain emoji.
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, 'reconfigure'):
            stream.reconfigure(encoding='utf-8', errors='replace')

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )


def main():
    """Main entry point for the daemon."""
    # Load environment variables
    load_dotenv()

    try:
        config = load_config()
    except ValueError as e:
        _configure_logging(os.getenv('QUILLS_LOG_FILE') or DEFAULT_LOG_FILE)
        logger.error(str(e))
        sys.exit(1)

    _configure_logging(config.log_file)

    try:
        identity = load_identity(config.private_key, rpc_url=config.rpc_url)
    except IdentityError as e:
        logger.error(f"Failed to load wallet: {e}")
        sys.exit(1)

    client = QuillsClient(config.chat_api_url, timeout_s=config.timeout_s)

    logger.info(f"Authenticating wallet: {identity.address}")
    try:
        token = authenticate(client, identity)
    except AuthError as e:
        logger.error(f"Authentication failed: {e.detail}")
        sys.exit(1)
    logger.info(f"Authenticated! Token: {token_preview(token)}")

    broadcaster = Broadcaster(
        client,
        token,
        config.message_text,
        interval_ms=config.interval_ms,
    )
    broadcaster.start()


if __name__ == '__main__':
    main()
