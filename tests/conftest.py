"""Shared fixtures for quills-daemon tests."""
import json
from unittest.mock import MagicMock

import pytest

from core.quills_client import QuillsClient
from core.quills_identity import load_identity


TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_API_BASE = "https://chat.example.test/api/chat"


def make_response(status_code=200, data=None, text=None, headers=None):
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.is_redirect = status_code in (301, 302, 303, 307, 308)
    resp.headers = headers or {}
    if data is None:
        resp.json.side_effect = ValueError("no json")
        resp.text = text or ""
    else:
        resp.json.return_value = data
        resp.text = text if text is not None else json.dumps(data)
    return resp


@pytest.fixture
def identity():
    return load_identity(TEST_PRIVATE_KEY)


@pytest.fixture
def client():
    c = QuillsClient(TEST_API_BASE)
    c.session = MagicMock()
    return c
