"""
Tests for the one-shot helper scripts.
"""
from unittest.mock import patch

import pytest

import actions.send_message as send_message
import core.authorize as authorize
from core.broadcaster import SendError
from core.quills_auth import AuthError
from tests.conftest import TEST_API_BASE, TEST_PRIVATE_KEY


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setattr(send_message, "load_dotenv", lambda: None)
    monkeypatch.setattr(authorize, "load_dotenv", lambda: None)
    monkeypatch.setenv("PRIVATE_KEY", TEST_PRIVATE_KEY)
    monkeypatch.setenv("CHAT_API_URL", TEST_API_BASE)
    monkeypatch.delenv("MESSAGE_TEXT", raising=False)
    monkeypatch.delenv("QUILLS_TIMEOUT_S", raising=False)


class TestSendMessage:
    """Tests for actions.send_message."""

    def test_missing_env_returns_2(self, env, monkeypatch):
        monkeypatch.delenv("CHAT_API_URL")
        assert send_message.main([]) == 2

    def test_sends_once(self, env, capsys):
        with patch.object(send_message, "authenticate", return_value="tok"), \
                patch.object(send_message.Broadcaster, "send_once",
                             return_value={"status": "ok"}) as send_once:
            assert send_message.main(["--message", "gm"]) == 0
        send_once.assert_called_once_with(1)
        assert "Message sent: ok" in capsys.readouterr().out

    def test_auth_failure_returns_1(self, env):
        with patch.object(send_message, "authenticate",
                          side_effect=AuthError("denied")):
            assert send_message.main([]) == 1

    def test_bad_timeout_env_returns_2(self, env, monkeypatch, capsys):
        monkeypatch.setenv("QUILLS_TIMEOUT_S", "soon")
        with patch.object(send_message, "authenticate") as auth:
            assert send_message.main([]) == 2
        auth.assert_not_called()
        assert "QUILLS_TIMEOUT_S" in capsys.readouterr().err

    def test_send_failure_returns_1(self, env):
        with patch.object(send_message, "authenticate", return_value="tok"), \
                patch.object(send_message.Broadcaster, "send_once",
                             side_effect=SendError("down")):
            assert send_message.main([]) == 1


class TestAuthorize:
    """Tests for core.authorize."""

    def test_prints_preview(self, env, capsys):
        with patch.object(authorize, "authenticate", return_value="abcdefghijklmnop"):
            assert authorize.main([]) == 0
        out = capsys.readouterr().out
        assert "abcdefghij..." in out
        assert "klmnop" not in out

    def test_auth_failure_returns_1(self, env):
        with patch.object(authorize, "authenticate",
                          side_effect=AuthError("denied")):
            assert authorize.main([]) == 1

    def test_bad_key_returns_2(self, env, monkeypatch):
        monkeypatch.setenv("PRIVATE_KEY", "nothex")
        assert authorize.main([]) == 2

    def test_bad_timeout_env_returns_2(self, env, monkeypatch, capsys):
        monkeypatch.setenv("QUILLS_TIMEOUT_S", "soon")
        with patch.object(authorize, "authenticate") as auth:
            assert authorize.main([]) == 2
        auth.assert_not_called()
        assert "QUILLS_TIMEOUT_S" in capsys.readouterr().err

    def test_self_check_runs_before_login(self, env):
        with patch.object(authorize, "recover_signer",
                          wraps=authorize.recover_signer) as recover, \
                patch.object(authorize, "authenticate", return_value="tok"):
            assert authorize.main([]) == 0
        recover.assert_called_once()

    def test_self_check_mismatch_returns_2(self, env, capsys):
        other = "0x" + "00" * 20
        with patch.object(authorize, "recover_signer", return_value=other), \
                patch.object(authorize, "authenticate") as auth:
            assert authorize.main([]) == 2
        auth.assert_not_called()
        assert "self-check failed" in capsys.readouterr().err
