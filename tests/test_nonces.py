"""Tests for signed admin form tokens."""

from __future__ import annotations
from authress_sso_login.nonces import (
    CLEAR_ERROR_LOG_ACTION,
    NONCE_LIFETIME_SECONDS,
    NonceManager,
)


class _Clock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_token_verifies_for_its_action_and_subject() -> None:
    nonces = NonceManager("secret", clock=_Clock(1_700_000_000))

    token = nonces.create(CLEAR_ERROR_LOG_ACTION, "session-a")

    assert token.startswith("1700000000.")
    assert nonces.verify(token, CLEAR_ERROR_LOG_ACTION, "session-a") is True
    assert nonces.verify(token, CLEAR_ERROR_LOG_ACTION, "session-b") is False
    assert nonces.verify(token, "other_action", "session-a") is False


def test_token_from_another_secret_is_rejected() -> None:
    clock = _Clock(1_700_000_000)
    token = NonceManager("other", clock=clock).create(CLEAR_ERROR_LOG_ACTION)

    assert NonceManager("secret", clock=clock).verify(
        token, CLEAR_ERROR_LOG_ACTION
    ) is False


def test_token_expires() -> None:
    clock = _Clock(1_700_000_000)
    nonces = NonceManager("secret", clock=clock)
    token = nonces.create(CLEAR_ERROR_LOG_ACTION)

    clock.now += NONCE_LIFETIME_SECONDS
    assert nonces.verify(token, CLEAR_ERROR_LOG_ACTION) is True

    clock.now += 1
    assert nonces.verify(token, CLEAR_ERROR_LOG_ACTION) is False


def test_malformed_tokens_are_rejected() -> None:
    nonces = NonceManager("secret", clock=_Clock(1_700_000_000))

    for token in (None, "", "abc", "1700000000", "1700000000.", "x.y"):
        assert nonces.verify(token, CLEAR_ERROR_LOG_ACTION) is False


def test_future_tokens_are_rejected() -> None:
    clock = _Clock(1_700_000_100)
    token = NonceManager("secret", clock=clock).create(CLEAR_ERROR_LOG_ACTION)

    clock.now = 1_700_000_000
    assert NonceManager("secret", clock=clock).verify(
        token, CLEAR_ERROR_LOG_ACTION
    ) is False
