"""Tests for contextvars-based logging context."""

import threading

import pytest

from app.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    new_request_id,
    pop_log_context,
    push_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_log_context()
    yield
    clear_log_context()


def test_empty_context():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(request_id="abc123", mail_kind="congratulations")
    assert get_log_context() == {"request_id": "abc123", "mail_kind": "congratulations"}

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    token1 = push_log_context(request_id="abc123")
    token2 = push_log_context(user_id="a***@example.com")

    assert get_log_context() == {"request_id": "abc123", "user_id": "a***@example.com"}

    pop_log_context(token2)
    assert get_log_context() == {"request_id": "abc123"}
    pop_log_context(token1)


def test_context_override():
    token1 = push_log_context(mail_kind="verify-details")
    token2 = push_log_context(mail_kind="interview-invite")
    assert get_log_context()["mail_kind"] == "interview-invite"

    pop_log_context(token2)
    assert get_log_context()["mail_kind"] == "verify-details"
    pop_log_context(token1)


def test_get_returns_a_copy():
    with log_context(request_id="abc123"):
        get_log_context()["request_id"] = "mutated"
        assert get_log_context() == {"request_id": "abc123"}


def test_context_manager_restores_on_exception():
    with pytest.raises(RuntimeError):
        with log_context(request_id="abc123"):
            raise RuntimeError("boom")

    assert get_log_context() == {}


def test_context_manager_nested():
    with log_context(request_id="abc123"):
        with log_context(mail_kind="manager-welcome"):
            assert get_log_context() == {"request_id": "abc123", "mail_kind": "manager-welcome"}
        assert get_log_context() == {"request_id": "abc123"}


def test_threads_do_not_share_context():
    seen = {}

    def worker():
        seen["worker"] = get_log_context()

    with log_context(request_id="main-thread"):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

    assert seen["worker"] == {}


def test_new_request_id_is_short_and_unique():
    ids = {new_request_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(len(i) == 12 for i in ids)
