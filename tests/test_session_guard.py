import pytest
from fastapi import Response

from memoria.session.guard import PasswordCheck, SessionContext, SessionGuard, persist_session
from memoria.settings import Settings


def make_guard(secret="lucasnatalia", cookies=None):
    return SessionGuard(secret, SessionContext(cookies))


# ------------------------------
# check_password
# ------------------------------

def test_correct_password_ok():
    assert make_guard().check_password("lucasnatalia") == PasswordCheck(ok=True)


@pytest.mark.parametrize("submitted", ["x", "", "LUCASNATALIA", "lucasnatalia ", None, 123, ["lucasnatalia"]])
def test_incorrect_password_rejected(submitted):
    result = make_guard().check_password(submitted)
    assert result.ok is False
    assert result.reason == "Senha incorreta"


@pytest.mark.parametrize("secret", ["", None])
def test_unconfigured_secret_fails_closed(secret):
    guard = make_guard(secret=secret)
    for submitted in ["", "lucasnatalia", None]:
        result = guard.check_password(submitted)
        assert result.ok is False
        assert result.reason == "Server password not set"


def test_non_ascii_password():
    guard = make_guard(secret="saudade-ç")
    assert guard.check_password("saudade-ç").ok
    assert not guard.check_password("saudade-c").ok


# ------------------------------
# session flag
# ------------------------------

def test_session_reads_flag():
    assert make_guard(cookies={"memoria_auth": "1"}).is_session_active()
    assert not make_guard(cookies={"memoria_auth": "0"}).is_session_active()
    assert not make_guard(cookies={}).is_session_active()


def test_login_wrong_password_stays_unauthenticated():
    guard = make_guard()
    guard.login("x")
    assert not guard.is_session_active()
    assert not guard.context.changed


def test_login_then_logout():
    guard = make_guard()
    assert guard.login("lucasnatalia").ok
    assert guard.is_session_active()
    guard.end_session()
    assert not guard.is_session_active()


def test_persist_session_sets_cookie():
    guard = make_guard()
    guard.start_session()
    response = Response()
    persist_session(guard.context, response, Settings())
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("memoria_auth=1")
    assert "HttpOnly" in cookie


def test_persist_session_clears_cookie():
    guard = make_guard(cookies={"memoria_auth": "1"})
    guard.end_session()
    response = Response()
    persist_session(guard.context, response, Settings())
    assert "Max-Age=0" in response.headers["set-cookie"]


def test_persist_session_unchanged_writes_nothing():
    guard = make_guard(cookies={"memoria_auth": "1"})
    guard.start_session()
    response = Response()
    persist_session(guard.context, response, Settings())
    assert "set-cookie" not in response.headers
