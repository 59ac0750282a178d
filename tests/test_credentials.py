import threading
import time

import pytest
import requests

from auth.credentials import CredentialManager
from auth.errors import AuthFailed, AuthInvalid
from fakes import FakeResponse


class FakeTokenSession:
    def __init__(self, responses=None, error=None, gate=None):
        self.responses = list(responses or [])
        self.error = error
        self.gate = gate
        self.entered = threading.Event()
        self.calls = []
        self._lock = threading.Lock()

    def post(self, url, data=None, timeout=None):
        with self._lock:
            self.calls.append(data)
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return FakeResponse(200, {"access_token": "fresh", "expires_in": 3600})


class Clock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


def _manager(session, clock=None):
    return CredentialManager(
        "client-id",
        "client-secret",
        "refresh-token",
        session=session,
        clock=clock or Clock(),
    )


def test_refresh_then_cached():
    session = FakeTokenSession()
    mgr = _manager(session)

    assert mgr.get_valid_token() == "fresh"
    assert mgr.get_valid_token() == "fresh"

    assert len(session.calls) == 1
    assert session.calls[0]["grant_type"] == "refresh_token"
    assert session.calls[0]["refresh_token"] == "refresh-token"


def test_expiry_recorded_from_expires_in():
    clock = Clock(now=1_000)
    mgr = _manager(FakeTokenSession(), clock)

    mgr.get_valid_token()

    assert mgr.expires_at_ms == 1_000 + 3600 * 1000


def test_refreshes_inside_buffer_window():
    session = FakeTokenSession(
        responses=[
            FakeResponse(200, {"access_token": "first", "expires_in": 3600}),
            FakeResponse(200, {"access_token": "second", "expires_in": 3600}),
        ]
    )
    clock = Clock(now=0)
    mgr = _manager(session, clock)

    assert mgr.get_valid_token() == "first"

    # still outside the 5 minute buffer
    clock.now = 3_300_000 - 1
    assert mgr.get_valid_token() == "first"

    clock.now = 3_300_000
    assert mgr.get_valid_token() == "second"
    assert len(session.calls) == 2


@pytest.mark.parametrize("status", [400, 401])
def test_rejected_refresh_token_is_auth_invalid(status):
    session = FakeTokenSession(
        responses=[FakeResponse(status, {"error": "invalid_grant"})]
    )

    with pytest.raises(AuthInvalid) as exc:
        _manager(session).get_valid_token()

    assert "auth setup" in str(exc.value)


def test_server_error_is_auth_failed():
    session = FakeTokenSession(responses=[FakeResponse(500, {"error": "backend"})])

    with pytest.raises(AuthFailed):
        _manager(session).get_valid_token()


def test_network_error_is_auth_failed():
    session = FakeTokenSession(error=requests.ConnectionError("unreachable"))

    with pytest.raises(AuthFailed):
        _manager(session).get_valid_token()


def test_malformed_token_response_is_auth_failed():
    session = FakeTokenSession(responses=[FakeResponse(200, {"token_type": "Bearer"})])

    with pytest.raises(AuthFailed):
        _manager(session).get_valid_token()


def test_failed_refresh_does_not_block_next_attempt():
    session = FakeTokenSession(
        responses=[
            FakeResponse(500, {"error": "backend"}),
            FakeResponse(200, {"access_token": "recovered", "expires_in": 3600}),
        ]
    )
    mgr = _manager(session)

    with pytest.raises(AuthFailed):
        mgr.get_valid_token()

    assert mgr.get_valid_token() == "recovered"
    assert len(session.calls) == 2


def _wait_for_waiters(mgr, count, timeout=5.0):
    """Block until `count` callers are parked on the refresh in flight."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        inflight = mgr._inflight
        if inflight is not None and inflight.waiters >= count:
            return True
        time.sleep(0.01)
    return False


def test_concurrent_callers_share_one_refresh():
    gate = threading.Event()
    session = FakeTokenSession(gate=gate)
    mgr = _manager(session)

    results = []
    errors = []

    def worker():
        try:
            results.append(mgr.get_valid_token())
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()

    assert session.entered.wait(timeout=5)
    assert _wait_for_waiters(mgr, 4)
    gate.set()

    for t in threads:
        t.join(timeout=5)

    assert not errors
    assert results == ["fresh"] * 5
    assert len(session.calls) == 1
    assert mgr._inflight is None


def test_concurrent_callers_all_see_refresh_failure():
    gate = threading.Event()
    session = FakeTokenSession(
        responses=[FakeResponse(401, {"error": "invalid_grant"})], gate=gate
    )
    mgr = _manager(session)

    errors = []

    def worker():
        try:
            mgr.get_valid_token()
        except AuthInvalid as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(3)]
    for t in threads:
        t.start()

    assert session.entered.wait(timeout=5)
    assert _wait_for_waiters(mgr, 2)
    gate.set()

    for t in threads:
        t.join(timeout=5)

    assert len(errors) == 3
    assert len(session.calls) == 1
    assert mgr._inflight is None
