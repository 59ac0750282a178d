import pytest
import requests

from auth.errors import AuthInvalid
from fakes import FakeCredentials, FakeResponse
from providers.youtube.api_manager import (
    QuotaExhaustedError,
    ResilientExecutor,
    TerminalRequestError,
    TransientRequestError,
    raise_for_response,
    should_retry,
)


def _executor(credentials=None, sleeps=None, **kw):
    sleeps = sleeps if sleeps is not None else []
    return ResilientExecutor(
        credentials or FakeCredentials(),
        sleep=sleeps.append,
        backoff_base_sec=1.0,
        max_attempts=kw.pop("max_attempts", 3),
        **kw,
    )


class Flaky:
    def __init__(self, failures, result="done"):
        self.failures = list(failures)
        self.result = result
        self.tokens = []

    def __call__(self, token):
        self.tokens.append(token)
        if self.failures:
            raise self.failures.pop(0)
        return self.result


# ------------------------------------------------------------
# Retry behaviour
# ------------------------------------------------------------


def test_success_first_try_no_sleep():
    sleeps = []
    op = Flaky([])

    assert _executor(sleeps=sleeps).execute(op, "op") == "done"
    assert sleeps == []
    assert op.tokens == ["tok"]


def test_transient_errors_exhaust_with_exponential_backoff():
    sleeps = []
    err = TransientRequestError("HTTP 503", status=503)
    op = Flaky([err, err, err])

    with pytest.raises(TransientRequestError) as exc:
        _executor(sleeps=sleeps).execute(op, "search.list")

    assert exc.value is err
    assert len(op.tokens) == 3
    assert sleeps == [1.0, 2.0]


def test_transient_then_success():
    sleeps = []
    op = Flaky([TransientRequestError("HTTP 429", status=429)], result=42)

    assert _executor(sleeps=sleeps).execute(op, "op") == 42
    assert sleeps == [1.0]


def test_connection_error_is_retried():
    sleeps = []
    op = Flaky([requests.ConnectionError("reset"), requests.Timeout("slow")])

    assert _executor(sleeps=sleeps).execute(op, "op") == "done"
    assert sleeps == [1.0, 2.0]


def test_terminal_error_fails_immediately():
    sleeps = []
    op = Flaky([TerminalRequestError("HTTP 404", status=404)])

    with pytest.raises(TerminalRequestError):
        _executor(sleeps=sleeps).execute(op, "op")

    assert len(op.tokens) == 1
    assert sleeps == []


def test_unexpected_exception_is_not_retried():
    op = Flaky([KeyError("shape")])

    with pytest.raises(KeyError):
        _executor().execute(op, "op")

    assert len(op.tokens) == 1


def test_token_fetched_every_attempt():
    creds = FakeCredentials()
    op = Flaky([TransientRequestError("HTTP 500", status=500)])

    _executor(credentials=creds).execute(op, "op")

    assert creds.calls == 2


def test_auth_error_propagates_without_retry():
    sleeps = []
    creds = FakeCredentials(error=AuthInvalid("reauth"))
    op = Flaky([])

    with pytest.raises(AuthInvalid):
        _executor(credentials=creds, sleeps=sleeps).execute(op, "op")

    assert op.tokens == []
    assert sleeps == []


def test_single_attempt_reraises_without_sleep():
    sleeps = []
    err = TransientRequestError("HTTP 500", status=500)
    op = Flaky([err])

    with pytest.raises(TransientRequestError) as exc:
        _executor(sleeps=sleeps, max_attempts=1).execute(op, "op")

    assert exc.value is err
    assert len(op.tokens) == 1
    assert sleeps == []


def test_max_attempts_must_be_positive():
    with pytest.raises(ValueError):
        _executor(max_attempts=0)


def test_backoff_delay_doubles():
    ex = _executor()

    assert [ex.backoff_delay(i) for i in range(4)] == [1.0, 2.0, 4.0, 8.0]


# ------------------------------------------------------------
# HTTP translation
# ------------------------------------------------------------


def test_raise_for_response_ok_is_silent():
    raise_for_response(FakeResponse(200, {"items": []}), "op")
    raise_for_response(FakeResponse(204), "op")


@pytest.mark.parametrize("status", [429, 500, 502, 503])
def test_raise_for_response_transient(status):
    with pytest.raises(TransientRequestError) as exc:
        raise_for_response(FakeResponse(status, {"error": {"message": "busy"}}), "op")

    assert exc.value.status == status
    assert should_retry(exc.value)


@pytest.mark.parametrize("status", [400, 401, 404])
def test_raise_for_response_terminal(status):
    with pytest.raises(TerminalRequestError) as exc:
        raise_for_response(FakeResponse(status, {"error": {"message": "nope"}}), "op")

    assert not should_retry(exc.value)
    assert "nope" in str(exc.value)


def test_raise_for_response_quota():
    payload = {
        "error": {
            "message": "quota",
            "errors": [{"reason": "quotaExceeded"}],
        }
    }

    with pytest.raises(QuotaExhaustedError):
        raise_for_response(FakeResponse(403, payload), "op")


def test_raise_for_response_forbidden_without_quota_reason():
    payload = {"error": {"message": "forbidden", "errors": [{"reason": "forbidden"}]}}

    with pytest.raises(TerminalRequestError) as exc:
        raise_for_response(FakeResponse(403, payload), "op")

    assert not isinstance(exc.value, QuotaExhaustedError)


def test_raise_for_response_non_json_body():
    with pytest.raises(TransientRequestError) as exc:
        raise_for_response(FakeResponse(502, text="<html>Bad Gateway</html>"), "op")

    assert "Bad Gateway" in str(exc.value)
