# tests/test_client.py

import pytest
import requests
from tenacity import wait_none

from infonode.config import Config
from infonode.drofus.client import DrofusClient, create_client
from infonode.drofus.connection import ConnectionSettings, Credentials
from infonode.drofus.query import Comparison, FilterItem, Query
from infonode.errors import DrofusApiError


class _FakeResponse(object):
    def __init__(self, status_code=200, payload=None, text="", bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload


class _FakeSession(object):
    """Replays queued responses / exceptions and records calls."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.headers = {}
        self.auth = None
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r

    def close(self):
        self.closed = True


def _client(session, max_retries=3):
    settings = ConnectionSettings("https://api-no.drofus.com", "db", "01")
    return DrofusClient(settings, Credentials("u", "p"), timeout=5, max_retries=max_retries,
                        session=session, wait=wait_none())


def _query():
    return Query.list().select("id").filter(FilterItem("m", Comparison.IN, ["A"]))


def test_get_occurrences_sends_auth_params_and_returns_rows():
    session = _FakeSession(_FakeResponse(200, [{"id": 1}, {"id": 2}]))
    client = _client(session)

    rows = client.get_occurrences(_query())

    assert rows == [{"id": 1}, {"id": 2}]
    url, params, timeout = session.calls[0]
    assert url == "https://api-no.drofus.com/api/db/01/occurrences"
    assert params == {"$select": "id", "$filter": "m in ('A')"}
    assert timeout == 5.0
    assert session.auth == ("u", "p")
    assert session.headers["Accept"] == "application/json"


def test_empty_query_skips_request():
    session = _FakeSession()
    q = Query.list().filter(FilterItem("m", Comparison.IN, []))
    assert _client(session).get_occurrences(q) == []
    assert session.calls == []


def test_transient_failures_are_retried():
    session = _FakeSession(
        requests.ConnectionError("reset"),
        _FakeResponse(503),
        _FakeResponse(200, [{"id": 1}]),
    )
    assert _client(session).get_occurrences(_query()) == [{"id": 1}]
    assert len(session.calls) == 3


def test_retries_exhausted_raise_api_error():
    session = _FakeSession(_FakeResponse(429), _FakeResponse(429))
    with pytest.raises(DrofusApiError) as ei:
        _client(session, max_retries=2).get_occurrences(_query())
    assert ei.value.status_code == 429
    assert len(session.calls) == 2


def test_timeouts_exhausted_raise_api_error():
    session = _FakeSession(requests.Timeout("slow"))
    with pytest.raises(DrofusApiError, match="Could not reach"):
        _client(session, max_retries=1).get_occurrences(_query())


def test_client_errors_are_not_retried():
    session = _FakeSession(_FakeResponse(401, text="Unauthorized"))
    with pytest.raises(DrofusApiError) as ei:
        _client(session).get_occurrences(_query())
    assert ei.value.status_code == 401
    assert len(session.calls) == 1


def test_non_list_and_non_json_payloads_raise():
    with pytest.raises(DrofusApiError, match="JSON list"):
        _client(_FakeSession(_FakeResponse(200, {"error": "x"}))).get_occurrences(_query())
    with pytest.raises(DrofusApiError, match="non-JSON"):
        _client(_FakeSession(_FakeResponse(200, bad_json=True))).get_occurrences(_query())


def test_non_object_entries_are_dropped():
    session = _FakeSession(_FakeResponse(200, [{"id": 1}, 5, None]))
    assert _client(session).get_occurrences(_query()) == [{"id": 1}]


def test_create_client_resolves_settings_and_credentials():
    class _Keyring(object):
        def get_credential(self, service, username):
            raise AssertionError("env credentials should be used")

    cfg = Config(drofus_database="db", drofus_project="7", request_timeout_s=12, max_retries=2)
    session = _FakeSession()
    client = create_client(
        cfg,
        environ={"DROFUS_USERNAME": "u", "DROFUS_PASSWORD": "p"},
        registry=lambda name: None,
        keyring_backend=_Keyring(),
        session=session,
    )

    assert client.settings.occurrences_url.endswith("/api/db/7/occurrences")
    assert client.timeout == 12.0
    assert client.max_retries == 2
    client.close()
    assert session.closed


@pytest.mark.parametrize(
    "exc",
    [
        requests.exceptions.ChunkedEncodingError("broken body"),
        requests.exceptions.TooManyRedirects("loop"),
        requests.exceptions.InvalidURL("bad host"),
    ],
)
def test_other_request_errors_raise_api_error(exc):
    session = _FakeSession(exc)
    with pytest.raises(DrofusApiError, match="request failed"):
        _client(session).get_occurrences(_query())
    assert len(session.calls) == 1
