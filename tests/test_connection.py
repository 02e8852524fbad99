# tests/test_connection.py

import types

import pytest
from keyring.errors import KeyringError

from infonode.config import Config
from infonode.drofus.connection import (
    DEFAULT_SERVER,
    ConnectionSettings,
    credential_service,
    normalize_server,
    resolve_connection_settings,
    resolve_credentials,
)
from infonode.errors import ConnectionConfigError, CredentialError


def _no_registry(name):
    return None


class _FakeKeyring(object):
    def __init__(self, creds=None, fail=False):
        self.creds = dict(creds or {})
        self.fail = fail
        self.calls = []

    def get_credential(self, service, username):
        self.calls.append(("get_credential", service, username))
        if self.fail:
            raise KeyringError("locked")
        entry = self.creds.get(service)
        if entry is None:
            return None
        return types.SimpleNamespace(username=entry[0], password=entry[1])

    def get_password(self, service, username):
        self.calls.append(("get_password", service, username))
        entry = self.creds.get(service)
        if entry is None or entry[0] != username:
            return None
        return entry[1]


def test_normalize_server():
    assert normalize_server("api-no.drofus.com/") == "https://api-no.drofus.com"
    assert normalize_server("http://localhost:8080") == "http://localhost:8080"


def test_config_beats_env_beats_registry():
    cfg = Config(drofus_database="cfgdb")
    env = {"DROFUS_DATABASE": "envdb", "DROFUS_PROJECT": "01"}
    registry = {"Server": "reg.drofus.com", "Project": "99"}.get

    s = resolve_connection_settings(cfg, environ=env, registry=registry)

    assert s.database == "cfgdb"
    assert s.project_id == "01"
    assert s.base_url == "https://reg.drofus.com"
    assert s.occurrences_url == "https://reg.drofus.com/api/cfgdb/01/occurrences"


def test_server_falls_back_to_default():
    s = resolve_connection_settings(
        Config(drofus_database="db", drofus_project="1"), environ={}, registry=_no_registry
    )
    assert s.base_url == DEFAULT_SERVER


def test_missing_keys_are_all_reported():
    with pytest.raises(ConnectionConfigError) as ei:
        resolve_connection_settings(Config(), environ={}, registry=_no_registry)
    assert ei.value.missing == ["DROFUS_DATABASE", "DROFUS_PROJECT"]


def test_credentials_from_store():
    settings = ConnectionSettings("https://api-no.drofus.com", "db", "1")
    backend = _FakeKeyring({"dRofus:api-no.drofus.com": ("alice", "pw")})

    creds = resolve_credentials(settings, environ={}, backend=backend)

    assert creds.as_auth() == ("alice", "pw")
    assert "pw" not in repr(creds)
    assert credential_service(settings) == "dRofus:api-no.drofus.com"


def test_env_username_looks_up_password_only():
    settings = ConnectionSettings("api-no.drofus.com", "db", "1")
    backend = _FakeKeyring({"dRofus:api-no.drofus.com": ("bob", "secret")})

    creds = resolve_credentials(settings, environ={"DROFUS_USERNAME": "bob"}, backend=backend)

    assert creds.password == "secret"
    assert backend.calls == [("get_password", "dRofus:api-no.drofus.com", "bob")]


def test_env_pair_skips_store():
    settings = ConnectionSettings("api-no.drofus.com", "db", "1")
    backend = _FakeKeyring(fail=True)
    creds = resolve_credentials(
        settings, environ={"DROFUS_USERNAME": "u", "DROFUS_PASSWORD": "p"}, backend=backend
    )
    assert creds.as_auth() == ("u", "p")
    assert backend.calls == []


def test_missing_or_unavailable_credentials_raise():
    settings = ConnectionSettings("api-no.drofus.com", "db", "1")
    with pytest.raises(CredentialError):
        resolve_credentials(settings, environ={}, backend=_FakeKeyring())
    with pytest.raises(CredentialError, match="unavailable"):
        resolve_credentials(settings, environ={}, backend=_FakeKeyring(fail=True))
