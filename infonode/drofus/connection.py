"""
dRofus connection settings and credentials.

Resolution order for server / database / project:
    1. Config overrides (drofus_server, drofus_database, drofus_project)
    2. Environment (DROFUS_SERVER, DROFUS_DATABASE, DROFUS_PROJECT)
    3. Windows registry, HKCU\\Software\\dRofus\\Revit (Server, Database, Project)

Credentials come from the OS credential store through keyring
(Windows Credential Manager on Revit machines), service "dRofus:<host>".
DROFUS_USERNAME / DROFUS_PASSWORD override the store.
"""

import os
from urllib.parse import urlparse

import keyring
from keyring.errors import KeyringError

from ..errors import ConnectionConfigError, CredentialError

try:
    import winreg
except ImportError:
    # Not on Windows (CI / pytest): registry lookups resolve to nothing
    winreg = None

REGISTRY_KEY = r"Software\dRofus\Revit"
DEFAULT_SERVER = "https://api-no.drofus.com"

_KEYS = (
    # (attr, config attr, env var, registry value)
    ("base_url", "drofus_server", "DROFUS_SERVER", "Server"),
    ("database", "drofus_database", "DROFUS_DATABASE", "Database"),
    ("project_id", "drofus_project", "DROFUS_PROJECT", "Project"),
)


def _log(level, msg):
    print("[{0}] infonode.drofus: {1}".format(level, msg))


class ConnectionSettings:
    __slots__ = ("base_url", "database", "project_id")

    def __init__(self, base_url, database, project_id):
        self.base_url = normalize_server(base_url)
        self.database = str(database)
        self.project_id = str(project_id)

    @property
    def host(self):
        return urlparse(self.base_url).netloc

    @property
    def occurrences_url(self):
        return "{0}/api/{1}/{2}/occurrences".format(self.base_url, self.database, self.project_id)

    def __repr__(self):
        return "ConnectionSettings({0}, db={1}, project={2})".format(self.base_url, self.database, self.project_id)


class Credentials:
    __slots__ = ("username", "password")

    def __init__(self, username, password):
        self.username = username
        self.password = password

    def as_auth(self):
        return (self.username, self.password)

    def __repr__(self):
        # Never render the password
        return "Credentials(username={0!r})".format(self.username)


def normalize_server(server):
    """Accept "api-no.drofus.com" or a full URL; return "https://host" without trailing slash."""
    s = str(server).strip().rstrip("/")
    if "://" not in s:
        s = "https://" + s
    return s


def read_registry_value(value_name, key_path=REGISTRY_KEY):
    """Read a string value under HKEY_CURRENT_USER; None when absent or off Windows."""
    if winreg is None:
        return None
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, key_path) as key:
            value, _kind = winreg.QueryValueEx(key, value_name)
    except OSError:
        return None
    if value is None or not str(value).strip():
        return None
    return str(value).strip()


def resolve_connection_settings(cfg, environ=None, registry=None):
    """Resolve server / database / project.

    Args:
        cfg: Config
        environ: mapping for env lookups (default: os.environ)
        registry: callable(value_name) -> str|None (default: read_registry_value)

    Raises:
        ConnectionConfigError listing every key that could not be resolved
        (the server falls back to DEFAULT_SERVER).
    """
    environ = os.environ if environ is None else environ
    registry = read_registry_value if registry is None else registry

    resolved = {}
    missing = []
    for attr, cfg_attr, env_var, reg_value in _KEYS:
        value = getattr(cfg, cfg_attr, None)
        origin = "config"
        if value is None or not str(value).strip():
            value = environ.get(env_var)
            origin = "env"
        if value is None or not str(value).strip():
            value = registry(reg_value)
            origin = "registry"
        if (value is None or not str(value).strip()) and attr == "base_url":
            value = DEFAULT_SERVER
            origin = "default"
        if value is None or not str(value).strip():
            missing.append(env_var)
            continue
        resolved[attr] = str(value).strip()
        _log("DEBUG", "{0} from {1}".format(attr, origin))

    if missing:
        raise ConnectionConfigError(missing)
    return ConnectionSettings(**resolved)


def credential_service(settings):
    return "dRofus:{0}".format(settings.host)


def resolve_credentials(settings, environ=None, backend=None):
    """Look up the username / password for the dRofus server.

    Args:
        settings: ConnectionSettings
        environ: mapping for env overrides (default: os.environ)
        backend: keyring-like module/object (default: keyring)

    Raises:
        CredentialError when nothing is stored for the server.
    """
    environ = os.environ if environ is None else environ
    backend = keyring if backend is None else backend
    service = credential_service(settings)

    username = environ.get("DROFUS_USERNAME")
    password = environ.get("DROFUS_PASSWORD")
    if username and password:
        return Credentials(username, password)

    try:
        if username:
            password = backend.get_password(service, username)
        else:
            cred = backend.get_credential(service, None)
            if cred is not None:
                username, password = cred.username, cred.password
    except KeyringError as e:
        raise CredentialError("Credential store unavailable for {0}: {1}".format(service, e)) from e

    if not username or password is None:
        raise CredentialError(
            "No dRofus credentials stored for {0}; log in with the dRofus plugin "
            "or store them with keyring (service '{0}')".format(service)
        )
    return Credentials(username, password)
