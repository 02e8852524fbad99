"""
dRofus REST client.

Thin wrapper over a requests.Session:
- HTTP basic auth, JSON in / out
- Transient failures (connection errors, timeouts, 429, 5xx) retried with
  exponential backoff via tenacity
- Everything else surfaces as DrofusApiError
"""

import requests
from tenacity import (
    Retrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import DrofusApiError
from .connection import resolve_connection_settings, resolve_credentials

_RETRY_STATUS = {429, 500, 502, 503, 504}


def _log(level, msg):
    print("[{0}] infonode.drofus: {1}".format(level, msg))


class TransientHttpError(Exception):
    """Raised internally for retryable HTTP statuses."""

    def __init__(self, status_code, url):
        self.status_code = status_code
        super().__init__("HTTP {0} from {1}".format(status_code, url))


class DrofusClient:
    """Occurrence reader for one dRofus database / project."""

    def __init__(self, settings, credentials, timeout=60.0, max_retries=3, session=None, wait=None):
        self.settings = settings
        self.timeout = float(timeout)
        self.max_retries = int(max_retries)
        self._wait = wait if wait is not None else wait_exponential(multiplier=1, min=2, max=10)

        self.session = session if session is not None else requests.Session()
        self.session.auth = credentials.as_auth()
        self.session.headers.update({"Accept": "application/json"})

    def _retrying(self):
        return Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=self._wait,
            retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout, TransientHttpError)),
            reraise=True,
        )

    def _get_once(self, url, params):
        response = self.session.get(url, params=params, timeout=self.timeout)
        status = response.status_code
        if status in _RETRY_STATUS:
            _log("WARN", "HTTP {0} from dRofus; retrying".format(status))
            raise TransientHttpError(status, url)
        if status >= 400:
            body = (response.text or "")[:300]
            raise DrofusApiError("dRofus returned HTTP {0}: {1}".format(status, body), status_code=status)
        try:
            return response.json()
        except ValueError as e:
            raise DrofusApiError("dRofus returned non-JSON body: {0}".format(e), status_code=status) from e

    def get_json(self, url, params=None):
        """GET url with retries; returns the decoded JSON body."""
        try:
            for attempt in self._retrying():
                with attempt:
                    return self._get_once(url, params)
        except TransientHttpError as e:
            raise DrofusApiError(
                "dRofus unavailable after {0} attempts: {1}".format(self.max_retries, e),
                status_code=e.status_code,
            ) from e
        except (requests.ConnectionError, requests.Timeout) as e:
            raise DrofusApiError(
                "Could not reach dRofus after {0} attempts: {1}".format(self.max_retries, e)
            ) from e
        except RetryError as e:
            raise DrofusApiError("dRofus request failed: {0}".format(e)) from e
        except requests.RequestException as e:
            raise DrofusApiError("dRofus request failed: {0}".format(e)) from e

    def get_occurrences(self, query):
        """Run an occurrence list query; returns a list of dicts."""
        if query.is_empty():
            _log("INFO", "Query can match nothing (empty IN filter); skipping request")
            return []

        url = self.settings.occurrences_url
        data = self.get_json(url, params=query.to_params())
        if not isinstance(data, list):
            raise DrofusApiError("Expected a JSON list of occurrences, got {0}".format(type(data).__name__))

        rows = [r for r in data if isinstance(r, dict)]
        if len(rows) != len(data):
            _log("WARN", "Ignored {0} non-object entries in occurrence list".format(len(data) - len(rows)))
        _log("INFO", "Fetched {0} occurrences".format(len(rows)))
        return rows

    def close(self):
        self.session.close()


def create_client(cfg, environ=None, registry=None, keyring_backend=None, session=None):
    """Resolve connection + credentials and build a DrofusClient."""
    settings = resolve_connection_settings(cfg, environ=environ, registry=registry)
    credentials = resolve_credentials(settings, environ=environ, backend=keyring_backend)
    _log("INFO", "Connecting to {0} as {1}".format(settings, credentials.username))
    return DrofusClient(
        settings,
        credentials,
        timeout=cfg.request_timeout_s,
        max_retries=cfg.max_retries,
        session=session,
    )
