"""
dRofus data service access.

Modules:
- query: Query / FilterItem / Comparison
- connection: server / database / project and credential resolution
- client: DrofusClient (requests + tenacity)
"""

from .query import Query, FilterItem, Comparison
from .connection import ConnectionSettings, Credentials, resolve_connection_settings, resolve_credentials
from .client import DrofusClient, create_client

__all__ = [
    "Query",
    "FilterItem",
    "Comparison",
    "ConnectionSettings",
    "Credentials",
    "resolve_connection_settings",
    "resolve_credentials",
    "DrofusClient",
    "create_client",
]
