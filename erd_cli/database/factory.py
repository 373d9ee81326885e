"""Selects the database connector for a connection string."""

import logging
from typing import Dict, Callable, List

from ..errors import UnsupportedDatabaseError
from .base import MetadataProvider
from .duckdb import DuckDBConnector
from .postgres import PostgresConnector
from .snowflake import SnowflakeConnector
from .sqlite import SQLiteConnector

logger = logging.getLogger(__name__)

ConnectorType = Callable[[str], MetadataProvider]

DEFAULT_CONNECTORS: Dict[str, ConnectorType] = {
    "postgres": PostgresConnector,
    "postgresql": PostgresConnector,
    "duckdb": DuckDBConnector,
    "sqlite": SQLiteConnector,
    "sqlite3": SQLiteConnector,
    "snowflake": SnowflakeConnector,
}


def get_scheme(connection_string: str) -> str:
    """Return the lower-cased URL scheme of a connection string, or ''."""
    if "://" not in connection_string:
        return ""
    return connection_string.split("://", 1)[0].lower()


class ConnectorFactory:
    """Creates connectors by connection string scheme."""

    def __init__(self, connectors: Dict[str, ConnectorType] = None):
        self._connectors = dict(DEFAULT_CONNECTORS if connectors is None else connectors)

    @property
    def supported_schemes(self) -> List[str]:
        return sorted(self._connectors)

    def register(self, scheme: str, connector: ConnectorType):
        """Register a connector for an additional scheme."""
        self._connectors[scheme.lower()] = connector

    def new_connector(self, connection_string: str) -> MetadataProvider:
        scheme = get_scheme(connection_string)
        connector = self._connectors.get(scheme)
        if connector is None:
            raise UnsupportedDatabaseError(scheme, self.supported_schemes)

        logger.debug("Using %s for scheme '%s'", getattr(connector, "__name__", connector), scheme)
        return connector(connection_string)
