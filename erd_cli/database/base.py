"""Capability interface implemented by every database connector."""

from typing import List, Protocol, runtime_checkable

from .models import TableDetail, ColumnResult, ConstraintResult


@runtime_checkable
class MetadataProvider(Protocol):
    """Reads schema metadata from one database engine.

    Connectors are interchangeable: they share this interface but no base
    class. Any method may raise ``ProviderError``.
    """

    def connect(self) -> None:
        """Open the connection to the database."""
        ...

    def close(self) -> None:
        """Close the connection. Safe to call when not connected."""
        ...

    def get_schemas(self) -> List[str]:
        """Get all user schemas, excluding system schemas."""
        ...

    def get_tables(self, schemas: List[str]) -> List[TableDetail]:
        """Get the base tables of the given schemas."""
        ...

    def get_columns(self, table: TableDetail) -> List[ColumnResult]:
        """Get the columns of a table."""
        ...

    def get_constraints(self, table: TableDetail) -> List[ConstraintResult]:
        """Get the foreign keys the table takes part in, on either side."""
        ...
