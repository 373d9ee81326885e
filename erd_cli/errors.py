"""Error types for ERD CLI."""

from typing import Optional, Dict, Any, List


class ErdError(Exception):
    """Base exception for ERD CLI errors."""

    def __init__(self, message: str, code: str = "ERD_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for display or logging."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ErdError):
    """No usable configuration (e.g. no connection string)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class UnsupportedDatabaseError(ConfigurationError):
    """The connection string names a database engine without a connector."""

    def __init__(self, scheme: str, supported: Optional[List[str]] = None):
        super().__init__(
            f"Unsupported database type: '{scheme}'",
            details={"scheme": scheme, "supported": supported or []},
        )
        self.code = "UNSUPPORTED_DATABASE"
        self.scheme = scheme


class NoSchemasAvailableError(ErdError):
    """The database reported no schemas and no override was configured."""

    def __init__(self, message: str = "No schemas available"):
        super().__init__(message, code="NO_SCHEMAS_AVAILABLE")
        self.schemas: List[str] = []


class ProviderError(ErdError):
    """Error raised by a database connector while reading metadata.

    The underlying driver exception is kept as ``__cause__``.
    """

    def __init__(self, message: str, engine: str, operation: str, details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        error_details["engine"] = engine
        error_details["operation"] = operation
        super().__init__(message, code="PROVIDER_ERROR", details=error_details)
        self.engine = engine
        self.operation = operation


class InteractionError(ErdError):
    """An interactive question was aborted or could not be answered."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="INTERACTION_ERROR", details=details)


class NameResolutionWarning(UserWarning):
    """A ``schema.table`` string could not be matched to a selected schema.

    Not raised by the pipeline: it is logged and collected, and a placeholder
    table descriptor is used in place of the unresolved name.
    """

    def __init__(self, value: str, schemas: List[str]):
        super().__init__(f"Could not parse table name '{value}' (schemas: {', '.join(schemas) or 'none'})")
        self.value = value
        self.schemas = list(schemas)
