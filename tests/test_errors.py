"""Tests for error types."""

from erd_cli.errors import (
    ConfigurationError,
    ErdError,
    InteractionError,
    NameResolutionWarning,
    ProviderError,
    UnsupportedDatabaseError,
)


class TestErrors:
    """Error codes and details."""

    def test_provider_error_details(self):
        error = ProviderError("timeout", engine="postgres", operation="get_tables")

        assert error.to_dict() == {
            "code": "PROVIDER_ERROR",
            "message": "timeout",
            "details": {"engine": "postgres", "operation": "get_tables"},
        }

    def test_unsupported_database_is_configuration_error(self):
        error = UnsupportedDatabaseError("oracle", ["postgres"])

        assert isinstance(error, ConfigurationError)
        assert error.code == "UNSUPPORTED_DATABASE"
        assert error.details["supported"] == ["postgres"]

    def test_interaction_error_code(self):
        error = InteractionError("aborted")

        assert isinstance(error, ErdError)
        assert error.code == "INTERACTION_ERROR"

    def test_name_resolution_warning_is_a_warning(self):
        warning = NameResolutionWarning("x.y", ["a"])

        assert isinstance(warning, UserWarning)
        assert not isinstance(warning, ErdError)
        assert "x.y" in str(warning)
