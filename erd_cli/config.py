"""Configuration management for ERD CLI."""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Optional, List, Dict, Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError
from typing_extensions import Annotated

from .errors import ConfigurationError

USER_CONFIG_DIR = Path.home() / ".erd-cli"
GLOBAL_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.erd-cli/.env
    """
    if os.path.exists(".env"):
        return ".env"

    user_env = USER_CONFIG_DIR / ".env"
    if user_env.exists():
        return str(user_env)

    return None


class DescriptionSource(str, Enum):
    """Column facts that can be shown as a column description."""

    ENUM_VALUES = "enumValues"
    COLUMN_COMMENTS = "columnComments"


class OutputMode(str, Enum):
    """Where the rendered diagram goes."""

    FILE = "file"
    STDOUT = "stdout"


class ErdConfig(BaseSettings):
    """Settings for one diagram run.

    Values come from ERD_* environment variables (or a .env file), then from
    YAML config files and command line flags via ``load_config``.
    """

    model_config = SettingsConfigDict(
        env_prefix="ERD_",
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Connection
    connection_string: str = Field(
        default="",
        description="Database connection string, e.g. postgresql://user:pw@host/db"
    )
    connection_string_suggestions: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Connection strings offered when none is configured"
    )

    # Selection
    schemas: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Schemas to use (skips schema introspection)"
    )
    use_all_schemas: bool = Field(
        default=False,
        description="Use every available schema without asking"
    )
    selected_tables: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Tables to use as schema.table (skips table introspection)"
    )
    use_all_tables: bool = Field(
        default=False,
        description="Use every table of the selected schemas without asking"
    )

    # Diagram
    show_all_constraints: bool = Field(
        default=False,
        description="Show constraints even when one endpoint is not selected"
    )
    show_descriptions: Annotated[List[DescriptionSource], NoDecode] = Field(
        default_factory=list,
        description="Column descriptions to show: enumValues, columnComments"
    )
    omit_constraint_labels: bool = Field(default=False, description="Hide relationship labels")
    omit_attribute_keys: bool = Field(default=False, description="Hide PK/FK column markers")
    show_schema_prefix: bool = Field(default=False, description="Prefix table names with their schema")
    schema_prefix_separator: str = Field(default=".", description="Separator between schema and table name")

    # Output
    enclose_with_mermaid_backticks: bool = Field(
        default=False,
        description="Wrap the diagram in a ```mermaid code fence"
    )
    output_file_name: str = Field(default="result.mmd", description="File the diagram is written to")
    output_mode: OutputMode = Field(default=OutputMode.FILE, description="file or stdout")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ERD_* variables hold comma-separated lists, e.g. ERD_SCHEMAS=public,sales
    @field_validator(
        "connection_string_suggestions", "schemas", "selected_tables", "show_descriptions", mode="before"
    )
    @classmethod
    def _split_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return [v.strip() if isinstance(v, str) else v for v in value if not (isinstance(v, str) and not v.strip())]
        return value

    def shows_description(self, source: DescriptionSource) -> bool:
        return source in self.show_descriptions


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Keys whose names differ from the field name beyond camelCase conversion
_KEY_ALIASES = {
    "schema": "schemas",
}


def normalize_key(key: str) -> str:
    """Convert camelCase or kebab-case config keys to field names."""
    name = _CAMEL_BOUNDARY.sub("_", key).replace("-", "_").lower()
    return _KEY_ALIASES.get(name, name)


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}", details={"path": str(path)}) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}", details={"path": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping", details={"path": str(path)})
    return {normalize_key(str(k)): v for k, v in data.items()}


def load_config(
    run_config: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    global_config: Optional[Path] = None,
) -> ErdConfig:
    """Build the effective configuration.

    Precedence, lowest first: environment / .env, global config file
    (~/.erd-cli/config.yaml), run config file, non-None overrides.
    """
    data: Dict[str, Any] = {}

    global_path = global_config or GLOBAL_CONFIG_FILE
    if global_path.exists():
        data.update(_read_yaml(global_path))

    if run_config is not None:
        if not run_config.exists():
            raise ConfigurationError(f"Run config file not found: {run_config}", details={"path": str(run_config)})
        data.update(_read_yaml(run_config))

    for key, value in (overrides or {}).items():
        if value is None:
            continue
        # Empty lists from repeatable CLI options mean "not given"
        if isinstance(value, (list, tuple)) and not value:
            continue
        data[normalize_key(key)] = value

    try:
        return ErdConfig(**data)
    except (ValidationError, SettingsError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
