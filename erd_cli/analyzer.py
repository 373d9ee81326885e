"""Resolves the connection, schemas and tables, and loads table metadata.

Configuration wins; otherwise the database is asked; when the database offers
more than one option and "use all" is not set, the user is asked.
"""

import logging
from contextlib import closing, contextmanager
from typing import List, Optional, Protocol, Iterator

from .config import ErdConfig
from .database.base import MetadataProvider
from .database.factory import ConnectorFactory
from .database.models import (
    AnalysisResult,
    ColumnResult,
    ConstraintResult,
    TableDetail,
    TableResult,
    parse_table_name,
)
from .errors import ConfigurationError, InteractionError, NameResolutionWarning, NoSchemasAvailableError
from .questioner import Questioner

logger = logging.getLogger(__name__)


class ProgressReporter(Protocol):
    """Receives start/stop events around slow steps."""

    def start(self, message: str) -> None:
        ...

    def stop(self) -> None:
        ...


class NullProgress:
    """Progress reporter that ignores all events."""

    def start(self, message: str) -> None:
        pass

    def stop(self) -> None:
        pass


def sort_tables(tables: List[TableDetail]) -> List[TableDetail]:
    """Sort tables by schema, then name."""
    return sorted(tables, key=lambda t: (t.schema, t.name))


def sort_columns(columns: List[ColumnResult]) -> List[ColumnResult]:
    """Sort columns by name (stable)."""
    return sorted(columns, key=lambda c: c.name)


def sort_constraints(constraints: List[ConstraintResult]) -> List[ConstraintResult]:
    return sorted(constraints, key=lambda c: (c.fk_table, c.pk_table, c.constraint_name, c.column_name))


class Analyzer:
    """Runs one analysis: connect, select schemas and tables, load metadata."""

    def __init__(
        self,
        config: ErdConfig,
        connector_factory: ConnectorFactory,
        questioner: Questioner,
        progress: Optional[ProgressReporter] = None,
    ):
        self.config = config
        self.connector_factory = connector_factory
        self.questioner = questioner
        self.progress = progress or NullProgress()
        # Table names that could not be resolved during the last run
        self.warnings: List[NameResolutionWarning] = []

    @contextmanager
    def _step(self, message: str) -> Iterator[None]:
        self.progress.start(message)
        try:
            yield
        finally:
            self.progress.stop()

    def analyze(self) -> AnalysisResult:
        """Run the whole pipeline and return the loaded tables.

        The connector is closed on every exit path; any error propagates
        unchanged and no partial result is returned.
        """
        self.warnings = []
        connection_string = self.get_connection_string()
        db = self.connector_factory.new_connector(connection_string)

        with closing(db):
            with self._step("Connecting to database"):
                db.connect()

            selected_schemas = self.get_schemas(db)
            selected_tables = self.get_tables(db, selected_schemas)
            # sort the tables so the output is deterministic
            selected_tables = sort_tables(selected_tables)

            table_results = self.get_columns_and_constraints(db, selected_tables)

        return AnalysisResult(tables=table_results)

    def get_connection_string(self) -> str:
        if self.config.connection_string:
            return self.config.connection_string

        try:
            connection_string = self.questioner.ask_connection_question(self.config.connection_string_suggestions)
        except InteractionError as e:
            raise ConfigurationError(f"No connection string: {e.message}") from e

        if not connection_string or not connection_string.strip():
            raise ConfigurationError("No connection string given")
        return connection_string.strip()

    def get_schemas(self, db: MetadataProvider) -> List[str]:
        if self.config.schemas:
            return list(self.config.schemas)

        with self._step("Getting schemas"):
            try:
                schemas = db.get_schemas()
            except Exception as e:
                logger.error("Getting schemas failed | %s", e)
                raise

        logger.info("Got schemas (count=%d)", len(schemas))
        if self.config.use_all_schemas:
            return schemas

        if len(schemas) == 0:
            raise NoSchemasAvailableError()
        if len(schemas) == 1:
            return schemas
        return self.questioner.ask_schema_question(schemas)

    def get_tables(self, db: MetadataProvider, selected_schemas: List[str]) -> List[TableDetail]:
        if self.config.selected_tables:
            return self._parse_table_names(self.config.selected_tables, selected_schemas)

        with self._step("Getting tables"):
            try:
                tables = db.get_tables(selected_schemas)
            except Exception as e:
                logger.error("Getting tables failed | %s", e)
                raise

        if len(tables) == 0:
            logger.error("No tables found in schemas: %s", ", ".join(selected_schemas))

        logger.info("Got tables (count=%d)", len(tables))

        if self.config.use_all_tables or not tables:
            return tables

        table_names = [f"{table.schema}.{table.name}" for table in tables]
        chosen = self.questioner.ask_table_question(table_names)
        return self._parse_table_names(chosen, selected_schemas)

    def _parse_table_names(self, values: List[str], selected_schemas: List[str]) -> List[TableDetail]:
        tables = []
        for value in values:
            resolution = parse_table_name(value, selected_schemas)
            if not resolution.ok:
                logger.error("Could not parse table name %s", value)
                self.warnings.append(resolution.warning)
            tables.append(resolution.table)
        return tables

    def get_columns_and_constraints(self, db: MetadataProvider, selected_tables: List[TableDetail]) -> List[TableResult]:
        """Load columns and constraints table by table, in the given order."""
        table_results = []
        with self._step("Getting columns and constraints"):
            for table in selected_tables:
                try:
                    columns = db.get_columns(table)
                except Exception as e:
                    logger.error("Getting columns failed | %s", e)
                    raise

                try:
                    constraints = db.get_constraints(table)
                except Exception as e:
                    logger.error("Getting constraints failed | %s", e)
                    raise

                table_results.append(TableResult(
                    table=table,
                    columns=sort_columns(columns),
                    constraints=sort_constraints(constraints),
                ))

        result = AnalysisResult(tables=table_results)
        logger.info(
            "Got columns and constraints (columns=%d, constraints=%d)",
            result.column_count,
            result.constraint_count,
        )
        return table_results
