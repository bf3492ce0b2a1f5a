from abc import ABC, abstractmethod
from typing import Any

import psycopg

from prod2testing.anonymization.exceptions import MissingColumnWarning
from prod2testing.anonymization.models import ColumnSpec, TableResult
from prod2testing.database.models import SchemaInfo
from prod2testing.database.repositories.table_repository import TableRepository
from prod2testing.logging.logger import Log


class BaseTableAnonymizer(ABC):
    """Contract for all table anonymization strategies."""

    def __init__(self, table_repo: TableRepository) -> None:
        self._table_repo = table_repo

    @abstractmethod
    def apply(
        self,
        conn: psycopg.Connection[Any],
        table_name: str,
        column_spec: ColumnSpec,
        schema_info: SchemaInfo,
        primary_key: tuple[str, ...] = (),
    ) -> TableResult:
        """Rewrite the configured columns of *table_name*.

        Args:
            conn: Connection carrying the caller's open transaction.
            table_name: Table to anonymize.
            column_spec: Column name -> replacement value.
            schema_info: Live schema snapshot; unknown columns are skipped.
            primary_key: Key columns, for strategies that target single rows.

        Returns:
            TableResult with the number of rows updated and any warnings.

        Raises:
            SchemaError: if the table cannot be targeted by this strategy.
        """

    @staticmethod
    def _known_columns(
        table_name: str,
        column_spec: ColumnSpec,
        schema_info: SchemaInfo,
        result: TableResult,
    ) -> ColumnSpec:
        """Drop columns missing from the live schema, recording a warning for each."""
        known: ColumnSpec = {}
        for column, value in column_spec.items():
            if not schema_info.has_column(table_name, column):
                warning = MissingColumnWarning(table_name, column)
                Log.warning(str(warning), table=table_name, column=column)
                result.warnings.append(warning)
                continue
            known[column] = value
        return known
