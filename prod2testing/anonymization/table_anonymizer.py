from typing import Any

import psycopg

from prod2testing.anonymization.base import BaseTableAnonymizer
from prod2testing.anonymization.models import ColumnSpec, Strategy, TableResult
from prod2testing.database.models import SchemaInfo
from prod2testing.logging.logger import Log


class TableAnonymizer(BaseTableAnonymizer):
    """Overwrites every row of a table with the same literal values."""

    def apply(
        self,
        conn: psycopg.Connection[Any],
        table_name: str,
        column_spec: ColumnSpec,
        schema_info: SchemaInfo,
        primary_key: tuple[str, ...] = (),
    ) -> TableResult:
        result = TableResult(table=table_name, strategy=Strategy.TABLE_WIDE)
        known = self._known_columns(table_name, column_spec, schema_info, result)
        if not known:
            Log.debug(f"No known columns configured for '{table_name}', nothing to update")
            return result

        # Only literals reach this strategy, so the counter is irrelevant
        values = {column: value.render(0) for column, value in known.items()}
        result.rows_updated = self._table_repo.update_all(conn, table_name, values)
        Log.debug(
            f"Updated {result.rows_updated} rows of '{table_name}'",
            table=table_name,
            rows=result.rows_updated,
        )
        return result
