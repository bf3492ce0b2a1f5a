"""Per-row anonymization with a running counter.

Processing flow:
1. Require a primary key, the only stable way to address a single row.
2. Stream the key columns plus the known configured columns of all rows.
3. For each row, replace every non-empty configured column, rendering
   templates with the current counter.
4. Rows with nothing to replace are left alone and do not consume a counter
   value; every updated row gets the next counter, starting at 1.
"""

from typing import Any

import psycopg

from prod2testing.anonymization.base import BaseTableAnonymizer
from prod2testing.anonymization.exceptions import SchemaError
from prod2testing.anonymization.models import ColumnSpec, Scalar, Strategy, TableResult
from prod2testing.database.models import SchemaInfo
from prod2testing.logging.logger import Log


def is_empty(value: object) -> bool:
    """Only NULL and the empty string count as empty. 0, False and blanks are data."""
    return value is None or value == ""


class RowAnonymizer(BaseTableAnonymizer):
    """Rewrites rows one by one, substituting a unique counter per updated row."""

    def apply(
        self,
        conn: psycopg.Connection[Any],
        table_name: str,
        column_spec: ColumnSpec,
        schema_info: SchemaInfo,
        primary_key: tuple[str, ...] = (),
    ) -> TableResult:
        if not primary_key:
            raise SchemaError(
                f"The table '{table_name}' has no primary key, "
                "rows cannot be anonymized individually"
            )

        result = TableResult(table=table_name, strategy=Strategy.PER_ROW)
        known = self._known_columns(table_name, column_spec, schema_info, result)
        if not known:
            Log.debug(f"No known columns configured for '{table_name}', nothing to update")
            return result

        columns = list(dict.fromkeys([*primary_key, *known]))
        # The read cursor works on a snapshot, so the updates below cannot disturb it
        rows = self._table_repo.fetch_rows(conn, table_name, columns)

        counter = 1
        seen = 0
        for row in rows:
            seen += 1
            values = self._row_values(row, known, counter)
            if not values:
                continue
            key = {column: row[column] for column in primary_key}
            self._table_repo.update_row(conn, table_name, values, key)
            counter += 1

        result.rows_updated = counter - 1
        Log.debug(
            f"Updated {result.rows_updated} of {seen} rows of '{table_name}'",
            table=table_name,
            rows=result.rows_updated,
        )
        return result

    @staticmethod
    def _row_values(
        row: dict[str, Any],
        column_spec: ColumnSpec,
        counter: int,
    ) -> dict[str, Scalar]:
        """Replacement values for the non-empty columns of *row*."""
        return {
            column: value.render(counter)
            for column, value in column_spec.items()
            if not is_empty(row[column])
        }
