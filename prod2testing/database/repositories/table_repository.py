from collections.abc import Iterator, Mapping, Sequence
from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from prod2testing.anonymization.models import Scalar


class TableRepository:
    """Row reads and writes against the tables being anonymized.

    Identifiers come from trusted configuration and are quoted; every
    value is passed as a bound parameter.
    """

    def __init__(self, schema: str) -> None:
        self._schema = schema

    def _table(self, table: str) -> sql.Identifier:
        return sql.Identifier(self._schema, table)

    @staticmethod
    def _assignments(columns: Sequence[str]) -> sql.Composed:
        return sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in columns
        )

    def update_all(
        self,
        conn: psycopg.Connection[Any],
        table: str,
        values: Mapping[str, Scalar],
    ) -> int:
        """Overwrite *values* on every row of *table*. Returns affected rows."""
        query = sql.SQL("UPDATE {} SET {}").format(
            self._table(table),
            self._assignments(list(values)),
        )
        with conn.cursor() as cur:
            cur.execute(query, tuple(values.values()))
            return cur.rowcount

    def fetch_rows(
        self,
        conn: psycopg.Connection[Any],
        table: str,
        columns: Sequence[str],
    ) -> Iterator[dict[str, Any]]:
        """Stream *columns* for every row of *table* through a server-side cursor.

        The cursor reads the snapshot taken when it is opened, so updates
        issued on *conn* while iterating are not seen by it.
        """
        query = sql.SQL("SELECT {} FROM {}").format(
            sql.SQL(", ").join(sql.Identifier(column) for column in columns),
            self._table(table),
        )
        with conn.cursor(name=f"prod2testing_{table}", row_factory=dict_row) as cur:
            cur.execute(query)
            yield from cur

    def update_row(
        self,
        conn: psycopg.Connection[Any],
        table: str,
        values: Mapping[str, Scalar],
        key: Mapping[str, Any],
    ) -> int:
        """Overwrite *values* on the single row identified by *key*."""
        query = sql.SQL("UPDATE {} SET {} WHERE {}").format(
            self._table(table),
            self._assignments(list(values)),
            sql.SQL(" AND ").join(
                sql.SQL("{} = %s").format(sql.Identifier(column)) for column in key
            ),
        )
        with conn.cursor() as cur:
            cur.execute(query, (*values.values(), *key.values()))
            return cur.rowcount

    def purge(self, conn: psycopg.Connection[Any], table: str) -> int:
        """Delete every row of *table*. DELETE keeps foreign keys enforced."""
        with conn.cursor() as cur:
            cur.execute(sql.SQL("DELETE FROM {}").format(self._table(table)))
            return cur.rowcount
