from collections.abc import Iterable
from typing import Any

import psycopg
from psycopg.rows import dict_row

from prod2testing.database.models import ColumnMetadata, SchemaInfo


class SchemaRepository:
    """Reads table and key metadata from information_schema."""

    def fetch_schema(
        self,
        conn: psycopg.Connection[Any],
        schema: str,
        table_names: Iterable[str],
    ) -> SchemaInfo:
        """Snapshot the columns of *table_names* that exist in *schema*.

        Tables or columns missing from the database are simply absent from
        the result.
        """
        tables = sorted(set(table_names))
        if not tables:
            return SchemaInfo.from_dict({})

        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT table_name, column_name, column_default,
                       is_nullable, data_type
                FROM information_schema.columns
                WHERE table_schema = %s
                  AND table_name = ANY(%s)
                ORDER BY table_name, ordinal_position
                """,
                (schema, tables),
            )
            rows = cur.fetchall()

        result: dict[str, dict[str, ColumnMetadata]] = {}
        for row in rows:
            result.setdefault(row["table_name"], {})[row["column_name"]] = ColumnMetadata(
                data_type=row["data_type"],
                nullable=row["is_nullable"] == "YES",
                default_value=row["column_default"],
            )
        return SchemaInfo.from_dict(result)

    def fetch_primary_key(
        self,
        conn: psycopg.Connection[Any],
        schema: str,
        table: str,
    ) -> tuple[str, ...]:
        """Return the primary key columns of *table* in key order, or ()."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT kcu.column_name
                FROM information_schema.table_constraints tc
                JOIN information_schema.key_column_usage kcu
                  ON kcu.constraint_name = tc.constraint_name
                 AND kcu.table_schema = tc.table_schema
                 AND kcu.table_name = tc.table_name
                WHERE tc.constraint_type = 'PRIMARY KEY'
                  AND tc.table_schema = %s
                  AND tc.table_name = %s
                ORDER BY kcu.ordinal_position
                """,
                (schema, table),
            )
            rows = cur.fetchall()
        return tuple(row[0] for row in rows)
