from unittest.mock import MagicMock

from psycopg import sql

from prod2testing.database.repositories.table_repository import TableRepository


def _mock_connection() -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestUpdateAll:
    def test_binds_values_as_parameters(self) -> None:
        mock_conn, mock_cursor = _mock_connection()
        mock_cursor.rowcount = 4

        rows = TableRepository("public").update_all(
            mock_conn, "customer", {"email": "a@b.com", "phone": None}
        )

        assert rows == 4
        query, params = mock_cursor.execute.call_args.args
        assert isinstance(query, sql.Composed)
        assert params == ("a@b.com", None)

    def test_quotes_identifiers(self) -> None:
        mock_conn, mock_cursor = _mock_connection()

        TableRepository("shop").update_all(mock_conn, "customer", {"email": "x"})

        query = mock_cursor.execute.call_args.args[0]
        assert "Identifier('shop', 'customer')" in repr(query)
        assert "Identifier('email')" in repr(query)
        assert "WHERE" not in repr(query)


class TestFetchRows:
    def test_streams_rows_from_server_side_cursor(self) -> None:
        mock_conn, mock_cursor = _mock_connection()
        mock_cursor.__iter__.return_value = iter([{"id": 1, "email": "a@x.com"}])

        rows = list(
            TableRepository("public").fetch_rows(mock_conn, "customer", ["id", "email"])
        )

        assert rows == [{"id": 1, "email": "a@x.com"}]
        assert mock_conn.cursor.call_args.kwargs["name"] == "prod2testing_customer"
        query = mock_cursor.execute.call_args.args[0]
        assert "Identifier('id')" in repr(query)
        assert "Identifier('public', 'customer')" in repr(query)

    def test_reads_nothing_until_iterated(self) -> None:
        mock_conn, mock_cursor = _mock_connection()

        TableRepository("public").fetch_rows(mock_conn, "customer", ["id"])

        mock_cursor.execute.assert_not_called()


class TestUpdateRow:
    def test_binds_values_then_key(self) -> None:
        mock_conn, mock_cursor = _mock_connection()
        mock_cursor.rowcount = 1

        rows = TableRepository("public").update_row(
            mock_conn,
            "order_lines",
            {"note": "anon 1"},
            {"order_id": 10, "line_no": 2},
        )

        assert rows == 1
        query, params = mock_cursor.execute.call_args.args
        assert params == ("anon 1", 10, 2)
        assert "WHERE" in repr(query)
        assert "Identifier('line_no')" in repr(query)


class TestPurge:
    def test_deletes_every_row(self) -> None:
        mock_conn, mock_cursor = _mock_connection()
        mock_cursor.rowcount = 9

        assert TableRepository("public").purge(mock_conn, "search_index") == 9
        query = mock_cursor.execute.call_args.args[0]
        assert "DELETE FROM" in repr(query)
