"""
Unit tests for connection.py
"""

from unittest import mock

import pytest
from mysql.connector import Error as MySQLError
from mysql.connector.constants import FieldFlag, FieldType

from mysql_dumper.connection import DatabaseConnection, describe_column
from mysql_dumper.models import ColumnDescriptor


def connected(mock_connect, mock_cursor=None):
    """Create a connected DatabaseConnection backed by mocks."""
    mock_connection = mock.MagicMock()
    if mock_cursor is not None:
        mock_connection.cursor.return_value = mock_cursor
    mock_connect.return_value = mock_connection

    conn = DatabaseConnection(
        host="localhost",
        port=3306,
        user="root",
        password="secret",
        database="testdb"
    )
    conn.connect()
    return conn, mock_connection


class TestDatabaseConnection:
    """Tests for DatabaseConnection class."""

    def test_init(self):
        conn = DatabaseConnection(
            host="localhost",
            port=3306,
            user="root",
            password="secret",
            database="testdb"
        )
        assert conn.host == "localhost"
        assert conn.port == 3306
        assert conn.user == "root"
        assert conn.password == "secret"
        assert conn.database == "testdb"
        assert conn.connection is None

    def test_default_constants(self):
        assert DatabaseConnection.DEFAULT_PORT == 3306
        assert DatabaseConnection.DEFAULT_CHARSET == 'utf8mb4'

    def test_from_connection(self):
        raw = mock.MagicMock()
        conn = DatabaseConnection.from_connection(raw, database="shop")
        assert conn.connection is raw
        assert conn.database == "shop"

    def test_from_config(self):
        conn = DatabaseConnection.from_config({
            "host": "db.example.com",
            "user": "admin",
            "password": "pw",
            "database": "shop"
        })
        assert conn.host == "db.example.com"
        assert conn.port == 3306
        assert conn.user == "admin"
        assert conn.database == "shop"

    @mock.patch('mysql_dumper.connection.mysql.connector.connect')
    def test_connect(self, mock_connect):
        conn, mock_connection = connected(mock_connect)

        mock_connect.assert_called_once_with(
            host="localhost",
            port=3306,
            user="root",
            password="secret",
            database="testdb",
            charset='utf8mb4',
            use_unicode=True
        )
        assert conn.connection == mock_connection

    @mock.patch('mysql_dumper.connection.mysql.connector.connect')
    def test_context_manager(self, mock_connect):
        mock_connection = mock.MagicMock()
        mock_connection.is_connected.return_value = True
        mock_connect.return_value = mock_connection

        with DatabaseConnection(host="localhost", user="root", database="testdb") as conn:
            assert conn.connection == mock_connection

        mock_connection.close.assert_called_once()

    def test_disconnect_not_connected(self):
        conn = DatabaseConnection(host="localhost", user="root")
        conn.disconnect()

    @mock.patch('mysql_dumper.connection.mysql.connector.connect')
    def test_connect_error(self, mock_connect):
        mock_connect.side_effect = MySQLError("Connection refused")
        conn = DatabaseConnection(host="localhost", user="root", password="wrong")

        with pytest.raises(MySQLError):
            conn.connect()

    @mock.patch('mysql_dumper.connection.mysql.connector.connect')
    def test_get_tables(self, mock_connect):
        mock_cursor = mock.MagicMock()
        mock_cursor.fetchall.return_value = [("users",), ("orders",), (None,)]
        conn, _ = connected(mock_connect, mock_cursor)

        assert conn.get_tables() == ["users", "orders"]
        mock_cursor.execute.assert_called_once_with("SHOW TABLES", None)

    @mock.patch('mysql_dumper.connection.mysql.connector.connect')
    def test_get_server_version(self, mock_connect):
        mock_cursor = mock.MagicMock()
        mock_cursor.fetchall.return_value = [("8.0.36",)]
        conn, _ = connected(mock_connect, mock_cursor)

        assert conn.get_server_version() == "8.0.36"
        mock_cursor.execute.assert_called_once_with("SELECT version()", None)

    @mock.patch('mysql_dumper.connection.mysql.connector.connect')
    def test_get_create_table(self, mock_connect):
        mock_cursor = mock.MagicMock()
        mock_cursor.fetchall.return_value = [("users", "CREATE TABLE `users` (...)")]
        conn, _ = connected(mock_connect, mock_cursor)

        assert conn.get_create_table("users") == ("users", "CREATE TABLE `users` (...)")
        mock_cursor.execute.assert_called_once_with("SHOW CREATE TABLE `users`", None)

    @mock.patch('mysql_dumper.connection.mysql.connector.connect')
    def test_open_table_cursor(self, mock_connect):
        mock_cursor = mock.MagicMock()
        conn, mock_connection = connected(mock_connect, mock_cursor)

        cursor = conn.open_table_cursor("users")

        assert cursor is mock_cursor
        mock_connection.cursor.assert_called_once_with(buffered=False, raw=True)
        mock_cursor.execute.assert_called_once_with("SELECT * FROM `users`")
        mock_cursor.close.assert_not_called()

    @mock.patch('mysql_dumper.connection.mysql.connector.connect')
    def test_open_table_cursor_error_closes(self, mock_connect):
        mock_cursor = mock.MagicMock()
        mock_cursor.execute.side_effect = MySQLError("Table doesn't exist")
        conn, _ = connected(mock_connect, mock_cursor)

        with pytest.raises(MySQLError):
            conn.open_table_cursor("missing")
        mock_cursor.close.assert_called_once()

    def test_describe_columns(self):
        cursor = mock.MagicMock()
        cursor.description = [
            ("id", FieldType.LONG, None, None, None, None, 0, 0, 63),
            ("name", FieldType.VAR_STRING, None, None, None, None, 1, 0, 255),
        ]
        conn = DatabaseConnection.from_connection(mock.MagicMock())

        assert conn.describe_columns(cursor) == [
            ColumnDescriptor(0, "id", "INT", int),
            ColumnDescriptor(1, "name", "VARCHAR", None),
        ]

    def test_describe_columns_without_description(self):
        cursor = mock.MagicMock()
        cursor.description = None
        conn = DatabaseConnection.from_connection(mock.MagicMock())
        assert conn.describe_columns(cursor) == []


class TestDescribeColumn:
    """Tests for describe_column."""

    def test_signed_bigint(self):
        column = describe_column(0, ("id", FieldType.LONGLONG, None, None, None, None, 0, 0))
        assert column.type_name == "BIGINT"
        assert column.scan_type is int

    def test_unsigned_int(self):
        flags = FieldFlag.UNSIGNED
        column = describe_column(0, ("id", FieldType.LONG, None, None, None, None, 0, flags))
        assert column.type_name == "INT"
        assert column.scan_type is str

    def test_blob_with_binary_charset(self):
        column = describe_column(2, ("data", FieldType.BLOB, None, None, None, None, 1, 0, 63))
        assert column == ColumnDescriptor(2, "data", "BLOB", None)

    def test_text_reported_as_blob_field(self):
        column = describe_column(0, ("body", FieldType.BLOB, None, None, None, None, 1, 0, 255))
        assert column.type_name == "TEXT"

    def test_long_blob_binary_flag_without_charset(self):
        flags = FieldFlag.BINARY | FieldFlag.BLOB
        column = describe_column(0, ("data", FieldType.LONG_BLOB, None, None, None, None, 1, flags))
        assert column.type_name == "LONGBLOB"

    def test_varbinary(self):
        column = describe_column(0, ("hash", FieldType.VAR_STRING, None, None, None, None, 1, 0, 63))
        assert column.type_name == "VARBINARY"

    def test_datetime(self):
        column = describe_column(0, ("created_at", FieldType.DATETIME, None, None, None, None, 1, 0))
        assert column.type_name == "DATETIME"
        assert column.scan_type is None
