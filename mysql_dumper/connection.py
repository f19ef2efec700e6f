"""
Database connection management for MySQL Database Dumper.
"""

import logging
from typing import Optional, Any

import mysql.connector
from mysql.connector import Error as MySQLError
from mysql.connector.constants import FieldFlag, FieldType

from .encoding import quote_identifier
from .models import ColumnDescriptor


BINARY_CHARSET_ID = 63

# Reported type names, keyed by the protocol field type name. Text-capable
# types map to (text name, binary name).
_TYPE_NAMES: dict[str, Any] = {
    'DECIMAL': 'DECIMAL',
    'NEWDECIMAL': 'DECIMAL',
    'TINY': 'TINYINT',
    'SHORT': 'SMALLINT',
    'INT24': 'MEDIUMINT',
    'LONG': 'INT',
    'LONGLONG': 'BIGINT',
    'FLOAT': 'FLOAT',
    'DOUBLE': 'DOUBLE',
    'NULL': 'NULL',
    'TIMESTAMP': 'TIMESTAMP',
    'DATE': 'DATE',
    'NEWDATE': 'DATE',
    'TIME': 'TIME',
    'DATETIME': 'DATETIME',
    'YEAR': 'YEAR',
    'BIT': 'BIT',
    'JSON': 'JSON',
    'ENUM': 'ENUM',
    'SET': 'SET',
    'GEOMETRY': 'GEOMETRY',
    'VARCHAR': ('VARCHAR', 'VARBINARY'),
    'VAR_STRING': ('VARCHAR', 'VARBINARY'),
    'STRING': ('CHAR', 'BINARY'),
    'TINY_BLOB': ('TINYTEXT', 'TINYBLOB'),
    'MEDIUM_BLOB': ('MEDIUMTEXT', 'MEDIUMBLOB'),
    'LONG_BLOB': ('LONGTEXT', 'LONGBLOB'),
    'BLOB': ('TEXT', 'BLOB'),
}

_INTEGER_TYPES = frozenset({'TINY', 'SHORT', 'INT24', 'LONG', 'LONGLONG', 'YEAR'})


class DatabaseConnection:
    """Manages MySQL database connections with context manager support."""

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: str = 'localhost',
        port: int = DEFAULT_PORT,
        user: str = '',
        password: str = '',
        database: Optional[str] = None
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connection = None

    @classmethod
    def from_connection(cls, connection, database: Optional[str] = None) -> "DatabaseConnection":
        """Wrap an already open mysql-connector connection."""
        instance = cls(database=database)
        instance.connection = connection
        return instance

    @classmethod
    def from_config(cls, settings: dict[str, Any]) -> "DatabaseConnection":
        """Create a connection from the `connection` config section."""
        return cls(
            host=settings.get('host', 'localhost'),
            port=settings.get('port', cls.DEFAULT_PORT),
            user=settings.get('user', ''),
            password=settings.get('password', ''),
            database=settings.get('database')
        )

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.DEFAULT_CHARSET,
                use_unicode=True
            )
            logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the current database."""
        results = self.execute_query("SHOW TABLES")
        return [row[0] for row in results if row[0] is not None]

    def get_server_version(self) -> str:
        """Get the server version string."""
        results = self.execute_query("SELECT version()")
        return results[0][0] or ""

    def get_create_table(self, table: str) -> tuple[str, str]:
        """Get the table name reported by the server and its CREATE TABLE statement."""
        results = self.execute_query(f"SHOW CREATE TABLE {quote_identifier(table)}")
        return results[0][0], results[0][1]

    def open_table_cursor(self, table: str):
        """Open a forward-only cursor over every row of a table.

        The cursor is unbuffered so rows are streamed from the server, and raw
        so values arrive as the bytes the server sent.
        """
        cursor = self.connection.cursor(buffered=False, raw=True)
        try:
            cursor.execute(f"SELECT * FROM {quote_identifier(table)}")
        except MySQLError:
            cursor.close()
            raise
        return cursor

    def describe_columns(self, cursor) -> list[ColumnDescriptor]:
        """Build column descriptors from an executed cursor."""
        return [
            describe_column(position, column)
            for position, column in enumerate(cursor.description or [])
        ]


def describe_column(position: int, description: tuple) -> ColumnDescriptor:
    """Build a ColumnDescriptor from one DB-API cursor description entry."""
    name, type_code = description[0], description[1]
    flags = description[7] if len(description) > 7 and description[7] else 0
    charset = description[8] if len(description) > 8 else None

    field_type = FieldType.get_info(type_code) or 'UNKNOWN'
    if charset is not None:
        is_binary = charset == BINARY_CHARSET_ID
    else:
        is_binary = bool(flags & FieldFlag.BINARY)

    type_name = _TYPE_NAMES.get(field_type, field_type)
    if isinstance(type_name, tuple):
        type_name = type_name[1] if is_binary else type_name[0]

    scan_type = None
    if field_type in _INTEGER_TYPES:
        scan_type = str if flags & FieldFlag.UNSIGNED else int

    return ColumnDescriptor(
        position=position,
        name=name,
        type_name=type_name,
        scan_type=scan_type
    )
