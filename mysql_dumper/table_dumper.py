"""
Table streaming for MySQL Database Dumper.
"""

import logging
import queue
import threading
from typing import Iterable, Iterator, Optional

from mysql.connector import Error as MySQLError

from .connection import DatabaseConnection
from .encoding import byte_length, classify_columns, encode_row, quote_identifier
from .exceptions import CursorError, NoColumnsError, ReinitializationError, SchemaError
from .models import ColumnDescriptor, DumpSettings, EncodingStrategy, TableStats


_DONE = object()


def batch_statements(
    name_esc: str,
    tuples: Iterable[str],
    max_allowed_packet: int
) -> Iterator[str]:
    """
    Group encoded row tuples into multi-row INSERT statements.

    A statement is sealed when the next tuple would push it past
    `max_allowed_packet - 1` bytes. The running length includes the
    preamble, the separator in front of the tuple and the closing `;`.
    A tuple too large for any statement is emitted on its own.

    Args:
        name_esc: Quoted table name.
        tuples: Encoded row tuples, in cursor order.
        max_allowed_packet: Packet budget in bytes.

    Yields:
        Complete statements terminated by `;`.
    """
    budget = max_allowed_packet - 1
    preamble = f"INSERT INTO {name_esc} VALUES "
    preamble_length = byte_length(preamble)

    parts: list[str] = []
    length = 0  # sealed length of the statement in parts

    for row in tuples:
        row_length = byte_length(row)
        if parts and length + row_length + 1 > budget:
            parts.append(';')
            yield ''.join(parts)
            parts = []

        if not parts:
            parts = [preamble, row]
            length = preamble_length + row_length + 1
        else:
            parts.append(',')
            parts.append(row)
            length += row_length + 1

    if parts:
        parts.append(';')
        yield ''.join(parts)


class TableDumper:
    """Streams the rows of one table as INSERT statements.

    A TableDumper is a single-use session: its cursor and column strategies
    are set up once and the statement stream can be consumed once.
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        name: str,
        settings: Optional[DumpSettings] = None
    ):
        self.connection = connection
        self.name = name
        self.settings = settings or DumpSettings()
        self.columns: list[ColumnDescriptor] = []
        self.strategies: list[EncodingStrategy] = []
        self.error: Optional[Exception] = None
        self.stats = TableStats(table=name)
        self._cursor = None
        self._initialized = False

    @property
    def name_esc(self) -> str:
        return quote_identifier(self.name)

    def create_sql(self) -> str:
        """Get the CREATE TABLE statement for this table.

        Raises:
            SchemaError: If the statement cannot be read, or the server
                reports it for a different table.
        """
        try:
            reported_name, create_sql = self.connection.get_create_table(self.name)
        except (MySQLError, IndexError) as e:
            raise SchemaError(f"Could not read CREATE TABLE for '{self.name}': {e}") from e

        if reported_name != self.name:
            raise SchemaError(
                f"Returned table '{reported_name}' is not the same as requested table '{self.name}'"
            )
        return create_sql

    def init(self) -> None:
        """Open the row cursor and classify the table's columns."""
        if self._initialized:
            raise ReinitializationError(f"Table '{self.name}' can't be initialized twice")
        self._initialized = True

        try:
            self._cursor = self.connection.open_table_cursor(self.name)
            self.columns = self.connection.describe_columns(self._cursor)
        except MySQLError as e:
            self._close_cursor()
            raise CursorError(f"Could not open cursor for '{self.name}': {e}") from e

        if not self.columns:
            self._close_cursor()
            raise NoColumnsError(f"No columns in table {self.name}.")

        self.strategies = classify_columns(self.columns)
        logging.debug(
            f"Table '{self.name}' columns: "
            + ', '.join(f"{c.name}={s.value}" for c, s in zip(self.columns, self.strategies))
        )

    def rows(self) -> Iterator[str]:
        """Yield each row of the table as an encoded literal tuple.

        Failures are recorded in `error` and end the iteration.
        """
        try:
            if self._cursor is None:
                self.init()
            while True:
                row = self._cursor.fetchone()
                if row is None:
                    break
                encoded = encode_row(row, self.strategies)
                self.stats.rows_dumped += 1
                yield encoded
        except (NoColumnsError, ReinitializationError, CursorError) as e:
            self.error = e
        except (MySQLError, ValueError, TypeError) as e:
            error = CursorError(f"Error reading table '{self.name}': {e}")
            error.__cause__ = e
            self.error = error
        finally:
            self._close_cursor()

    def stream(self) -> Iterator[str]:
        """
        Yield the INSERT statements for this table.

        Rows are read and batched by a producer thread and handed over
        through a bounded queue. Check `error` once the stream is exhausted;
        no statement follows a recorded error.
        """
        statements: queue.Queue = queue.Queue(maxsize=self.settings.queue_size)
        producer = threading.Thread(
            target=self._produce,
            args=(statements,),
            name=f"dump-{self.name}",
            daemon=True
        )
        producer.start()

        statement = None
        try:
            while True:
                statement = statements.get()
                if statement is _DONE:
                    break
                yield statement
        finally:
            # The producer always runs to completion.
            while statement is not _DONE:
                statement = statements.get()
            producer.join()

    def _produce(self, statements: queue.Queue) -> None:
        try:
            for statement in batch_statements(
                self.name_esc, self.rows(), self.settings.max_allowed_packet
            ):
                if self.error is not None:
                    break
                self.stats.statements += 1
                logging.debug(
                    f"Table '{self.name}': statement {self.stats.statements} "
                    f"({byte_length(statement)} bytes)"
                )
                statements.put(statement)
        except Exception as e:
            if self.error is None:
                self.error = e
        finally:
            statements.put(_DONE)

    def _close_cursor(self) -> None:
        if self._cursor is None:
            return
        cursor, self._cursor = self._cursor, None
        try:
            cursor.close()
        except MySQLError as e:
            if self.error is None:
                self.error = CursorError(f"Error closing cursor for '{self.name}': {e}")
            else:
                logging.debug(f"Error closing cursor for '{self.name}': {e}")
