"""
Column classification and row encoding for INSERT statements.

Every column is assigned one EncodingStrategy when its table is opened.
Rows are then rendered as `(v0,v1,...)` literal tuples by switching on
those strategies, never by inspecting value types per row.
"""

import re
from typing import Any, Optional, Sequence

from .exceptions import NoColumnsError
from .models import ColumnDescriptor, EncodingStrategy


NULL_LITERAL = 'NULL'
BINARY_MARKER = '_binary '

BINARY_TYPE_NAMES = frozenset({'BLOB', 'TINYBLOB', 'MEDIUMBLOB', 'LONGBLOB'})

# Tab literals are acceptable in reads and are left alone.
_ESCAPES = {
    '\x00': '\\0',
    "'": "\\'",
    '"': '\\"',
    '\b': '\\b',
    '\n': '\\n',
    '\r': '\\r',
    '\x1a': '\\Z',
    '\\': '\\\\',
}
_ESCAPE_TABLE = str.maketrans(_ESCAPES)
_UNESCAPES = {escaped[1]: raw for raw, escaped in _ESCAPES.items()}
_ESCAPE_PATTERN = re.compile(r'\\(.)', re.DOTALL)


def classify_column(column: ColumnDescriptor) -> EncodingStrategy:
    """Pick the encoding strategy for a column. First matching rule wins."""
    if column.type_name.upper() in BINARY_TYPE_NAMES:
        return EncodingStrategy.BINARY
    if _is_signed_integer(column.scan_type):
        return EncodingStrategy.INTEGER
    return EncodingStrategy.TEXT


def classify_columns(columns: Sequence[ColumnDescriptor]) -> list[EncodingStrategy]:
    """Classify every column of a table.

    Raises:
        NoColumnsError: If the table has no columns.
    """
    if not columns:
        raise NoColumnsError("No columns in table")
    return [classify_column(column) for column in columns]


def _is_signed_integer(scan_type: Optional[type]) -> bool:
    return (
        scan_type is not None
        and issubclass(scan_type, int)
        and not issubclass(scan_type, bool)
    )


def quote_identifier(name: str) -> str:
    """Wrap a table or column name in backticks."""
    return '`' + name.replace('`', '``') + '`'


def sanitize(text: str) -> str:
    """Escape a string for use inside a single-quoted MySQL literal."""
    return text.translate(_ESCAPE_TABLE)


def unsanitize(text: str) -> str:
    """Reverse sanitize()."""
    return _ESCAPE_PATTERN.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), text)


def to_text(value: Any) -> str:
    """Convert a fetched value to str.

    Raw bytes are decoded with surrogateescape so that bytes which are not
    valid UTF-8 survive the trip back to the output stream unchanged.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode('utf-8', 'surrogateescape')
    return str(value)


def byte_length(text: str) -> int:
    """Length of text once written to the dump."""
    return len(text.encode('utf-8', 'surrogateescape'))


def encode_value(value: Any, strategy: EncodingStrategy) -> str:
    """Render a single value as a SQL literal."""
    if value is None:
        return NULL_LITERAL

    if strategy is EncodingStrategy.INTEGER:
        return str(int(value))

    if strategy is EncodingStrategy.BINARY:
        if len(value) == 0:
            return NULL_LITERAL
        return f"{BINARY_MARKER}'{sanitize(to_text(value))}'"

    return f"'{sanitize(to_text(value))}'"


def encode_row(values: Sequence[Any], strategies: Sequence[EncodingStrategy]) -> str:
    """
    Render one row as a parenthesized, comma-joined literal tuple.

    Args:
        values: Column values in cursor order, None for NULL.
        strategies: One strategy per column.

    Returns:
        The tuple text, e.g. `(1,'a',NULL)`.
    """
    if len(values) != len(strategies):
        raise ValueError(
            f"Row has {len(values)} values but table has {len(strategies)} columns"
        )
    return '(' + ','.join(
        encode_value(value, strategy) for value, strategy in zip(values, strategies)
    ) + ')'
