"""
MySQL Database Dumper
=====================
Exports a MySQL database as a re-importable SQL dump:
- CREATE TABLE statements for every table
- Row data as multi-row INSERT statements bounded by max_allowed_packet
- Rows streamed from an unbuffered cursor, one table at a time
- Ignore list with wildcard patterns
"""

from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper, dump_from_config
from .encoding import (
    classify_column,
    classify_columns,
    encode_row,
    encode_value,
    sanitize,
    unsanitize,
)
from .exceptions import (
    CursorError,
    DumpError,
    NoColumnsError,
    ReinitializationError,
    SchemaError,
)
from .models import (
    ColumnDescriptor,
    DumpSettings,
    DumpStats,
    EncodingStrategy,
    TableStats,
)
from .table_dumper import TableDumper, batch_statements
from .utils import setup_logging

__version__ = "1.0.0"

__all__ = [
    # Entry points
    "dump_from_config",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseDumper",
    "TableDumper",
    # Encoding
    "batch_statements",
    "classify_column",
    "classify_columns",
    "encode_row",
    "encode_value",
    "sanitize",
    "unsanitize",
    # Models
    "ColumnDescriptor",
    "DumpSettings",
    "DumpStats",
    "EncodingStrategy",
    "TableStats",
    # Exceptions
    "CursorError",
    "DumpError",
    "NoColumnsError",
    "ReinitializationError",
    "SchemaError",
    # Utilities
    "setup_logging",
]
