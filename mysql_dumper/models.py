"""
Data models and enums for MySQL Database Dumper.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any


DEFAULT_MAX_ALLOWED_PACKET = 4194304
DEFAULT_CHARSET_NAME = 'utf8'
DEFAULT_QUEUE_SIZE = 1


class EncodingStrategy(Enum):
    """How the values of a column are rendered in an INSERT statement."""
    INTEGER = "integer"
    TEXT = "text"
    BINARY = "binary"


@dataclass(frozen=True)
class ColumnDescriptor:
    """Column metadata captured once when a table cursor is opened."""
    position: int
    name: str
    type_name: str
    scan_type: Optional[type] = None


@dataclass
class TableStats:
    """Statistics for a single table dump."""
    table: str
    rows_dumped: int = 0
    statements: int = 0
    success: bool = False
    error: Optional[str] = None


@dataclass
class DumpStats:
    """Overall dump statistics."""
    tables: list[TableStats] = field(default_factory=list)
    total_tables: int = 0
    total_rows: int = 0
    server_version: str = ""


@dataclass
class DumpSettings:
    """Settings controlling a dump."""
    max_allowed_packet: int = DEFAULT_MAX_ALLOWED_PACKET
    charset_name: str = DEFAULT_CHARSET_NAME
    ignore_tables: list[str] = field(default_factory=list)
    queue_size: int = DEFAULT_QUEUE_SIZE

    def __post_init__(self):
        # An unset or zero budget falls back to the server default.
        if not self.max_allowed_packet:
            self.max_allowed_packet = DEFAULT_MAX_ALLOWED_PACKET
        if not self.charset_name:
            self.charset_name = DEFAULT_CHARSET_NAME
        if self.queue_size is None or self.queue_size < 1:
            self.queue_size = DEFAULT_QUEUE_SIZE

    @classmethod
    def from_config(cls, dump_config: dict[str, Any]) -> "DumpSettings":
        """
        Create DumpSettings from the `dump` section of the configuration.

        Accepts `charset` as an alias of `charset_name`.
        """
        settings = {}
        for key in ['max_allowed_packet', 'charset_name', 'ignore_tables', 'queue_size']:
            if key in dump_config:
                settings[key] = dump_config[key]
        if 'charset' in dump_config and 'charset_name' not in settings:
            settings['charset_name'] = dump_config['charset']
        if settings.get('ignore_tables') is None:
            settings.pop('ignore_tables', None)
        else:
            settings['ignore_tables'] = list(settings['ignore_tables'])
        return cls(**settings)
