"""
Main database dumping orchestration for MySQL Database Dumper.
"""

import fnmatch
import io
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from .config import ConfigLoader
from .connection import DatabaseConnection
from .models import DumpSettings, DumpStats, TableStats
from .table_dumper import TableDumper
from .templates import (
    FOOTER_TEMPLATE,
    HEADER_TEMPLATE,
    TABLE_FOOTER_TEMPLATE,
    TABLE_HEADER_TEMPLATE,
)
from .utils import setup_logging


class DatabaseDumper:
    """Writes a complete dump of one database.

    Tables are dumped one after another. The first error aborts the whole
    dump and nothing is persisted.
    """

    def __init__(self, connection: DatabaseConnection, settings: Optional[DumpSettings] = None):
        self.connection = connection
        self.settings = settings or DumpSettings()
        self.stats = DumpStats()

    @classmethod
    def from_config(cls, config: ConfigLoader, connection: DatabaseConnection) -> "DatabaseDumper":
        """Create a dumper using the `dump` section of the configuration."""
        return cls(connection, DumpSettings.from_config(config.get_dump_settings()))

    def _compile_exclusion_patterns(self, exclude_patterns: list[str]) -> list[re.Pattern]:
        """
        Pre-compile exclusion patterns to regex for faster matching.

        Converts fnmatch patterns to compiled regex patterns.
        """
        return [re.compile(fnmatch.translate(pattern)) for pattern in exclude_patterns]

    def _is_table_excluded(
        self,
        table_name: str,
        exclude_patterns: list[str],
        compiled_patterns: Optional[list[re.Pattern]] = None
    ) -> bool:
        """
        Check if a table is on the ignore list.

        Supports:
        - Exact matches: 'users_backup'
        - Wildcard patterns: '*_old', 'tmp_*', '*_backup_*'
        """
        if compiled_patterns:
            for i, compiled in enumerate(compiled_patterns):
                if compiled.match(table_name):
                    logging.debug(f"Table '{table_name}' ignored by pattern '{exclude_patterns[i]}'")
                    return True
        else:
            for pattern in exclude_patterns:
                if fnmatch.fnmatch(table_name, pattern):
                    logging.debug(f"Table '{table_name}' ignored by pattern '{pattern}'")
                    return True
        return False

    def get_tables(self) -> list[str]:
        """Get the tables to dump, in server order, without ignored tables."""
        table_names = self.connection.get_tables()
        ignore_tables = self.settings.ignore_tables
        if not ignore_tables:
            return table_names

        compiled_patterns = self._compile_exclusion_patterns(ignore_tables)
        tables = [
            t for t in table_names
            if not self._is_table_excluded(t, ignore_tables, compiled_patterns)
        ]
        ignored_count = len(table_names) - len(tables)
        if ignored_count > 0:
            logging.info(f"Ignored {ignored_count} table(s) matching the ignore list")
        return tables

    def dump_to_string(self) -> str:
        """Dump the database and return the dump text."""
        buffer = io.StringIO()
        try:
            self.write_dump(buffer)
            return buffer.getvalue()
        finally:
            buffer.close()

    def dump_to_file(self, directory: str | Path, filename: str) -> Path:
        """
        Dump the database to `<directory>/<filename>.sql`.

        The dump is built in memory and only written once it is complete,
        so a failed dump leaves no file behind.

        Raises:
            FileNotFoundError: If the directory does not exist.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"Output directory '{directory}' does not exist")

        content = self.dump_to_string()

        output_path = directory / f"{filename}.sql"
        with open(output_path, 'w', encoding='utf-8', errors='surrogateescape', newline='') as f:
            f.write(content)

        logging.info(f"Dump written to {output_path}")
        return output_path

    def write_dump(self, out: TextIO) -> DumpStats:
        """Write header, every table section and footer to `out`."""
        self.stats = DumpStats()
        self.stats.server_version = self.connection.get_server_version()

        out.write(HEADER_TEMPLATE.format(
            server_version=self.stats.server_version,
            charset_name=self.settings.charset_name
        ))

        tables = self.get_tables()
        logging.info(f"Dumping {len(tables)} table(s)")

        for name in tables:
            table_stats = self.dump_table(out, name)
            self.stats.tables.append(table_stats)
            self.stats.total_tables += 1
            self.stats.total_rows += table_stats.rows_dumped

        out.write(FOOTER_TEMPLATE.format(complete_time=datetime.now().isoformat(' ')))
        return self.stats

    def dump_table(self, out: TextIO, name: str) -> TableStats:
        """Write the section for one table.

        Raises whatever error stopped the table; the caller is expected to
        abandon the dump.
        """
        table = TableDumper(self.connection, name, self.settings)

        try:
            create_sql = table.create_sql()
            out.write(TABLE_HEADER_TEMPLATE.format(
                name_esc=table.name_esc,
                charset_name=self.settings.charset_name,
                create_sql=create_sql
            ))

            for statement in table.stream():
                out.write(statement)
                out.write('\n')

            if table.error is not None:
                raise table.error

            out.write(TABLE_FOOTER_TEMPLATE.format(name_esc=table.name_esc))
            table.stats.success = True
        except Exception as e:
            table.stats.error = str(e)
            raise
        finally:
            self._log_table_result(table.stats)

        return table.stats

    def _log_table_result(self, table_stats: TableStats) -> None:
        """Log the result of a table dump."""
        if table_stats.success:
            logging.info(
                f"  ✓ {table_stats.table}: {table_stats.rows_dumped} rows "
                f"in {table_stats.statements} statement(s)"
            )
        else:
            logging.error(f"  ✗ {table_stats.table}: {table_stats.error}")


def dump_from_config(config_path: str) -> Path:
    """
    Run a complete dump as described by a YAML configuration file.

    Returns:
        Path of the written dump file.
    """
    config = ConfigLoader(config_path)
    setup_logging(config.get_logging_settings())

    connection_settings = config.get_connection_settings()
    output_settings = config.get_output_settings()

    output_dir = Path(output_settings.get('directory', './dumps'))
    output_dir.mkdir(parents=True, exist_ok=True)

    filename = output_settings.get('filename') or connection_settings.get('database') or 'dump'
    if output_settings.get('timestamp_suffix', True):
        filename = f"{filename}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

    with DatabaseConnection.from_config(connection_settings) as conn:
        dumper = DatabaseDumper.from_config(config, conn)
        output_path = dumper.dump_to_file(output_dir, filename)

    logging.info("=" * 50)
    logging.info("DUMP COMPLETE")
    logging.info(f"Tables: {dumper.stats.total_tables}")
    logging.info(f"Total Rows: {dumper.stats.total_rows}")
    return output_path
