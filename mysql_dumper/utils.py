"""
Utility functions for MySQL Database Dumper.
"""

import logging
import sys
from pathlib import Path
from typing import Any


DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration.

    Recognised keys: `level` (default INFO), `file` (also log to this file)
    and `format`.
    """
    level_name = str(log_settings.get('level', 'INFO')).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level '{level_name}'")
    log_file = log_settings.get('file')

    # Dump output may go to stdout, keep log records on stderr.
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=log_settings.get('format', DEFAULT_LOG_FORMAT),
        handlers=handlers,
        force=True
    )
