"""
Exceptions raised while dumping a database.
"""


class DumpError(Exception):
    """Base class for all dump failures."""


class SchemaError(DumpError):
    """The CREATE TABLE statement could not be retrieved or names another table."""


class NoColumnsError(DumpError):
    """The table reports no columns and cannot be streamed."""


class CursorError(DumpError):
    """Advancing or reading the table cursor failed."""


class ReinitializationError(DumpError):
    """A table session was initialized twice."""
