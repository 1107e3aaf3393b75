"""Exception types raised by the schema and DDL pipelines.

All of them derive from ``ValueError`` so callers that only care about
"bad input" can keep catching that.
"""
from __future__ import annotations


class SchemaOperationError(ValueError):
    """A whole operation failed; the message carries the operation prefix."""


class InputError(SchemaOperationError):
    """Missing, empty or unparsable input."""


class TableNameError(SchemaOperationError):
    """Empty or malformed destination table name."""


class SchemaStructureError(SchemaOperationError):
    """The schema has no usable object properties."""


class ConfigurationError(SchemaOperationError):
    """An option value the pipeline cannot work with (e.g. unknown dialect)."""


class GenerationError(SchemaOperationError):
    """The SQL builder produced no statement."""
