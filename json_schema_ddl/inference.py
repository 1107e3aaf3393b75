"""Sample-based schema inference.

Thin wrapper over ``genson``; the rest of the package treats its output as an
opaque JSON-Schema document. String values that all look like ISO date-times,
dates, times or UUIDs additionally get a ``format``.
"""
from __future__ import annotations

import functools
import logging
import re
from typing import Any, Dict, FrozenSet, List, Optional, Type

from genson import SchemaBuilder
from genson.schema.strategies import String

from .errors import InputError

logger = logging.getLogger(__name__)

_TZ = r'(?:Z|[+-]\d{2}:?\d{2})?'
_CLOCK = r'\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?'

# Checked in order; date-time before date so the longer form wins.
STRING_FORMATS = (
    ('date-time', re.compile(r'\d{4}-\d{2}-\d{2}[Tt ]' + _CLOCK + _TZ)),
    ('date', re.compile(r'\d{4}-\d{2}-\d{2}')),
    ('time', re.compile(_CLOCK + _TZ)),
    ('uuid', re.compile(r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}')),
)
DATE_TIME_FORMATS = frozenset({'date-time', 'date', 'time'})
UUID_FORMATS = frozenset({'uuid'})


def detect_string_format(value: str, formats: FrozenSet[str]) -> Optional[str]:
    for name, pattern in STRING_FORMATS:
        if name in formats and pattern.fullmatch(value):
            return name
    return None


class FormattedString(String):
    """String strategy that keeps a ``format`` every sample agrees on."""

    KEYWORDS = String.KEYWORDS + ('format',)
    FORMATS: FrozenSet[str] = frozenset()

    def __init__(self, node_class):
        super().__init__(node_class)
        self._format: Optional[str] = None
        self._seen = False

    def _merge_format(self, fmt: Optional[str]) -> None:
        if not self._seen:
            self._format = fmt
            self._seen = True
        elif self._format != fmt:
            self._format = None

    def add_schema(self, schema):
        super().add_schema(schema)
        self._merge_format(schema.get('format'))

    def add_object(self, obj):
        super().add_object(obj)
        self._merge_format(detect_string_format(obj, self.FORMATS))

    def to_schema(self):
        schema = super().to_schema()
        if self._format:
            schema['format'] = self._format
        return schema


@functools.lru_cache(maxsize=None)
def _builder_class(formats: FrozenSet[str]) -> Type[SchemaBuilder]:
    if not formats:
        return SchemaBuilder
    strategy = type('FormattedString', (FormattedString,), {'FORMATS': formats})
    return type('FormatSchemaBuilder', (SchemaBuilder,), {'EXTRA_STRATEGIES': (strategy,)})


def infer_schema(
    samples: List[Any],
    infer_date_times: bool = True,
    infer_uuids: bool = True,
) -> Dict[str, Any]:
    """Infer one merged JSON Schema from a list of sample documents."""
    if not samples:
        raise InputError("No input data provided. Please provide at least one JSON item.")

    formats = frozenset()
    if infer_date_times:
        formats |= DATE_TIME_FORMATS
    if infer_uuids:
        formats |= UUID_FORMATS

    builder = _builder_class(formats)()
    for sample in samples:
        builder.add_object({} if sample is None else sample)
    schema = builder.to_schema()
    logger.info("Inferred schema from %d sample(s)", len(samples))
    return schema
