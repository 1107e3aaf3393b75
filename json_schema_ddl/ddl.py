from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .errors import GenerationError, SchemaStructureError
from .identifiers import column_name, quote_identifier
from .refs import effective_property_schema
from .schema_utils import primary_type, schema_allows_null
from .type_mapping import increments_column_type, map_column_type, resolve_client

logger = logging.getLogger(__name__)


class TableBuilder:
    """Short-lived ``CREATE TABLE`` builder for one dialect.

    Use it as a context manager; the handle is released on every exit path
    and refuses further use afterwards.
    """

    def __init__(self, table_name: str, database_type: str):
        self.table_name = table_name
        self.database_type = database_type
        self.client = resolve_client(database_type)
        self._columns: List[str] = []
        self._primary: List[str] = []
        self._increments: Optional[str] = None
        self._closed = False

    def __enter__(self) -> 'TableBuilder':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._columns = []
        self._primary = []
        self._increments = None
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("TableBuilder has been released")

    def quote(self, name: str) -> str:
        return quote_identifier(name, self.client)

    def increments(self, name: str) -> None:
        self._check_open()
        self._increments = name
        self._columns.append(f"{self.quote(name)} {increments_column_type(self.client)}")

    def column(self, name: str, sql_type: str, primary: bool = False, not_null: bool = False) -> None:
        self._check_open()
        parts = [self.quote(name), sql_type]
        if not_null:
            parts.append('not null')
        if primary:
            parts.append('primary key')
        self._columns.append(' '.join(parts))

    def primary(self, names: List[str]) -> None:
        self._check_open()
        self._primary = list(names)

    def to_sql(self) -> List[str]:
        """Statements needed to create the table; the table itself comes first."""
        self._check_open()
        if not self._columns:
            return []
        table = self.quote(self.table_name)
        body = list(self._columns)
        if self._primary:
            body.append(f"primary key ({', '.join(self.quote(n) for n in self._primary)})")
        statements = [f"create table {table} ({', '.join(body)})"]

        if self.client == 'oracledb' and self._increments:
            sequence = self.quote(f"{self.table_name}_seq")
            trigger = self.quote(f"{self.table_name}_autoinc_trg")
            column = self.quote(self._increments)
            statements.append(f"create sequence {sequence}")
            statements.append(
                f"create or replace trigger {trigger} before insert on {table} for each row "
                f"when (new.{column} is null) begin select {sequence}.nextval into :new.{column} from dual; end;"
            )
        return statements


def convert_schema_to_sql(
    schema: Dict[str, Any],
    table_name: str,
    database_type: str,
    primary_key_fields: List[str],
    quote_identifiers: bool = False,
) -> str:
    """Render ``CREATE TABLE`` for the properties of an object schema.

    ``primary_key_fields`` holds column names already passed through the same
    naming rules as the properties.
    """
    props = schema.get('properties')
    if not isinstance(props, dict) or not props:
        raise SchemaStructureError("Schema has no properties to convert")

    required = schema.get('required') or []
    columns = [(name, column_name(name, quote_identifiers)) for name in props]
    pk_present = [col for _, col in columns if col in primary_key_fields]
    composite = len(pk_present) > 1

    with TableBuilder(table_name, database_type) as table:
        for prop_name, col in columns:
            definition = props[prop_name] if isinstance(props[prop_name], dict) else {}
            is_pk = col in primary_key_fields
            # An explicit null in the type beats a required marking.
            is_required = prop_name in required and not schema_allows_null(definition)
            typed = effective_property_schema(definition, schema)

            if is_pk and not composite and primary_type(typed) == 'integer':
                table.increments(col)
                continue
            table.column(
                col,
                map_column_type(typed, table.client),
                primary=is_pk and not composite,
                not_null=(is_required and not is_pk) or (is_pk and composite),
            )

        if composite:
            table.primary(pk_present)
        statements = table.to_sql()

    if not statements:
        raise GenerationError("Failed to generate SQL: No queries generated")
    logger.debug("Generated %d statement(s) for table %s", len(statements), table_name)
    return statements[0]
