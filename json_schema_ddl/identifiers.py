from __future__ import annotations

import re
from typing import Iterable, List, Optional

from .errors import TableNameError
from .required_fields import parse_field_list

TABLE_NAME_PATTERN = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')

# client -> (open quote, close quote)
_QUOTES = {
    'pg': ('"', '"'),
    'oracledb': ('"', '"'),
    'mysql2': ('`', '`'),
    'sqlite3': ('`', '`'),
    'mssql': ('[', ']'),
}


def sanitize_column_name(name: str) -> str:
    """Turn an arbitrary property name into a safe lowercase identifier.

    'Order ID' -> 'order_id', '2fa' -> '_2fa'.
    """
    cleaned = re.sub(r'[^a-z0-9_]', '_', str(name).lower())
    cleaned = re.sub(r'_{2,}', '_', cleaned)
    if not cleaned or not (cleaned[0].isalpha() or cleaned[0] == '_'):
        cleaned = f"_{cleaned}"
    return cleaned


def column_name(name: str, quote_identifiers: bool = False) -> str:
    """Column name as it will appear (before quoting) in the DDL.

    A blank name falls back to its sanitised form even when quoting.
    """
    if quote_identifiers:
        raw = str(name).strip()
        if raw:
            return raw
    return sanitize_column_name(name)


def validate_table_name(table_name: Optional[str], quote_identifiers: bool = False) -> str:
    if not table_name or not str(table_name).strip():
        raise TableNameError("Table name cannot be empty")
    if quote_identifiers:
        return table_name
    if not TABLE_NAME_PATTERN.fullmatch(table_name):
        raise TableNameError(
            "Table name must start with a letter or underscore and contain only letters, numbers, and underscores"
        )
    return table_name


def quote_identifier(name: str, client: str) -> str:
    """Wrap ``name`` in the dialect's identifier quotes, escaping embedded quotes."""
    opening, closing = _QUOTES.get(client, ('"', '"'))
    if opening == '[':
        escaped = name.replace('[', '[[').replace(']', ']]')
    else:
        escaped = name.replace(closing, closing * 2)
    return f"{opening}{escaped}{closing}"


def parse_primary_key_fields(text: str, quote_identifiers: bool = False) -> List[str]:
    return [column_name(field, quote_identifiers) for field in parse_field_list(text)]


def detect_primary_key(property_names: Iterable[str]) -> List[str]:
    """First property named ``id`` in any letter case, as a one-element list."""
    for name in property_names:
        if name.lower() == 'id':
            return [name]
    return []
