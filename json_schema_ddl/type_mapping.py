"""JSON-Schema type/format -> SQL column type, per dialect."""
from __future__ import annotations

from typing import Any, Dict

from .errors import ConfigurationError
from .schema_utils import primary_type

# Dialect codes accepted from callers, mapped to the SQL client that renders them.
DIALECTS: Dict[str, str] = {
    'pg': 'pg',
    'cockroachdb': 'pg',
    'mysql2': 'mysql2',
    'sqlite3': 'sqlite3',
    'mssql': 'mssql',
    'oracledb': 'oracledb',
}

DIALECT_LABELS: Dict[str, str] = {
    'PostgreSQL': 'pg',
    'MySQL': 'mysql2',
    'MariaDB': 'mysql2',
    'SQLite3': 'sqlite3',
    'MSSQL': 'mssql',
    'Oracle': 'oracledb',
    'CockroachDB': 'cockroachdb',
}

_JSON_COLUMN = {
    'pg': 'jsonb',
    'mysql2': 'json',
    'sqlite3': 'text',
    'mssql': 'nvarchar(max)',
    'oracledb': 'clob',
}

FORMAT_TYPES: Dict[str, Dict[str, str]] = {
    'uuid': {
        'pg': 'uuid',
        'mysql2': 'char(36)',
        'sqlite3': 'text',
        'mssql': 'uniqueidentifier',
        'oracledb': 'char(36)',
    },
    'date-time': {
        'pg': 'timestamptz',
        'mysql2': 'datetime',
        'sqlite3': 'datetime',
        'mssql': 'datetimeoffset',
        'oracledb': 'datetime',
    },
    'date': dict.fromkeys(_JSON_COLUMN, 'date'),
    'time': dict.fromkeys(_JSON_COLUMN, 'time'),
    'email': dict.fromkeys(_JSON_COLUMN, 'varchar(255)'),
    'uri': dict.fromkeys(_JSON_COLUMN, 'varchar(255)'),
    'hostname': dict.fromkeys(_JSON_COLUMN, 'varchar(255)'),
    'text': dict.fromkeys(_JSON_COLUMN, 'text'),
    'json': _JSON_COLUMN,
    'jsonb': _JSON_COLUMN,
}

SCALAR_TYPES: Dict[str, Dict[str, str]] = {
    'integer': {
        'pg': 'integer',
        'mysql2': 'int',
        'sqlite3': 'integer',
        'mssql': 'int',
        'oracledb': 'number',
    },
    'number': dict.fromkeys(_JSON_COLUMN, 'decimal(10,2)'),
    'boolean': {
        'pg': 'boolean',
        'mysql2': 'boolean',
        'sqlite3': 'boolean',
        'mssql': 'bit',
        'oracledb': 'number(1)',
    },
    'array': _JSON_COLUMN,
    'object': _JSON_COLUMN,
}

# Auto-incrementing primary key column, rendered after the quoted name.
INCREMENTS_TYPES: Dict[str, str] = {
    'pg': 'serial primary key',
    'mysql2': 'int unsigned not null auto_increment primary key',
    'sqlite3': 'integer not null primary key autoincrement',
    'mssql': 'int identity(1,1) not null primary key',
    'oracledb': 'number not null primary key',
}

DEFAULT_STRING_LENGTH = 255


def resolve_client(database_type: str) -> str:
    try:
        return DIALECTS[database_type]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported database type '{database_type}'. Expected one of: {', '.join(DIALECTS)}"
        ) from None


def map_column_type(prop: Dict[str, Any], client: str) -> str:
    """Column type for one (already dereferenced) property schema."""
    fmt = prop.get('format')
    if isinstance(fmt, str) and fmt in FORMAT_TYPES:
        return FORMAT_TYPES[fmt][client]

    actual = primary_type(prop, 'string')
    if actual == 'string':
        max_length = prop.get('maxLength')
        if isinstance(max_length, int) and not isinstance(max_length, bool) and max_length > 0:
            if max_length <= DEFAULT_STRING_LENGTH:
                return f"varchar({max_length})"
            return 'text'
        return f"varchar({DEFAULT_STRING_LENGTH})"
    if actual in SCALAR_TYPES:
        return SCALAR_TYPES[actual][client]
    return f"varchar({DEFAULT_STRING_LENGTH})"


def increments_column_type(client: str) -> str:
    return INCREMENTS_TYPES[client]
