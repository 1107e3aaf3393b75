from __future__ import annotations

import json
import os
import tempfile

from .handlers_schema import rules_from_table
from .io_utils import read_json_content
from .operations import generate_sql_ddl
from .type_mapping import DIALECT_LABELS


def database_code(label: str) -> str:
    """Map a UI label ('PostgreSQL') or a raw code ('pg') to the dialect code."""
    if not label:
        return 'pg'
    return DIALECT_LABELS.get(label, label)


def load_schema_handler(file_obj):
    if file_obj is None:
        return None, "", "No file uploaded."

    try:
        data = read_json_content(file_obj)
    except Exception as e:
        return None, "", f"Error parsing JSON: {str(e)}"

    return data, json.dumps(data, indent=2), "Schema loaded."


def use_created_schema_handler(schema):
    if schema is None:
        return None, "", "Create a schema first."
    return schema, json.dumps(schema, indent=2), "Using schema from the Create Schema tab."


def generate_sql_handler(
    schema,
    schema_text,
    database_label,
    table_name,
    primary_key_fields,
    auto_detect_primary_key,
    override_rules_text,
    rules_df,
    preserve_nullability,
    lowercase_all_fields,
    quote_identifiers,
):
    source = schema_text if schema_text and schema_text.strip() else schema
    if source is None:
        return "", "No schema loaded."

    try:
        result = generate_sql_ddl(
            source,
            table_name=(table_name or '').strip() if not quote_identifiers else (table_name or ''),
            database_type=database_code(database_label),
            primary_key_fields=primary_key_fields or '',
            auto_detect_primary_key=bool(auto_detect_primary_key),
            override_rules_text=override_rules_text or '',
            override_rules=rules_from_table(rules_df),
            preserve_nullability=bool(preserve_nullability),
            lowercase_all_fields=bool(lowercase_all_fields),
            quote_identifiers=bool(quote_identifiers),
        )
    except ValueError as exc:
        return "", str(exc)

    return result['sql'], f"Generated CREATE TABLE for '{result['tableName']}' ({result['databaseType']})."


def export_sql_handler(sql, file_name):
    if not sql:
        return None, "No SQL to export."

    if not file_name or not file_name.strip():
        file_name = "create_table"
    if not file_name.lower().endswith('.sql'):
        file_name += '.sql'

    path = os.path.join(tempfile.gettempdir(), file_name)
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(sql.rstrip(';') + ';\n')
        return path, f"Export successful! Saved to {path}"
    except Exception as e:
        return None, f"Error during export: {str(e)}"
