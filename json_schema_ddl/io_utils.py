from __future__ import annotations

import json
from typing import Any, Dict, List

from .errors import InputError


def read_json_content(file_obj):
    """Read JSON content from an uploaded file or file path."""
    if file_obj is None:
        raise InputError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, bytes):
            content = content.decode('utf-8')
        return json.loads(content)

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _parse_json_text(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputError(f"Input is not valid JSON: {exc}") from exc


def coerce_schema_input(value: Any) -> Dict[str, Any]:
    """Accept a schema as a mapping, a JSON string, ``{"schema": ...}`` or a one-item list."""
    if isinstance(value, str):
        if not value.strip():
            raise InputError("No input data provided. Please provide a JSON schema.")
        value = _parse_json_text(value)

    if isinstance(value, list):
        if not value:
            raise InputError("No input data provided. Please provide a JSON schema.")
        return coerce_schema_input(value[0])

    if value is None:
        raise InputError("No input data provided. Please provide a JSON schema.")

    if isinstance(value, dict):
        inner = value.get('schema')
        if isinstance(inner, str):
            return coerce_schema_input(inner)
        if isinstance(inner, dict):
            return inner
        if value:
            return value

    raise InputError('Input must contain a "schema" property or be a valid JSON Schema object.')


def coerce_samples_input(value: Any) -> List[Any]:
    """Normalise sample input to a list of documents."""
    if isinstance(value, str):
        if not value.strip():
            return []
        value = _parse_json_text(value)
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]
