from __future__ import annotations

import json
import os
import tempfile
from typing import Any, Dict, List

from .io_utils import coerce_samples_input, read_json_content
from .operations import create_schema

RULE_TABLE_HEADERS = ["Field Name", "Match Type", "New Type"]


def rules_from_table(rules_df) -> List[Dict[str, Any]]:
    """Turn the advanced-rules Dataframe (pandas or list of rows) into rule rows."""
    if rules_df is None:
        return []
    try:
        if rules_df.empty:
            return []
        rows = rules_df[RULE_TABLE_HEADERS].values.tolist()
    except AttributeError:
        rows = list(rules_df)
    except KeyError:
        return []

    out: List[Dict[str, Any]] = []
    for row in rows:
        if not row or len(row) < 3:
            continue
        field_name, match_type, new_type = row[0], row[1], row[2]
        if not field_name or not new_type:
            continue
        out.append({'fieldName': str(field_name), 'matchType': str(match_type or 'exact'), 'newType': str(new_type)})
    return out


def load_samples_handler(file_obj):
    if file_obj is None:
        return None, "No file uploaded."

    try:
        data = read_json_content(file_obj)
    except Exception as e:
        return None, f"Error parsing JSON: {str(e)}"

    samples = coerce_samples_input(data)
    return samples, f"Successfully loaded. Found {len(samples)} sample item(s)."


def create_schema_handler(
    samples,
    samples_text,
    required_fields,
    use_substring_matching,
    case_insensitive_matching,
    override_inferred_required,
    override_rules_text,
    rules_df,
    lowercase_all_fields,
    minimise_output,
    include_definitions,
    alphabetize,
    infer_date_times=True,
    infer_uuids=True,
):
    if samples_text and samples_text.strip():
        samples = samples_text
    if not samples:
        return None, "No data loaded."

    try:
        result = create_schema(
            samples,
            required_fields=required_fields or '',
            use_substring_matching=bool(use_substring_matching),
            case_insensitive_matching=bool(case_insensitive_matching),
            override_inferred_required=bool(override_inferred_required),
            override_rules_text=override_rules_text or '',
            override_rules=rules_from_table(rules_df),
            lowercase_all_fields=bool(lowercase_all_fields),
            minimise_output=bool(minimise_output),
            include_definitions=bool(include_definitions),
            alphabetize=bool(alphabetize),
            infer_date_times=bool(infer_date_times),
            infer_uuids=bool(infer_uuids),
        )
    except ValueError as exc:
        return None, str(exc)

    schema = result['schema']
    return schema, f"Schema created with {len(schema.get('properties') or {})} top-level field(s)."


def export_schema_handler(schema, file_name, indentation=2):
    if schema is None:
        return None, "No schema to export."

    if not file_name or not file_name.strip():
        file_name = "schema"
    if not file_name.lower().endswith('.json'):
        file_name += '.json'

    path = os.path.join(tempfile.gettempdir(), file_name)
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(schema, f, indent=max(0, int(indentation or 0)) or None)
        return path, f"Export successful! Saved to {path}"
    except Exception as e:
        return None, f"Error during export: {str(e)}"
