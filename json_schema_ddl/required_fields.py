from __future__ import annotations

import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def parse_field_list(text: str) -> List[str]:
    """Split a comma-separated field list, dropping blanks."""
    if not text:
        return []
    return [field.strip() for field in str(text).split(',') if field.strip()]


def matches_field(required_field: str, property_name: str, use_substring: bool, case_insensitive: bool) -> bool:
    if case_insensitive:
        required_field = required_field.lower()
        property_name = property_name.lower()
    if use_substring:
        return required_field in property_name
    return required_field == property_name


def clear_all_required_fields(schema: Dict[str, Any]) -> None:
    """Empty every ``required`` list, recursing through ``definitions``."""
    if not isinstance(schema, dict):
        return
    if 'required' in schema:
        schema['required'] = []
    definitions = schema.get('definitions')
    if isinstance(definitions, dict):
        for definition in definitions.values():
            clear_all_required_fields(definition)


def set_required_fields(
    schema: Dict[str, Any],
    required_field_names: List[str],
    use_substring: bool = False,
    case_insensitive: bool = False,
    merge_with_existing: bool = False,
) -> None:
    """Mark matching properties as required on the root and every definition.

    Matches are collected in rule order, each property once. A node with no
    match keeps whatever ``required`` it already had.
    """
    if not isinstance(schema, dict):
        return

    props = schema.get('properties')
    if isinstance(props, dict):
        matched: List[str] = []
        for required_field in required_field_names:
            for property_name in props:
                if property_name not in matched and matches_field(
                    required_field, property_name, use_substring, case_insensitive
                ):
                    matched.append(property_name)

        if matched:
            existing = schema.get('required')
            if merge_with_existing and isinstance(existing, list) and existing:
                merged = list(dict.fromkeys(existing))
                merged.extend(name for name in matched if name not in merged)
                schema['required'] = merged
            else:
                schema['required'] = matched
            logger.debug("Required fields set to %s", schema['required'])

    definitions = schema.get('definitions')
    if isinstance(definitions, dict):
        for definition in definitions.values():
            set_required_fields(definition, required_field_names, use_substring, case_insensitive, merge_with_existing)


def apply_required_field_options(
    schema: Dict[str, Any],
    required_fields: str = '',
    use_substring_matching: bool = False,
    case_insensitive_matching: bool = False,
    override_inferred_required: bool = False,
) -> List[str]:
    """Apply the required-field option set to ``schema`` in place.

    With ``override_inferred_required`` the inferred lists are cleared first;
    otherwise the given names are merged into them. Returns the parsed names.
    """
    if override_inferred_required:
        clear_all_required_fields(schema)
    names = parse_field_list(required_fields)
    if names:
        set_required_fields(
            schema,
            names,
            use_substring_matching,
            case_insensitive_matching,
            not override_inferred_required,
        )
    return names
