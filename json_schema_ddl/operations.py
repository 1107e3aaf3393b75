"""The two end-to-end operations: schema creation and SQL DDL generation.

Both work on a private copy of their input, so concurrent calls never share
mutable state. Failures surface as ``SchemaOperationError`` subclasses whose
message starts with the operation prefix and embeds the original reason.
"""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from .ddl import convert_schema_to_sql
from .debug import cap_debug
from .errors import SchemaOperationError, SchemaStructureError, TableNameError
from .identifiers import column_name, detect_primary_key, parse_primary_key_fields, validate_table_name
from .inference import infer_schema
from .io_utils import coerce_samples_input, coerce_schema_input
from .overrides import advanced_rules_from_params, apply_overrides, combine_rules, parse_override_rules
from .refs import find_schema_properties, get_effective_root_object_schema, minimise_schema
from .required_fields import apply_required_field_options
from .schema_utils import alphabetize_properties, lowercase_schema_properties
from .type_mapping import resolve_client

logger = logging.getLogger(__name__)

CREATE_SCHEMA_PREFIX = "Failed to infer JSON schema"
GENERATE_SQL_PREFIX = "Failed to generate SQL DDL"


def _wrap(exc: SchemaOperationError, prefix: str) -> SchemaOperationError:
    return type(exc)(f"{prefix}: {exc}")


def transform_schema(
    schema: Dict[str, Any],
    *,
    required_fields: str = '',
    use_substring_matching: bool = False,
    case_insensitive_matching: bool = False,
    override_inferred_required: bool = False,
    override_rules_text: str = '',
    override_rules: Any = None,
    preserve_nullability: bool = True,
    lowercase_all_fields: bool = False,
    minimise_output: bool = True,
    include_definitions: bool = False,
    alphabetize: bool = False,
) -> Dict[str, Any]:
    """Apply naming, required-field and override options to ``schema`` in place.

    Returns the (possibly minimised) result, which may be a new mapping.
    """
    if lowercase_all_fields:
        lowercase_schema_properties(schema)

    apply_required_field_options(
        schema,
        required_fields,
        use_substring_matching,
        case_insensitive_matching,
        override_inferred_required,
    )

    rules = combine_rules(
        parse_override_rules(override_rules_text),
        advanced_rules_from_params(override_rules),
    )
    apply_overrides(schema, rules, preserve_nullability)

    if minimise_output:
        schema = minimise_schema(schema, include_definitions)
    if alphabetize:
        alphabetize_properties(schema)
    return schema


def create_schema(
    samples: Any = None,
    *,
    schema: Optional[Dict[str, Any]] = None,
    infer_date_times: bool = True,
    infer_uuids: bool = True,
    enable_debug: bool = False,
    **options: Any,
) -> Dict[str, Any]:
    """Infer a schema from ``samples`` (or take ``schema`` as-is) and transform it.

    ``infer_date_times`` and ``infer_uuids`` control which string formats the
    inference step detects. ``options`` are the keyword arguments of
    :func:`transform_schema`.
    """
    try:
        if schema is not None:
            working = copy.deepcopy(coerce_schema_input(schema))
            sample_count = 0
        else:
            sample_list = coerce_samples_input(samples)
            working = infer_schema(sample_list, infer_date_times, infer_uuids)
            sample_count = len(sample_list)
        result = transform_schema(working, **options)
    except SchemaOperationError as exc:
        raise _wrap(exc, CREATE_SCHEMA_PREFIX) from exc

    output: Dict[str, Any] = {'schema': result}
    if enable_debug:
        output['debug'] = cap_debug({
            'inputItemCount': sample_count,
            'options': {k: v for k, v in options.items() if not isinstance(v, (dict, list))},
            'propertyCount': len(result.get('properties') or {}),
        })
    return output


def _primary_keys(
    properties: Dict[str, Any],
    primary_key_fields: str,
    auto_detect_primary_key: bool,
    quote_identifiers: bool,
) -> List[str]:
    explicit = parse_primary_key_fields(primary_key_fields, quote_identifiers)
    if explicit:
        return explicit
    if auto_detect_primary_key:
        return [column_name(name, quote_identifiers) for name in detect_primary_key(properties)]
    return []


def generate_sql_ddl(
    schema_input: Any,
    *,
    table_name: str = 'my_table',
    database_type: str = 'pg',
    primary_key_fields: str = '',
    auto_detect_primary_key: bool = True,
    override_rules_text: str = '',
    override_rules: Any = None,
    preserve_nullability: bool = True,
    lowercase_all_fields: bool = False,
    quote_identifiers: bool = False,
    enable_debug: bool = False,
) -> Dict[str, Any]:
    """Produce a ``CREATE TABLE`` statement for ``schema_input``.

    Returns ``{"sql", "tableName", "databaseType"}`` (plus ``debug``).
    """
    try:
        schema = copy.deepcopy(coerce_schema_input(schema_input))

        try:
            validate_table_name(table_name, quote_identifiers)
        except TableNameError as exc:
            raise TableNameError(f"Invalid table name: {exc}") from exc
        client = resolve_client(database_type)

        if lowercase_all_fields:
            lowercase_schema_properties(schema)
        rules = combine_rules(
            parse_override_rules(override_rules_text, allow_sql_types=True),
            advanced_rules_from_params(override_rules, allow_sql_types=True),
        )
        overridden = apply_overrides(schema, rules, preserve_nullability)

        effective = get_effective_root_object_schema(schema)
        found = find_schema_properties(effective)
        if found is None:
            raise SchemaStructureError(
                'Schema must have at least one property to generate SQL. Check that the schema has a '
                '"properties" object at the root level or in "definitions".'
            )
        properties, source_schema = found

        primary_keys = _primary_keys(properties, primary_key_fields, auto_detect_primary_key, quote_identifiers)
        sql = convert_schema_to_sql(source_schema, table_name, database_type, primary_keys, quote_identifiers)
    except SchemaOperationError as exc:
        raise _wrap(exc, GENERATE_SQL_PREFIX) from exc

    logger.info("Generated DDL for table %s (%s)", table_name, database_type)
    output: Dict[str, Any] = {
        'sql': sql,
        'tableName': table_name,
        'databaseType': database_type,
    }
    if enable_debug:
        output['debug'] = cap_debug({
            'effectiveRootHasProperties': bool(source_schema.get('properties')),
            'primaryKeyFields': primary_keys,
            'overriddenFields': sorted(overridden),
            'sqlClientUsed': client,
        })
    return output
