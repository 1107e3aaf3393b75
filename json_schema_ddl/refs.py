"""Local ``$ref`` resolution and root-schema discovery.

Inferred schemas frequently come back as ``{"$ref": "#/definitions/Root",
"definitions": {...}}`` rather than as an inline object. The helpers here make
both shapes look the same to the rest of the pipeline. Nothing in this module
raises: a broken or cyclic reference simply stops resolution and the last good
node is used.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Set, Tuple

from .paths import split_pointer
from .schema_utils import get_node_types, is_ref_node

logger = logging.getLogger(__name__)

DEFINITIONS_PREFIX = '#/definitions/'


def resolve_local_ref(ref: str, root: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Follow a ``#/...`` reference into ``root``.

    The resolved node borrows ``root['definitions']`` (same dict, not a copy)
    when it has none of its own, so references nested inside it keep working.
    """
    if not isinstance(ref, str) or not ref.startswith('#/'):
        return None

    current: Any = root
    for segment in split_pointer(ref):
        if isinstance(current, dict):
            current = current.get(segment)
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            return None

    if not isinstance(current, dict):
        return None
    if 'definitions' not in current and isinstance(root.get('definitions'), dict):
        current['definitions'] = root['definitions']
    return current


def dereference_schema(schema: Dict[str, Any], root: Dict[str, Any]) -> Dict[str, Any]:
    """Follow a chain of ``$ref`` wrappers until a concrete node is reached."""
    current = schema
    visited: Set[str] = set()
    while is_ref_node(current):
        ref = current['$ref']
        if ref in visited:
            logger.debug("Cyclic $ref %s; stopping resolution", ref)
            break
        visited.add(ref)
        resolved = resolve_local_ref(ref, root)
        if resolved is None:
            logger.debug("Unresolvable $ref %s; keeping last good node", ref)
            break
        current = dict(resolved)
        if current.get('definitions') is None and isinstance(root.get('definitions'), dict):
            current['definitions'] = root['definitions']

    if isinstance(current, dict) and not current.get('definitions') and isinstance(root.get('definitions'), dict):
        current['definitions'] = root['definitions']
    return current


def find_schema_properties(schema: Dict[str, Any]) -> Optional[Tuple[Dict[str, Any], Dict[str, Any]]]:
    """Locate a non-empty ``properties`` mapping at the root or in a definition.

    Returns ``(properties, source_schema)`` or ``None``.
    """
    props = schema.get('properties')
    if isinstance(props, dict) and props:
        return props, schema

    definitions = schema.get('definitions')
    if isinstance(definitions, dict):
        for definition in definitions.values():
            if not isinstance(definition, dict):
                continue
            def_props = definition.get('properties')
            if isinstance(def_props, dict) and def_props:
                return def_props, definition
    return None


def get_effective_root_object_schema(root: Dict[str, Any]) -> Dict[str, Any]:
    """Return the object schema whose properties become table columns.

    A root holding exactly one property that is itself an object is treated
    as a wrapper and flattened away.
    """
    effective = dereference_schema(root, root)

    if not effective.get('properties') and effective.get('definitions'):
        found = find_schema_properties(effective)
        if found is not None:
            effective = dereference_schema(dict(found[1]), effective)

    props = effective.get('properties')
    if isinstance(props, dict) and len(props) == 1:
        only_key, only_prop = next(iter(props.items()))
        if isinstance(only_prop, dict):
            resolved = dereference_schema(only_prop, effective)
            if resolved.get('properties') or 'object' in get_node_types(resolved):
                if isinstance(resolved.get('properties'), dict) and resolved['properties']:
                    logger.debug("Flattening single wrapper property '%s'", only_key)
                    return {
                        'properties': resolved['properties'],
                        'required': resolved.get('required') or [],
                        'definitions': effective.get('definitions'),
                    }
    return effective


def effective_property_schema(prop: Dict[str, Any], root: Dict[str, Any]) -> Dict[str, Any]:
    """Schema used to pick a column type for one property.

    ``$ref`` wrappers are dereferenced; an untyped ``anyOf``/``oneOf`` node
    contributes its first non-null alternative.
    """
    if not isinstance(prop, dict):
        return {}
    node = dereference_schema(prop, root) if is_ref_node(prop) and 'type' not in prop else prop
    if get_node_types(node):
        return node
    for key in ('anyOf', 'oneOf'):
        alternatives = node.get(key)
        if not isinstance(alternatives, list):
            continue
        for alt in alternatives:
            if not isinstance(alt, dict):
                continue
            if get_node_types(alt) == ['null']:
                continue
            resolved = dereference_schema(alt, root) if is_ref_node(alt) else alt
            merged = dict(resolved)
            if 'format' in node and 'format' not in merged:
                merged['format'] = node['format']
            return merged
    return node


def has_any_ref(node: Any, _seen: Optional[Set[int]] = None) -> bool:
    """True when a ``#/definitions/`` reference occurs anywhere under ``node``."""
    if not isinstance(node, (dict, list)):
        return False
    seen = _seen if _seen is not None else set()
    if id(node) in seen:
        return False
    seen.add(id(node))

    if isinstance(node, dict):
        ref = node.get('$ref')
        if isinstance(ref, str) and ref.startswith(DEFINITIONS_PREFIX):
            return True
        values = node.values()
    else:
        values = node
    return any(has_any_ref(v, seen) for v in values)


def minimise_schema(schema: Dict[str, Any], include_definitions: bool = False) -> Dict[str, Any]:
    """Inline a ``#/definitions/X`` root and drop definitions nobody references."""
    ref = schema.get('$ref')
    definitions = schema.get('definitions')
    if isinstance(ref, str) and ref.startswith(DEFINITIONS_PREFIX) and isinstance(definitions, dict):
        root_def = definitions.get(ref[len(DEFINITIONS_PREFIX):])
        if isinstance(root_def, dict):
            keep_definitions = include_definitions or has_any_ref(root_def)
            inlined: Dict[str, Any] = {}
            if '$schema' in schema:
                inlined['$schema'] = schema['$schema']
            inlined.update(root_def)
            if keep_definitions:
                inlined['definitions'] = definitions
            else:
                inlined.pop('definitions', None)
            schema = inlined

    if not include_definitions and 'definitions' in schema and not has_any_ref(schema):
        schema = {k: v for k, v in schema.items() if k != 'definitions'}
    return schema
