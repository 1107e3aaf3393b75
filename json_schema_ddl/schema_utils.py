from __future__ import annotations

from typing import Any, Dict, List, Optional, Set


def get_node_types(node: Any) -> List[str]:
    """Return the declared type names of a schema node as a list.

    A single ``type`` string becomes a one-element list; non-string entries
    in a union are ignored.
    """
    if not isinstance(node, dict):
        return []
    t = node.get('type')
    if isinstance(t, str):
        return [t]
    if isinstance(t, list):
        return [x for x in t if isinstance(x, str)]
    return []


def primary_type(node: Any, default: Optional[str] = None) -> Optional[str]:
    """First non-null type name of a node (``["null", "integer"]`` -> ``integer``)."""
    for t in get_node_types(node):
        if t != 'null':
            return t
    return default


def schema_allows_null(node: Any) -> bool:
    """True when the node admits ``null``.

    Checks a plain ``"null"`` type, a union containing ``"null"`` and any
    ``anyOf``/``oneOf`` alternative typed ``null``.
    """
    if not isinstance(node, dict):
        return False
    if 'null' in get_node_types(node):
        return True
    for key in ('anyOf', 'oneOf'):
        alternatives = node.get(key)
        if isinstance(alternatives, list):
            for alt in alternatives:
                if 'null' in get_node_types(alt):
                    return True
    return False


def is_ref_node(node: Any) -> bool:
    return isinstance(node, dict) and isinstance(node.get('$ref'), str) and len(node['$ref']) > 0


def is_object_node(node: Any) -> bool:
    if not isinstance(node, dict):
        return False
    types = get_node_types(node)
    return 'object' in types or (bool(node.get('properties')) and 'array' not in types)


def is_array_node(node: Any) -> bool:
    if not isinstance(node, dict):
        return False
    return 'array' in get_node_types(node) or bool(node.get('items'))


def lowercase_schema_properties(schema: Dict[str, Any], _seen: Optional[Set[int]] = None) -> None:
    """Lowercase every property key in place, keeping ``required`` in step.

    Walks nested properties, array items and definitions.
    """
    if not isinstance(schema, dict):
        return
    seen = _seen if _seen is not None else set()
    if id(schema) in seen:
        return
    seen.add(id(schema))

    props = schema.get('properties')
    if isinstance(props, dict):
        # Later keys win when two names collapse to the same lowercase key.
        schema['properties'] = {key.lower(): value for key, value in props.items()}
        required = schema.get('required')
        if isinstance(required, list):
            lowered: List[str] = []
            for name in required:
                name = name.lower() if isinstance(name, str) else name
                if name not in lowered:
                    lowered.append(name)
            schema['required'] = lowered
        for child in schema['properties'].values():
            lowercase_schema_properties(child, seen)

    items = schema.get('items')
    if isinstance(items, dict):
        lowercase_schema_properties(items, seen)

    definitions = schema.get('definitions')
    if isinstance(definitions, dict):
        for definition in definitions.values():
            lowercase_schema_properties(definition, seen)


def alphabetize_properties(schema: Dict[str, Any], _seen: Optional[Set[int]] = None) -> None:
    """Sort property keys alphabetically at every level, in place."""
    if not isinstance(schema, dict):
        return
    seen = _seen if _seen is not None else set()
    if id(schema) in seen:
        return
    seen.add(id(schema))

    props = schema.get('properties')
    if isinstance(props, dict):
        schema['properties'] = {key: props[key] for key in sorted(props)}
        for child in schema['properties'].values():
            alphabetize_properties(child, seen)

    items = schema.get('items')
    if isinstance(items, dict):
        alphabetize_properties(items, seen)

    definitions = schema.get('definitions')
    if isinstance(definitions, dict):
        for definition in definitions.values():
            alphabetize_properties(definition, seen)
