"""Field type overrides.

Rules are ordered: the first rule whose pattern matches a field's own name
wins and no later rule is consulted for that field. Text rules use a compact
syntax::

    id->uuid, *created*->date-time, price*->number, *_at->timestamp

``*word*`` matches names containing ``word``, ``*word`` names ending with it,
``word*`` names starting with it, and a bare ``word`` only that exact name.
Tokens that do not parse, or whose target type is unknown, are dropped
without error.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .paths import join_path
from .schema_utils import is_array_node, is_object_node, schema_allows_null

logger = logging.getLogger(__name__)


class MatchType(str, enum.Enum):
    EXACT = 'exact'
    PARTIAL = 'partial'
    PREFIX = 'prefix'
    SUFFIX = 'suffix'


JSON_TYPE_ALIASES: Dict[str, str] = {
    'string': 'string',
    'str': 'string',
    'number': 'number',
    'num': 'number',
    'float': 'number',
    'double': 'number',
    'decimal': 'number',
    'integer': 'integer',
    'int': 'integer',
    'boolean': 'boolean',
    'bool': 'boolean',
    'object': 'object',
    'obj': 'object',
    'array': 'array',
    'arr': 'array',
    'null': 'null',
}

# Logical types only meaningful when the schema feeds DDL generation.
SQL_TYPE_ALIASES: Dict[str, str] = {
    'uuid': 'uuid',
    'date-time': 'date-time',
    'datetime': 'date-time',
    'timestamp': 'date-time',
    'date': 'date',
    'time': 'time',
    'json': 'json',
    'jsonb': 'jsonb',
    'text': 'text',
}

# logical type -> (JSON base type, format)
TYPE_TARGETS: Dict[str, Tuple[str, Optional[str]]] = {
    'uuid': ('string', 'uuid'),
    'date-time': ('string', 'date-time'),
    'date': ('string', 'date'),
    'time': ('string', 'time'),
    'text': ('string', 'text'),
    'json': ('object', 'json'),
    'jsonb': ('object', 'jsonb'),
}


@dataclass(frozen=True)
class OverrideRule:
    field_name: str
    match_type: MatchType
    new_type: str

    def matches(self, name: str) -> bool:
        if self.match_type is MatchType.PARTIAL:
            return self.field_name in name
        if self.match_type is MatchType.PREFIX:
            return name.startswith(self.field_name)
        if self.match_type is MatchType.SUFFIX:
            return name.endswith(self.field_name)
        return name == self.field_name


def normalise_type(value: Any, allow_sql_types: bool = False) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    key = value.strip().lower()
    if key in JSON_TYPE_ALIASES:
        return JSON_TYPE_ALIASES[key]
    if allow_sql_types:
        return SQL_TYPE_ALIASES.get(key)
    return None


def _parse_pattern(pattern: str) -> Tuple[str, MatchType]:
    if len(pattern) > 2 and pattern.startswith('*') and pattern.endswith('*'):
        return pattern[1:-1], MatchType.PARTIAL
    if pattern.startswith('*'):
        return pattern[1:], MatchType.SUFFIX
    if pattern.endswith('*'):
        return pattern[:-1], MatchType.PREFIX
    return pattern, MatchType.EXACT


def parse_override_rules(text: str, allow_sql_types: bool = False) -> List[OverrideRule]:
    """Parse the compact ``pattern->type`` rule list."""
    if not text:
        return []
    rules: List[OverrideRule] = []
    for token in (part.strip() for part in str(text).split(',')):
        if not token:
            continue
        left, arrow, right = token.partition('->')
        if not arrow:
            logger.debug("Dropping override token without '->': %r", token)
            continue
        new_type = normalise_type(right, allow_sql_types)
        if new_type is None:
            logger.debug("Dropping override token with unknown type: %r", token)
            continue
        field_name, match_type = _parse_pattern(left.strip())
        if not field_name.strip('*'):
            continue
        rules.append(OverrideRule(field_name, match_type, new_type))
    return rules


def advanced_rules_from_params(rows: Any, allow_sql_types: bool = False) -> List[OverrideRule]:
    """Build rules from structured rows.

    Rows are mappings with ``fieldName``/``matchType``/``newType`` (snake_case
    keys are accepted too), either as a list or wrapped as ``{"rule": [...]}``.
    """
    if isinstance(rows, dict):
        rows = rows.get('rule')
    if not isinstance(rows, list):
        return []

    out: List[OverrideRule] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        field_name = str(row.get('fieldName', row.get('field_name')) or '').strip()
        raw_match = str(row.get('matchType', row.get('match_type')) or 'exact').strip().lower()
        new_type = normalise_type(row.get('newType', row.get('new_type')), allow_sql_types)
        if not field_name or new_type is None:
            continue
        try:
            match_type = MatchType(raw_match)
        except ValueError:
            match_type = MatchType.EXACT
        out.append(OverrideRule(field_name, match_type, new_type))
    return out


def combine_rules(text_rules: Iterable[OverrideRule], advanced_rules: Iterable[OverrideRule]) -> List[OverrideRule]:
    return [*text_rules, *advanced_rules]


def apply_rule(node: Dict[str, Any], rule: OverrideRule, preserve_nullability: bool = True) -> None:
    """Rewrite ``node`` in place to the rule's type."""
    was_nullable = schema_allows_null(node)
    for key in ('format', 'anyOf', 'oneOf', '$ref'):
        node.pop(key, None)
    base, fmt = TYPE_TARGETS.get(rule.new_type, (rule.new_type, None))
    if preserve_nullability and was_nullable and base != 'null':
        node['type'] = [base, 'null']
    else:
        node['type'] = base
    if fmt:
        node['format'] = fmt


def walk_schema(schema: Dict[str, Any], rules: List[OverrideRule], preserve_nullability: bool = True) -> Set[str]:
    """Depth-first walk applying ``rules``; returns the dotted paths rewritten.

    Fields are matched on their own (leaf) name. Array items and union
    alternatives are visited without adding a name; definitions are visited
    under a ``#/definitions/<name>`` path. Each node is processed once, so
    shared or cyclic structures terminate.
    """
    applied: Set[str] = set()
    seen: Set[int] = set()

    def visit(node: Any, field_name: str, path: str) -> None:
        if not isinstance(node, dict) or id(node) in seen:
            return
        seen.add(id(node))

        if field_name and path not in applied:
            for rule in rules:
                if rule.matches(field_name):
                    apply_rule(node, rule, preserve_nullability)
                    applied.add(path)
                    logger.debug("Override %s -> %s applied to '%s'", rule.field_name, rule.new_type, path)
                    break

        if is_object_node(node):
            props = node.get('properties')
            if isinstance(props, dict):
                for key, child in props.items():
                    visit(child, key, join_path(path, key))

        if is_array_node(node):
            items = node.get('items')
            if isinstance(items, list):
                for item in items:
                    visit(item, '', path)
            else:
                visit(items, '', path)

        for key in ('anyOf', 'oneOf'):
            alternatives = node.get(key)
            if isinstance(alternatives, list):
                for alt in alternatives:
                    visit(alt, '', path)

        definitions = node.get('definitions')
        if isinstance(definitions, dict):
            for name, definition in definitions.items():
                visit(definition, '', join_path('#/definitions', name))

    visit(schema, '', '')
    return applied


def apply_overrides(schema: Dict[str, Any], rules: List[OverrideRule], preserve_nullability: bool = True) -> Set[str]:
    if not rules:
        return set()
    applied = walk_schema(schema, rules, preserve_nullability)
    logger.info("Applied %d type override(s) from %d rule(s)", len(applied), len(rules))
    return applied
