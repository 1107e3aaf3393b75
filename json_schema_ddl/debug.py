from __future__ import annotations

import json
from typing import Any, Dict, List

MAX_DEBUG_BYTES = 10 * 1024
TRUNCATED = '…[truncated]'


def _size(value: Any) -> int:
    return len(json.dumps(value, ensure_ascii=False, separators=(',', ':')))


def cap_debug(value: Any, max_bytes: int = MAX_DEBUG_BYTES) -> Any:
    """Shrink a JSON-like value so its serialized form stays near ``max_bytes``.

    Diagnostic output only. Values that cannot be serialized are returned as-is.
    """
    try:
        if isinstance(value, str):
            return f"{value[:max_bytes]}{TRUNCATED}" if len(value) > max_bytes else value

        if isinstance(value, list):
            if _size(value) <= max_bytes:
                return value
            trimmed: List[Any] = []
            for element in value:
                trimmed.append(element)
                if _size(trimmed) > max_bytes:
                    trimmed.pop()
                    break
            return [*trimmed, TRUNCATED]

        if isinstance(value, dict):
            if _size(value) <= max_bytes:
                return value
            result: Dict[str, Any] = {}
            for key, child in value.items():
                result[key] = cap_debug(child, max_bytes)
                if _size(result) > max_bytes:
                    result[key] = TRUNCATED
                    break
            return result

        return value
    except (TypeError, ValueError):
        return value
