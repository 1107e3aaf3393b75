from __future__ import annotations

from typing import List


def escape_path_segment(segment: str) -> str:
    """Escape a single key segment for dot-path representation.

    - Dots are escaped as '\\.' so keys like 'gpt-3.5-turbo' remain one segment.
    - Backslashes are escaped as '\\\\' to preserve round-tripping.
    """
    if not isinstance(segment, str):
        segment = str(segment)
    return segment.replace('\\', '\\\\').replace('.', '\\.')


def join_path(parent: str, segment: str) -> str:
    escaped = escape_path_segment(segment)
    return f"{parent}.{escaped}" if parent else escaped


def split_pointer(ref: str) -> List[str]:
    """Split a local '#/a/b' reference into its key segments.

    Segments use JSON-pointer escaping ('~1' for '/', '~0' for '~').
    Returns an empty list for anything that is not a local reference.
    """
    if not isinstance(ref, str) or not ref.startswith('#/'):
        return []
    return [seg.replace('~1', '/').replace('~0', '~') for seg in ref[2:].split('/')]
