"""
Field paths into values.

Paths are slash separated, e.g. ``/a/b/0``. An empty path or ``/`` refers to
the value itself. ``~1`` and ``~0`` escape ``/`` and ``~`` inside a key.
Unsigned numeric segments index into lists; negative indexes are not paths.
"""

from typing import Any, Callable, List, Optional, Tuple

_MISSING = object()


def parse_path(path: str) -> List[str]:
    if path in ("", "/"):
        return []
    if path.startswith("/"):
        path = path[1:]
    return [part.replace("~1", "/").replace("~0", "~") for part in path.split("/")]


def _list_index(container: list, segment: str) -> Optional[int]:
    """Index named by an unsigned decimal segment, or None if absent."""
    if not (segment.isascii() and segment.isdigit()):
        return None
    index = int(segment)
    return index if index < len(container) else None


def _step(container: Any, segment: str) -> Any:
    if isinstance(container, dict):
        return container.get(segment, _MISSING)
    if isinstance(container, list):
        index = _list_index(container, segment)
        if index is not None:
            return container[index]
    return _MISSING


def _resolve_parent(value: Any, segments: List[str]) -> Tuple[Any, Any]:
    """Walk to the container holding the last segment; (_MISSING, None) if absent."""
    current = value
    for segment in segments[:-1]:
        current = _step(current, segment)
        if current is _MISSING:
            return _MISSING, None
    last = segments[-1]
    if isinstance(current, dict):
        return (current, last) if last in current else (_MISSING, None)
    if isinstance(current, list):
        index = _list_index(current, last)
        if index is not None:
            return current, index
    return _MISSING, None


def select_path(value: Any, path: str) -> List[Any]:
    """Values found at ``path``: a one-element list, or empty if absent."""
    segments = parse_path(path)
    if not segments:
        return [value]
    parent, key = _resolve_parent(value, segments)
    if parent is _MISSING:
        return []
    return [parent[key]]


def get_path(value: Any, path: str, default: Any = None) -> Any:
    found = select_path(value, path)
    return found[0] if found else default


def update_path(value: Any, path: str, func: Callable[[Any], Any]) -> Any:
    """
    Replace the field at ``path`` with ``func(field)`` in place.

    Returns the (possibly new) root. A missing path leaves the value as is.
    """
    segments = parse_path(path)
    if not segments:
        return func(value)
    parent, key = _resolve_parent(value, segments)
    if parent is not _MISSING:
        parent[key] = func(parent[key])
    return value


def get_in(value: Any, keys: List[Any], default: Any = None) -> Any:
    """Follow property keys (strings or list indexes) from ``value``."""
    current = value
    for key in keys:
        current = _step(current, str(key))
        if current is _MISSING:
            return default
    return current
