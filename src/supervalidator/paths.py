"""Dotted-path access into nested records."""

from collections.abc import Mapping, Sequence
from typing import Any

# Returned for any path segment that does not exist
MISSING = ""


def resolve_path(record: Any, path: str) -> Any:
    """Resolve ``a.b.c`` against a nested record.

    Mappings are walked by key and lists/tuples by integer index. Any absent
    segment yields MISSING (an empty string); this function never raises.
    Falsy leaves such as ``0`` or ``False`` are returned unchanged.

    Examples:
        >>> resolve_path({"a": {"b": {"c": 1}}}, "a.b.c")
        1
        >>> resolve_path({}, "a.b.c")
        ''
    """
    node = record if record is not None else {}

    for segment in path.split("."):
        if isinstance(node, Mapping):
            if segment not in node:
                return MISSING
            node = node[segment]
        elif isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
            try:
                node = node[int(segment)]
            except (ValueError, IndexError):
                return MISSING
        else:
            return MISSING

    return node
