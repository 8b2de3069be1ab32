"""
Resume merging.

Combines several raw (pre-normalization) resume documents into one. The first
document has the highest precedence; each later document only fills in keys the
earlier ones lack.
"""

import copy
from functools import reduce
from typing import Any, Dict, List


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge ``override`` onto ``base`` and return a new dict.

    Nested mappings are merged key by key. Lists and scalars from ``override``
    replace the ``base`` value whole; list items are never merged pairwise.

    Args:
        base: Lower-precedence mapping
        override: Higher-precedence mapping

    Returns:
        New merged dict (inputs are not modified)
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_sheets(sheets: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge raw resume documents right-to-left.

    ``sheets[0]`` wins every conflict; fields it lacks are filled from
    ``sheets[1]``, then ``sheets[2]``, and so on.

    Args:
        sheets: Raw resume documents, highest precedence first

    Returns:
        The single merged document (the input itself when only one is given)

    Examples:
        >>> merge_sheets([{"basics": {"name": "A"}}, {"basics": {"name": "B", "email": "b@x"}}])
        {'basics': {'name': 'A', 'email': 'b@x'}}
    """
    if not sheets:
        raise ValueError("merge_sheets() requires at least one document")
    if len(sheets) == 1:
        return sheets[0]

    return reduce(deep_merge, reversed(sheets[:-1]), sheets[-1])
