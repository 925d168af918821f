from __future__ import annotations

import copy
from typing import Any


def merge_patch(target: Any, patch: Any) -> Any:
    """
    JSON Merge Patch (RFC 7386) over plain dicts.

    Nested objects merge key by key, a None value removes the key, anything
    else (lists, scalars) replaces. Neither argument is mutated.
    """
    if not isinstance(patch, dict):
        return copy.deepcopy(patch)

    result = copy.deepcopy(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = merge_patch(result.get(key), value)
    return result
