"""Classify a raw WebLogic REST response into a ``ResponseNode`` tree.

WebLogic does not distinguish object-valued attributes from child mBeans, and
reports collections in a few peculiar ways, so classification relies on the
heuristics below:

- a list value holds repeated instances of the mBean under the current key
  (the ``items`` collection); each element must be an object
- an empty collection is sent as ``[{}]`` rather than ``[]``
- an object value is a child mBean unless its key is a known data object
- numbers and strings are attributes; anything else (null, booleans) is
  ignored
"""

from __future__ import annotations

import json
from typing import Any, Dict, FrozenSet, List

from ..errors import ClassificationError, ResponseParseError
from .models import ResponseNode

# Object-valued attributes that are data rather than child mBeans.
HEALTH_STATE_FIELD = "healthState"
OBJECT_FIELD_NAMES: FrozenSet[str] = frozenset({HEALTH_STATE_FIELD})


def _is_empty_collection(value: List[Any]) -> bool:
    if not value:
        return True
    return len(value) == 1 and isinstance(value[0], dict) and not value[0]


def _as_float(value: Any) -> float | None:
    # bool is an int subclass; JSON true/false are not metrics
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return value
    try:
        return float(value)
    except OverflowError:
        return None


def classify_response(data: Dict[str, Any]) -> ResponseNode:
    """Classify one mBean instance (a decoded JSON object), recursively.

    Parameters
    ----------
    data: Dict[str, Any]
        Decoded JSON object for a single mBean instance.

    Returns
    -------
    ResponseNode
        Typed representation of the instance and everything below it.

    Raises
    ------
    ClassificationError
        If a list contains an element that is not an object. The whole
        classification is abandoned; no partial tree is returned.
    """
    node = ResponseNode()
    for key, value in data.items():
        if isinstance(value, list):
            if _is_empty_collection(value):
                continue
            for item in value:
                if not isinstance(item, dict):
                    raise ClassificationError(
                        f"Invalid item type at {key}, expected object but got "
                        f"{type(item).__name__}"
                    )
                node.items.append(classify_response(item))
        elif isinstance(value, str):
            node.string_fields[key] = value
        elif isinstance(value, (int, float)):
            number = _as_float(value)
            if number is not None:
                node.numeric_fields[key] = number
        elif isinstance(value, dict):
            if key in OBJECT_FIELD_NAMES:
                node.object_fields[key] = value
            else:
                node.children[key] = classify_response(value)
    return node


def parse_response_body(body: bytes | str) -> ResponseNode:
    """Decode a raw response body and classify it.

    Raises
    ------
    ResponseParseError
        If the body is not JSON or its top level is not an object.
    ClassificationError
        If classification of the decoded object fails.
    """
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ResponseParseError(f"Response body is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ResponseParseError(
            f"Expected a JSON object at top level but got {type(data).__name__}"
        )
    return classify_response(data)
