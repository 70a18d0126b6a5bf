"""Build the WebLogic REST search request from the query tree.

The request is a separate structure from the rendering config: it lists, per
tree level, exactly which attributes WebLogic should return. It is built once
and reused for every probe.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from ..config.models import MBeanQuery


class RequestSpec(BaseModel):
    """Request body for ``serverRuntime/search``.

    ``fields`` is always present. WebLogic returns every attribute of an
    mBean when it is omitted, which would swamp the classifier.
    """

    fields: List[str] = Field(default_factory=list)
    children: Dict[str, "RequestSpec"] = Field(default_factory=dict)
    links: List[str] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON-ready request body (empty ``children`` omitted)."""
        payload: Dict[str, Any] = {"fields": list(self.fields), "links": []}
        if self.children:
            payload["children"] = {
                name: child.to_payload() for name, child in self.children.items()
            }
        return payload


def build_request_spec(query: MBeanQuery) -> RequestSpec:
    """Produce the ``RequestSpec`` for ``query``, recursively over children.

    Numeric field names come first, then enumerated field names, then the
    label value attribute. The label attribute is requested even though it is
    never exported as a value, since the mBean's label is computed from it.
    Duplicates keep their first position.
    """
    fields: List[str] = list(query.fields)
    fields.extend(string_field.name for string_field in query.string_fields)
    if query.label_value_attribute:
        fields.append(query.label_value_attribute)

    children = {
        name: build_request_spec(child) for name, child in query.children.items()
    }
    return RequestSpec(fields=list(dict.fromkeys(fields)), children=children)
