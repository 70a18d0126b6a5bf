"""Tests for building the WebLogic search request from the query tree."""

from __future__ import annotations

from wls_exporter.config.models import MBeanQuery
from wls_exporter.domain.query import build_request_spec


def test_basic_request(basic_query: MBeanQuery):
    """Numeric fields come first, then the label value attribute."""
    spec = build_request_spec(basic_query)
    assert spec.fields == ["healthState", "name"]
    assert spec.children["JVMRuntime"].fields == ["heapFreeCurrent"]
    assert spec.children["JVMRuntime"].children == {}
    assert spec.links == []


def test_empty_fields_are_explicit():
    """A node without fields requests the explicit empty list."""
    spec = build_request_spec(MBeanQuery(children={"JVMRuntime": MBeanQuery()}))
    assert spec.fields == []
    assert spec.children["JVMRuntime"].to_payload() == {"fields": [], "links": []}


def test_label_attribute_only():
    """A node with only a label still requests the label value attribute."""
    query = MBeanQuery(
        label_name="server",
        label_value_attribute="name",
        children={"JVMRuntime": MBeanQuery(fields=["heapFreeCurrent"])},
    )
    assert build_request_spec(query).fields == ["name"]


def test_string_fields_follow_numeric_fields():
    """Enumerated attribute names are requested after numeric ones."""
    query = MBeanQuery(
        label_name="datasource",
        label_value_attribute="name",
        fields=["currCapacity"],
        string_fields=[{"name": "state", "value_set": ["Running", "Suspended"]}],
    )
    assert build_request_spec(query).fields == ["currCapacity", "state", "name"]


def test_fields_deduplicated():
    """An attribute listed twice is requested once, at its first position."""
    query = MBeanQuery(
        label_name="component",
        label_value_attribute="name",
        fields=["name", "deploymentState"],
    )
    assert build_request_spec(query).fields == ["name", "deploymentState"]


def test_payload_shape(advanced_query: MBeanQuery):
    """The payload nests children and always carries fields and links."""
    payload = build_request_spec(advanced_query).to_payload()

    assert payload["fields"] == ["name"]
    assert payload["links"] == []
    jdbc = payload["children"]["JDBCServiceRuntime"]
    assert jdbc["fields"] == ["name"]
    assert jdbc["children"]["JDBCDataSourceRuntimeMBeans"] == {
        "fields": ["connectionsTotalCount", "currCapacity", "state", "name"],
        "links": [],
    }
    servlets = payload["children"]["applicationRuntimes"]["children"][
        "componentRuntimes"
    ]["children"]["servlets"]
    assert servlets["fields"][-1] == "servletName"
