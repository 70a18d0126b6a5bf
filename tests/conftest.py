"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so ``import wls_exporter``
resolves regardless of the working directory pytest chooses, and provides
query trees and WebLogic responses shared by several test modules.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()

from wls_exporter.config.models import MBeanQuery  # noqa: E402

BASIC_RESPONSE = (
    '{"healthState":{"state":"ok","subsystemName":null,"partitionName":null,'
    '"symptoms":[]},"name":"admin-server","JVMRuntime":{"heapFreeCurrent":71934392}}'
)

ADVANCED_QUERY: Dict[str, Any] = {
    "label_name": "server",
    "label_value_attribute": "name",
    "children": {
        "JVMRuntime": {
            "fields": ["heapFreeCurrent", "heapFreePercent", "heapSizeCurrent"],
            "metric_prefix": "wls_jvm_",
        },
        "applicationRuntimes": {
            "label_name": "application_runtime",
            "label_value_attribute": "name",
            "children": {
                "componentRuntimes": {
                    "label_name": "component_runtime",
                    "label_value_attribute": "name",
                    "fields": ["deploymentState", "sessionsOpenedTotalCount"],
                    "metric_prefix": "wls_webapp_",
                    "children": {
                        "servlets": {
                            "label_name": "servlet",
                            "label_value_attribute": "servletName",
                            "fields": [
                                "invocationTotalCount",
                                "executionTimeAverage",
                                "executionTimeHigh",
                                "executionTimeTotal",
                            ],
                            "metric_prefix": "wls_servlet_",
                        }
                    },
                }
            },
        },
        "JDBCServiceRuntime": {
            "label_name": "jdbc_service",
            "label_value_attribute": "name",
            "children": {
                "JDBCDataSourceRuntimeMBeans": {
                    "label_name": "datasource",
                    "label_value_attribute": "name",
                    "fields": ["connectionsTotalCount", "currCapacity"],
                    "string_fields": [
                        {
                            "name": "state",
                            "value_set": ["Running", "Suspended", "Shutdown"],
                        }
                    ],
                    "metric_prefix": "wls_datasource_",
                }
            },
        },
        "threadPoolRuntime": {
            "label_name": "threadpool",
            "label_value_attribute": "name",
            "fields": ["stuckThreadCount"],
            "metric_prefix": "wls_threadpool_",
        },
    },
}


@pytest.fixture
def basic_query() -> MBeanQuery:
    """Server health plus one JVM attribute, labelled by server name."""
    return MBeanQuery(
        label_name="server",
        label_value_attribute="name",
        fields=["healthState"],
        children={"JVMRuntime": MBeanQuery(fields=["heapFreeCurrent"])},
    )


@pytest.fixture
def advanced_query() -> MBeanQuery:
    """Multi-level query with collections, prefixes and a string field."""
    return MBeanQuery.model_validate(ADVANCED_QUERY)


@pytest.fixture
def basic_response() -> str:
    """Raw WebLogic reply for ``basic_query``."""
    return BASIC_RESPONSE
