"""Flatten the query tree into a lookup from mBean name to rendering rules.

The index is built once at startup and shared read-only by every probe.
mBean names are assumed unique across the tree: when two nodes share a name
the one visited last (depth-first, declaration order) wins.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict

from ..config.models import MBeanQuery
from .models import BeanConfig, ConfigIndex

# Root of WebLogic's runtime mBean tree; the search endpoint is rooted here.
ROOT_BEAN_NAME = "serverRuntime"


def _bean_config(query: MBeanQuery) -> BeanConfig:
    string_field_info = {
        field.name: tuple(dict.fromkeys(field.value_set))
        for field in query.string_fields
    }
    return BeanConfig(
        label_name=query.label_name,
        label_value_attribute=query.label_value_attribute,
        metric_prefix=query.metric_prefix,
        string_field_info=string_field_info,
    )


def _flatten(bean_name: str, query: MBeanQuery, index: Dict[str, BeanConfig]) -> None:
    index[bean_name] = _bean_config(query)
    for child_name, child in query.children.items():
        _flatten(child_name, child, index)


def build_config_index(
    query: MBeanQuery, root_bean_name: str = ROOT_BEAN_NAME
) -> ConfigIndex:
    """Build the mBean-name lookup for ``query`` and all of its descendants.

    Parameters
    ----------
    query: MBeanQuery
        Root of the query tree.
    root_bean_name: str
        Name under which the root node is indexed.

    Returns
    -------
    ConfigIndex
        Read-only mapping of mBean name to ``BeanConfig``.
    """
    index: Dict[str, BeanConfig] = {}
    _flatten(root_bean_name, query, index)
    return MappingProxyType(index)
