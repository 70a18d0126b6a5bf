"""Generate gauges from a classified response and the config index.

The engine walks the ``ResponseNode`` tree alongside the ``ConfigIndex``.
Every mBean contributes its numeric attributes, one-hot groups for its
enumerated string attributes and health state, then the gauges of its
repeated instances (``items``) and of its child mBeans.

Label context is immutable: each level builds a new mapping from its own
label and the inherited one, so siblings never see each other's labels.
Inherited labels take precedence over an mBean's own label of the same name.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Set, Tuple

from ..errors import BeanConfigNotFoundError, DuplicateSeriesError, HealthStateError
from .classifier import HEALTH_STATE_FIELD
from .config_index import ROOT_BEAN_NAME
from .models import BeanConfig, ConfigIndex, Gauge, ResponseNode
from .utils.naming import to_snake

LabelContext = Mapping[str, str]

HEALTH_STATES = ("ok", "overloaded", "warn", "critical", "failed")
HEALTH_STATE_METRIC = "health_state"

_NO_LABELS: LabelContext = MappingProxyType({})


def _bean_labels(
    config: BeanConfig, resp: ResponseNode, inherited: LabelContext
) -> LabelContext:
    labels: Dict[str, str] = {}
    if config.label_name and config.label_value_attribute:
        value = resp.string_fields.get(config.label_value_attribute)
        if value is not None:
            labels[config.label_name] = value
    labels.update(inherited)
    return MappingProxyType(labels)


def _one_hot(
    name: str,
    label_name: str,
    candidates: Tuple[str, ...],
    observed: str,
    labels: LabelContext,
) -> List[Gauge]:
    return [
        Gauge(
            name=name,
            labels={**labels, label_name: candidate},
            value=1.0 if candidate == observed else 0.0,
        )
        for candidate in candidates
    ]


def _health_state(health: Any) -> str:
    state = health.get("state") if isinstance(health, dict) else None
    if not isinstance(state, str):
        raise HealthStateError(
            f"Malformed {HEALTH_STATE_FIELD} object, expected a string 'state' "
            f"but got {health!r}"
        )
    return state


def create_bean_metrics(
    bean_name: str,
    resp: ResponseNode,
    index: ConfigIndex,
    labels: LabelContext = _NO_LABELS,
) -> List[Gauge]:
    """Create the gauges for one mBean instance and everything below it.

    Parameters
    ----------
    bean_name: str
        Name of the mBean ``resp`` is an instance of.
    resp: ResponseNode
        Classified response for the instance.
    index: ConfigIndex
        Flattened rendering rules.
    labels: LabelContext
        Labels inherited from ancestors.

    Raises
    ------
    BeanConfigNotFoundError
        If ``bean_name`` or any descendant mBean is missing from ``index``.
    HealthStateError
        If a healthState object has no string ``state``.
    """
    config = index.get(bean_name)
    if config is None:
        raise BeanConfigNotFoundError(bean_name)

    bean_labels = _bean_labels(config, resp, labels)
    prefix = config.metric_prefix
    metrics: List[Gauge] = [
        Gauge(
            name=prefix + to_snake(field_name), labels=dict(bean_labels), value=value
        )
        for field_name, value in resp.numeric_fields.items()
    ]

    # Enumerate every possible value so each state is its own stable series
    for field_name, candidates in config.string_field_info.items():
        observed = resp.string_fields.get(field_name)
        if observed is None:
            continue
        snake = to_snake(field_name)
        metrics.extend(
            _one_hot(prefix + snake, snake, candidates, observed, bean_labels)
        )

    if HEALTH_STATE_FIELD in resp.object_fields:
        state = _health_state(resp.object_fields[HEALTH_STATE_FIELD])
        metrics.extend(
            _one_hot(
                prefix + HEALTH_STATE_METRIC,
                "state",
                HEALTH_STATES,
                state,
                bean_labels,
            )
        )

    for item in resp.items:
        metrics.extend(create_bean_metrics(bean_name, item, index, bean_labels))

    for child_name, child in resp.children.items():
        metrics.extend(create_bean_metrics(child_name, child, index, bean_labels))

    return metrics


def check_unique_series(gauges: List[Gauge]) -> None:
    """Reject a gauge list in which two gauges are the same series.

    Collection items whose mBean has no label, or attributes that snake-case
    to the same name, produce gauges Prometheus cannot tell apart.

    Raises
    ------
    DuplicateSeriesError
        On the first repeated ``(name, labels)`` pair.
    """
    seen: Set[Tuple[str, FrozenSet[Tuple[str, str]]]] = set()
    for gauge in gauges:
        key = (gauge.name, frozenset(gauge.labels.items()))
        if key in seen:
            raise DuplicateSeriesError(
                f"Duplicate series {gauge.name}{dict(gauge.labels)}; "
                "add a label_name to the mBean that repeats"
            )
        seen.add(key)


def create_metrics(
    resp: ResponseNode, index: ConfigIndex, root_bean_name: str = ROOT_BEAN_NAME
) -> List[Gauge]:
    """Create all gauges for a classified ``serverRuntime`` response."""
    return create_bean_metrics(root_bean_name, resp, index)
