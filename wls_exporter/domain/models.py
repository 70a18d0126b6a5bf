"""Internal data model shared by the classifier and the metric engine.

``ResponseNode`` is the typed form of one mBean instance from a WebLogic
response. ``BeanConfig`` is the flattened rendering rule for one mBean name.
``Gauge`` is the unit handed to the exposition layer.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class BeanConfig(BaseModel):
    """Rendering rules for one mBean name.

    Attributes
    ----------
    label_name: Optional[str]
        Label attached to metrics from this mBean.
    label_value_attribute: Optional[str]
        Response attribute holding the value of ``label_name``.
    metric_prefix: str
        Prefix for every metric name emitted by this mBean.
    string_field_info: Dict[str, Tuple[str, ...]]
        Enumerated attribute name to its possible values (deduplicated).
    """

    model_config = ConfigDict(frozen=True)

    label_name: Optional[str] = None
    label_value_attribute: Optional[str] = None
    metric_prefix: str = ""
    string_field_info: Dict[str, Tuple[str, ...]] = Field(default_factory=dict)


ConfigIndex = Mapping[str, BeanConfig]


class ResponseNode(BaseModel):
    """Classified WebLogic response for one mBean instance.

    Attributes
    ----------
    items: List[ResponseNode]
        Repeated instances of the same mBean, in response order.
    numeric_fields: Dict[str, float]
        Numeric attributes.
    string_fields: Dict[str, str]
        String attributes.
    object_fields: Dict[str, Any]
        Object-valued attributes that are data rather than child mBeans
        (e.g. ``healthState``), stored verbatim.
    children: Dict[str, ResponseNode]
        Child mBeans keyed by attribute name.
    """

    items: List["ResponseNode"] = Field(default_factory=list)
    numeric_fields: Dict[str, float] = Field(default_factory=dict)
    string_fields: Dict[str, str] = Field(default_factory=dict)
    object_fields: Dict[str, Any] = Field(default_factory=dict)
    children: Dict[str, "ResponseNode"] = Field(default_factory=dict)


class Gauge(BaseModel):
    """Single gauge observation ready for exposition.

    Attributes
    ----------
    name: str
        Metric name (prefix plus snake-cased attribute name).
    labels: Dict[str, str]
        Label set for this observation.
    value: float
        Current value.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    labels: Dict[str, str] = Field(default_factory=dict)
    value: float
