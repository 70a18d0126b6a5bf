"""Render probe results in the Prometheus text exposition format.

A fresh ``CollectorRegistry`` is built for every scrape: the gauges of one
probe are never mixed with those of another.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import GaugeMetricFamily, Metric

from ..domain.models import Gauge

PROBE_SUCCESS_METRIC = "weblogic_probe_success"
PROBE_SUCCESS_HELP = "Displays whether or not the probe was a success"
GAUGE_HELP = "WebLogic runtime mBean attribute"


class GaugeCollector:
    """Collector yielding one gauge family per metric name.

    Samples of one family may carry different label sets (e.g. per-mBean
    labels), so samples are added directly rather than through a fixed
    label-name list.
    """

    def __init__(self, gauges: Iterable[Gauge], success: bool) -> None:
        self._gauges = list(gauges)
        self._success = success

    def collect(self) -> Iterator[Metric]:
        success = GaugeMetricFamily(PROBE_SUCCESS_METRIC, PROBE_SUCCESS_HELP)
        success.add_metric([], 1.0 if self._success else 0.0)
        yield success

        families: Dict[str, GaugeMetricFamily] = {}
        for gauge in self._gauges:
            family = families.get(gauge.name)
            if family is None:
                family = GaugeMetricFamily(gauge.name, GAUGE_HELP)
                families[gauge.name] = family
            family.add_sample(gauge.name, dict(gauge.labels), gauge.value)
        yield from families.values()


def render_metrics(gauges: List[Gauge], success: bool) -> bytes:
    """Render ``gauges`` plus the probe success indicator.

    When ``success`` is False only the indicator is rendered, whatever
    ``gauges`` holds.
    """
    registry = CollectorRegistry()
    registry.register(GaugeCollector(gauges if success else [], success))
    return generate_latest(registry)
