"""Exporter runtime: startup artifacts and the per-probe pipeline.

``WebLogicExporter`` builds the config index and the search request once from
the query tree, then runs any number of independent probes against them. The
index and request are never mutated after construction, so concurrent probes
share them without locking.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from ..adapters import ManagementAdapter
from ..adapters.weblogic import WebLogicAdapter
from ..config.models import ExporterConfig
from ..domain.classifier import parse_response_body
from ..domain.config_index import ROOT_BEAN_NAME, build_config_index
from ..domain.metrics import check_unique_series, create_metrics
from ..domain.models import ConfigIndex, Gauge
from ..domain.query import RequestSpec, build_request_spec
from ..errors import ConfigurationError
from ..utils.correlation import get_probe_id

logger = logging.getLogger(__name__)


class WebLogicExporter:
    """Probe a WebLogic instance and turn its runtime tree into gauges.

    Parameters
    ----------
    config: ExporterConfig
        Validated exporter configuration.
    adapter: Optional[ManagementAdapter]
        Transport to use; a ``WebLogicAdapter`` for ``config`` by default.

    Raises
    ------
    ConfigurationError
        If the query tree root requests nothing.
    """

    def __init__(
        self, config: ExporterConfig, adapter: Optional[ManagementAdapter] = None
    ) -> None:
        if config.queries.is_empty():
            raise ConfigurationError("Cannot use empty config. No queries specified")
        self.config = config
        self.index: ConfigIndex = build_config_index(config.queries, ROOT_BEAN_NAME)
        self.query: RequestSpec = build_request_spec(config.queries)
        self.adapter: ManagementAdapter = adapter or WebLogicAdapter(
            config.host,
            config.port,
            config.username,
            config.password,
            config.timeout_seconds,
            scheme=config.scheme,
            verify_tls=config.verify_tls,
        )
        self._started: bool = False
        logger.info(
            "exporter.init",
            extra={"target": config.target, "mbeans": sorted(self.index.keys())},
        )

    @property
    def target(self) -> str:
        """Identity of the probed instance."""
        return self.config.target

    def request_payload(self) -> Dict[str, Any]:
        """Return the JSON request body sent to WebLogic on every probe."""
        return self.query.to_payload()

    async def start(self) -> None:
        """Mark the exporter as started. Idempotent."""
        if self._started:
            logger.debug("exporter.start no-op: already started")
            return
        self._started = True
        logger.info("exporter.started", extra={"target": self.target})

    async def stop(self) -> None:
        """Close the transport. Idempotent."""
        if not self._started:
            logger.debug("exporter.stop no-op: not started")
            return
        self._started = False
        await self.adapter.aclose()
        logger.info("exporter.stopped", extra={"target": self.target})

    async def probe(self) -> List[Gauge]:
        """Run one probe: query WebLogic, classify the reply, build gauges.

        Raises
        ------
        ProbeError
            On transport, classification, config lookup, or duplicate
            series failures. No partial gauge list is ever returned.
        """
        start_time = time.time()
        body = await self.adapter.search(self.query)
        resp = parse_response_body(body)
        gauges = create_metrics(resp, self.index, ROOT_BEAN_NAME)
        check_unique_series(gauges)
        logger.debug(
            "exporter.probe.done",
            extra={
                "probe_id": get_probe_id(),
                "target": self.target,
                "gauges": len(gauges),
                "duration_ms": int((time.time() - start_time) * 1000),
            },
        )
        return gauges
