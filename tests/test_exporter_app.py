"""Exporter lifecycle and probe pipeline tests with a mocked transport."""

from __future__ import annotations

from typing import List, Optional

import pytest

from wls_exporter.config.models import ExporterConfig, MBeanQuery
from wls_exporter.domain.query import RequestSpec
from wls_exporter.errors import (
    BeanConfigNotFoundError,
    ConfigurationError,
    DuplicateSeriesError,
    ResponseParseError,
    TransportError,
)
from wls_exporter.server.app import WebLogicExporter


class _MockAdapter:
    """Management adapter replaying a fixed body or raising an error."""

    def __init__(self, body: bytes = b"{}", exc: Optional[Exception] = None):
        self._body = body
        self._exc = exc
        self.requests: List[RequestSpec] = []
        self.closed = 0

    async def search(self, spec: RequestSpec) -> bytes:
        """Record the request and return the configured body."""
        self.requests.append(spec)
        if self._exc is not None:
            raise self._exc
        return self._body

    async def aclose(self) -> None:
        """Count closes."""
        self.closed += 1


def _config(query: MBeanQuery) -> ExporterConfig:
    return ExporterConfig(host="wls.example.com", port=7001, queries=query)


def test_empty_root_rejected():
    """A root requesting nothing is refused at construction."""
    with pytest.raises(ConfigurationError, match="Cannot use empty config"):
        WebLogicExporter(_config(MBeanQuery()), adapter=_MockAdapter())


def test_startup_artifacts(advanced_query: MBeanQuery):
    """Index and request are built once from the query tree."""
    exporter = WebLogicExporter(_config(advanced_query), adapter=_MockAdapter())
    assert exporter.target == "wls.example.com:7001"
    assert "serverRuntime" in exporter.index
    assert "servlets" in exporter.index
    payload = exporter.request_payload()
    assert payload["fields"] == ["name"]
    assert "JVMRuntime" in payload["children"]


def test_default_adapter_targets_config(basic_query: MBeanQuery):
    """Without an injected adapter a WebLogicAdapter for the target is used."""
    exporter = WebLogicExporter(_config(basic_query))
    assert exporter.adapter.base_url == "http://wls.example.com:7001"


@pytest.mark.asyncio
async def test_probe_pipeline(basic_query: MBeanQuery, basic_response: str):
    """A probe sends the prebuilt request and returns gauges."""
    adapter = _MockAdapter(basic_response.encode())
    exporter = WebLogicExporter(_config(basic_query), adapter=adapter)

    gauges = await exporter.probe()

    assert adapter.requests == [exporter.query]
    assert len(gauges) == 6
    assert gauges[-1].name == "heap_free_current"
    assert gauges[-1].value == 71934392.0


@pytest.mark.asyncio
async def test_probes_are_independent(basic_query: MBeanQuery, basic_response: str):
    """Repeated probes yield equal results from the same reply."""
    exporter = WebLogicExporter(
        _config(basic_query), adapter=_MockAdapter(basic_response.encode())
    )
    assert await exporter.probe() == await exporter.probe()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("adapter", "error"),
    [
        (_MockAdapter(exc=TransportError("refused")), TransportError),
        (_MockAdapter(b"not json"), ResponseParseError),
        (_MockAdapter(b'{"unknownRuntime": {"a": 1}}'), BeanConfigNotFoundError),
        (
            _MockAdapter(b'{"JVMRuntime": {"items": [{"x": 1}, {"x": 2}]}}'),
            DuplicateSeriesError,
        ),
    ],
)
async def test_probe_failures_propagate(basic_query, adapter, error):
    """Every failure mode surfaces as its ProbeError subclass."""
    exporter = WebLogicExporter(_config(basic_query), adapter=adapter)
    with pytest.raises(error):
        await exporter.probe()


@pytest.mark.asyncio
async def test_start_stop_idempotent(basic_query: MBeanQuery):
    """The adapter is closed once, and only after a start."""
    adapter = _MockAdapter()
    exporter = WebLogicExporter(_config(basic_query), adapter=adapter)

    await exporter.stop()
    assert adapter.closed == 0

    await exporter.start()
    await exporter.start()
    await exporter.stop()
    await exporter.stop()
    assert adapter.closed == 1
