"""
WebLogic exporter Python package.

Probes the WebLogic REST management API and re-exposes the runtime mBean tree
as Prometheus gauges, driven by a declarative YAML query tree.
"""

from .__version__ import __version__

__all__ = ["__version__"]
