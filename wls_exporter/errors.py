"""Exception taxonomy for the exporter.

Configuration errors are fatal at startup. Everything deriving from
``ProbeError`` fails a single probe only; the HTTP layer turns it into the
probe-failure indicator and moves on.
"""

from __future__ import annotations

from typing import Optional


class ExporterError(Exception):
    """Base class for all exporter errors."""


class ConfigurationError(ExporterError):
    """Invalid or unreadable exporter configuration."""


class ProbeError(ExporterError):
    """A single probe failed; no metrics are produced for it."""


class ClassificationError(ProbeError):
    """The WebLogic response has a shape the classifier cannot accept."""


class ResponseParseError(ClassificationError):
    """The response body is not a JSON object."""


class BeanConfigNotFoundError(ProbeError):
    """The response contains an mBean the configuration does not describe."""

    def __init__(self, bean_name: str) -> None:
        super().__init__(f"Unable to find monitoring config for mBean {bean_name}")
        self.bean_name = bean_name


class HealthStateError(ProbeError):
    """A healthState object without a usable ``state`` string."""


class TransportError(ProbeError):
    """Network, timeout or HTTP status failure talking to WebLogic."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DuplicateSeriesError(ProbeError):
    """Two gauges share a metric name and label set."""
