"""Probe correlation ID utilities for structured logging.

Provides a per-probe identifier via a ContextVar so the transport and the
HTTP layer can tag their log records for the same scrape without passing the
identifier through every call.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar

_probe_id_var: ContextVar[str] = ContextVar("probe_id", default="")


def new_probe_id() -> str:
    """Generate a probe id, make it current, and return it."""

    probe_id = uuid.uuid4().hex[:12]
    _probe_id_var.set(probe_id)
    return probe_id


def get_probe_id() -> str:
    """Return the current probe id, or empty string."""

    return _probe_id_var.get()
