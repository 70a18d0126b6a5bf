"""
Shared utilities for the domain layer.

Modules
-------
naming
    Conversion of WebLogic camelCase attribute names to snake_case metric
    and label names
"""

__all__ = []
