"""Probe failure log throttling.

A WebLogic instance that is down fails every scrape. Logging each failure
floods the log, so failures are logged per target until a cap is reached,
then logging pauses until the next successful scrape for that target.
"""

import logging
from dataclasses import dataclass
from typing import Dict

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOGGED_ERRORS = 10


@dataclass
class ErrorLogConfig:
    """Configuration for probe failure logging."""

    max_logged_errors: int = DEFAULT_MAX_LOGGED_ERRORS


class ProbeErrorRegistry:
    """Per-target count of consecutive failed probes.

    State lives for the whole process and is keyed by target identity
    (``host:port``). A success removes the target's entry.
    """

    def __init__(self, config: ErrorLogConfig | None = None):
        """Initialize an empty registry.

        Args:
            config: Logging cap configuration.
        """
        self.config = config or ErrorLogConfig()
        self.failures: Dict[str, int] = {}

    def record_failure(self, target: str, error: Exception) -> bool:
        """Record a failed probe and log it unless logging is paused.

        Args:
            target: Identity of the probed instance.
            error: The exception that failed the probe.

        Returns:
            True if the failure was logged.
        """
        count = self.failures.get(target, 0)
        if count >= self.config.max_logged_errors:
            return False

        logger.error(
            "Failed to probe weblogic instance %s: %s",
            target,
            error,
            extra={"target": target, "error_type": type(error).__name__},
        )
        count += 1
        self.failures[target] = count
        if count == self.config.max_logged_errors:
            logger.warning(
                "Pausing logging of errors until a successful scrape occurs on %s...",
                target,
                extra={"target": target},
            )
        return True

    def record_success(self, target: str) -> None:
        """Forget previous failures for ``target``.

        Args:
            target: Identity of the probed instance.
        """
        if self.failures.pop(target, None) is not None:
            logger.info("Probe of %s succeeded, error logging resumed", target)

    def failure_count(self, target: str) -> int:
        """Return the number of logged consecutive failures for ``target``."""
        return self.failures.get(target, 0)
