"""
Sizing-pipeline callback protocol and implementations.

Callbacks provide structured progress reporting for ``build_sizing_field()``:

* **NullCallback** — does nothing (default for library use).
* **LoggingCallback** — logs progress via Python logging (CLI mode).
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class SizingCallback(Protocol):
    """Protocol for sizing-pipeline progress reporting."""

    def on_status(self, status: str, **kwargs: Any) -> None:
        """Called when the pipeline stage changes (e.g. 'building slope layer', 'grading')."""
        ...

    def on_metric(self, key: str, value: Any) -> None:
        """Called to report a metric (e.g. grading_iterations, timestep_s)."""
        ...

    def on_file(self, key: str, filepath: str) -> None:
        """Called to report an output file (e.g. sizing function, summary)."""
        ...


class NullCallback:
    """Callback that silently discards all events.  Default for library use."""

    def on_status(self, status: str, **kwargs: Any) -> None:
        pass

    def on_metric(self, key: str, value: Any) -> None:
        pass

    def on_file(self, key: str, filepath: str) -> None:
        pass


class LoggingCallback:
    """Callback that logs events via Python logging.  Useful for CLI runs."""

    def __init__(self, logger_instance: logging.Logger | None = None):
        self._logger = logger_instance or logger

    def on_status(self, status: str, **kwargs: Any) -> None:
        self._logger.info("status: %s %s", status, kwargs if kwargs else "")

    def on_metric(self, key: str, value: Any) -> None:
        self._logger.info("metric: %s = %s", key, value)

    def on_file(self, key: str, filepath: str) -> None:
        self._logger.info("file: %s -> %s", key, filepath)
