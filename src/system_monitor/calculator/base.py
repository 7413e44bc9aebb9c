"""Base interface for usage calculators."""

from __future__ import annotations

import abc
from typing import Any, Mapping

from ..errors import MonitorNotConfiguredError

MB = 1024 * 1024


class BaseCalculator(abc.ABC):
    """Abstract base class for usage calculators.

    ``default_options`` holds the metric-type configuration layer; a monitor
    merges it over the process-wide defaults and under its own overrides, then
    hands the merged mapping to :meth:`produce` on every tick.
    """

    default_options: Mapping[str, Any] = {}

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Calculator name used in configuration and logs."""

    @abc.abstractmethod
    def produce(self, options: Mapping[str, Any]) -> Any:
        """Compute the current metric value.

        Raises :class:`~system_monitor.errors.CalculatorFailure` when the
        failure is not worth retrying on the next tick.
        """

    def to_payload(self, value: Any, options: Mapping[str, Any]) -> Any:
        """Shape a produced value into what gets persisted."""
        return value


class UndefinedCalculator(BaseCalculator):
    """Placeholder for a monitor whose calculator was never provided."""

    def __init__(self, key: str) -> None:
        self._key = key

    @property
    def name(self) -> str:
        return "undefined"

    def produce(self, options: Mapping[str, Any]) -> Any:
        raise MonitorNotConfiguredError(f"Monitor usage is not defined: {self._key}")
