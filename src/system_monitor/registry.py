"""Monitor registry that orchestrates the built-in monitors."""

from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping

from .calculator.base import BaseCalculator, UndefinedCalculator
from .calculator.cpu import CpuCalculator
from .calculator.disk import DiskCalculator
from .calculator.memory import MemoryCalculator
from .config import GLOBAL_DEFAULTS, SystemMonitorConfig
from .errors import DuplicateMonitorError
from .monitor import Monitor, check_options
from .sink.base import BaseSink, UndefinedSink

logger = logging.getLogger(__name__)

BUILTIN_CALCULATORS: dict[str, type[BaseCalculator]] = {
    "cpu": CpuCalculator,
    "mem": MemoryCalculator,
    "disk": DiskCalculator,
}


class MonitorRegistry:
    """Ordered set of monitors, addressable by key.

    Instantiate it, :meth:`construct` one monitor per metric stream, adjust
    them by key, then call :meth:`start_all` / :meth:`stop_all`.
    """

    def __init__(self, defaults: Mapping[str, Any] | None = None) -> None:
        self._defaults = dict(GLOBAL_DEFAULTS)
        if defaults:
            self._defaults.update(defaults)
        check_options("defaults", self._defaults)
        self._monitors: dict[str, Monitor] = {}

    def construct(
        self,
        key: str,
        calculator: BaseCalculator | None = None,
        sink: BaseSink | None = None,
        **overrides: Any,
    ) -> Monitor:
        """Create, register and return a monitor for *key*.

        A missing calculator or sink is replaced by a placeholder that fails
        on every tick. Raises :class:`DuplicateMonitorError` if *key* is taken.
        """
        if key in self._monitors:
            raise DuplicateMonitorError(f"Monitor already registered: {key}")
        monitor = Monitor(
            key,
            calculator if calculator is not None else UndefinedCalculator(key),
            sink if sink is not None else UndefinedSink(key),
            defaults=self._defaults,
        )
        if overrides:
            monitor.configure(**overrides)
        self._monitors[key] = monitor
        return monitor

    def __getitem__(self, key: str) -> Monitor:
        return self._monitors[key]

    def __contains__(self, key: object) -> bool:
        return key in self._monitors

    def __iter__(self) -> Iterator[Monitor]:
        return iter(list(self._monitors.values()))

    def __len__(self) -> int:
        return len(self._monitors)

    def get(self, key: str) -> Monitor | None:
        return self._monitors.get(key)

    def keys(self) -> list[str]:
        return list(self._monitors)

    def start_all(self) -> None:
        """Start every monitor in registration order."""
        for monitor in self:
            monitor.start()
        logger.info("Started %d monitor(s)", len(self))

    def stop_all(self) -> None:
        """Stop every monitor."""
        for monitor in self:
            monitor.stop()
        logger.info("Stopped %d monitor(s)", len(self))


def build_registry(sink: BaseSink | None, config: SystemMonitorConfig | None = None) -> MonitorRegistry:
    """Register the built-in ``cpu``, ``mem`` and ``disk`` monitors.

    Options from ``config.monitors[key]`` become instance overrides; a monitor
    whose ``enabled`` flag is false is not registered.
    """
    config = config or SystemMonitorConfig()
    registry = MonitorRegistry(config.defaults)

    for key in config.monitors:
        if key not in BUILTIN_CALCULATORS:
            logger.warning("Ignoring configuration for unknown monitor %r", key)

    for key, calculator_cls in BUILTIN_CALCULATORS.items():
        monitor_cfg = config.monitor(key)
        if not monitor_cfg.enabled:
            logger.info("Monitor %s disabled by configuration", key)
            continue
        registry.construct(key, calculator_cls(), sink, **monitor_cfg.options)
    return registry
