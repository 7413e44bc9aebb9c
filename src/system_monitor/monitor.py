"""A single schedulable metric stream."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Mapping

from .calculator.base import BaseCalculator
from .config import GLOBAL_DEFAULTS
from .errors import CalculatorFailure
from .sink.base import BaseSink

logger = logging.getLogger(__name__)

JOIN_TIMEOUT_SECONDS = 5.0


def check_options(key: str, options: Mapping[str, Any]) -> None:
    """Reject timing options that would spin the scheduler or break the CPU sleep."""
    if "interval" in options:
        interval = options["interval"]
        if not isinstance(interval, (int, float)) or isinstance(interval, bool) or interval <= 0:
            raise ValueError(f"interval for monitor {key} must be a positive number of milliseconds, got {interval!r}")
    update_interval = options.get("update_interval")
    if update_interval is not None and (
        not isinstance(update_interval, (int, float)) or isinstance(update_interval, bool) or update_interval <= 0
    ):
        raise ValueError(
            f"update_interval for monitor {key} must be a positive number of milliseconds or None, got {update_interval!r}"
        )


class MonitorState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
    FAILED = "failed"


class Monitor:
    """Pairs a calculator with a sink and runs them on an interval.

    The configuration is merged from three layers, later ones winning:
    process-wide defaults (plus ``collection = key``), the calculator's
    ``default_options``, and the overrides given to :meth:`configure`.

    Each running monitor owns one daemon thread. Ticks of the same monitor
    never overlap: the next wait starts only after the previous
    produce-then-store cycle returned. A :class:`CalculatorFailure` moves the
    monitor to :attr:`MonitorState.FAILED` and stops its thread; an explicit
    :meth:`start` brings it back.
    """

    def __init__(
        self,
        key: str,
        calculator: BaseCalculator,
        sink: BaseSink,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        self.key = key
        self.calculator = calculator
        self.sink = sink
        self._defaults: dict[str, Any] = dict(GLOBAL_DEFAULTS if defaults is None else defaults)
        self._defaults["collection"] = key
        self._overrides: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.state = MonitorState.IDLE
        self.stop_reason: BaseException | None = None

    def __repr__(self) -> str:
        return f"Monitor(key={self.key!r}, state={self.state.value})"

    @property
    def configuration(self) -> dict[str, Any]:
        merged = dict(self._defaults)
        merged.update(self.calculator.default_options)
        merged.update(self._overrides)
        return merged

    @property
    def running(self) -> bool:
        return self._thread is not None

    def configure(self, **options: Any) -> Monitor:
        """Set instance overrides. Takes effect on the next :meth:`start`."""
        known = set(self._defaults) | set(self.calculator.default_options)
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown option(s) for monitor {self.key}: {', '.join(unknown)}")
        check_options(self.key, options)
        self._overrides.update(options)
        return self

    def sample(self) -> Any:
        """Compute the metric once and return it without storing it."""
        return self.calculator.produce(self.configuration)

    def tick(self) -> bool:
        """Run one produce-then-store cycle.

        Returns False if the calculator failed fatally and the monitor stopped.
        """
        return self._tick(None)

    def _tick(self, stop_event: threading.Event | None) -> bool:
        options = self.configuration
        try:
            value = self.calculator.produce(options)
        except CalculatorFailure as exc:
            logger.error("Monitor %s stopped after calculator failure: %s", self.key, exc)
            self._fail(exc, stop_event)
            return False
        except Exception:
            logger.exception("Calculator for monitor %s failed", self.key)
            return True

        try:
            self.sink.store(options["collection"], self.calculator.to_payload(value, options))
        except Exception:
            logger.exception("Sink for monitor %s failed", self.key)
        return True

    def _fail(self, exc: BaseException, stop_event: threading.Event | None) -> None:
        with self._lock:
            if stop_event is not None and stop_event is not self._stop_event:
                # a tick left over from an earlier run; only that run ends
                stop_event.set()
                return
            self._stop_event.set()
            self._thread = None
            self.state = MonitorState.FAILED
            self.stop_reason = exc

    def _run(self, stop_event: threading.Event, interval_seconds: float) -> None:
        """Background thread loop."""
        while not stop_event.wait(interval_seconds):
            self._tick(stop_event)

    def start(self) -> None:
        """Start ticking in the background. A running monitor is left alone."""
        with self._lock:
            if self._thread is not None:
                logger.debug("Monitor %s already running", self.key)
                return
            options = self.configuration
            check_options(self.key, options)
            interval = options["interval"]
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event, interval / 1000.0),
                name=f"monitor-{self.key}",
                daemon=True,
            )
            self.state = MonitorState.RUNNING
            self.stop_reason = None
            self._thread.start()
        logger.info("Monitor %s started (interval=%sms)", self.key, interval)

    def stop(self) -> None:
        """Stop future ticks. Safe to call on a monitor that is not running."""
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
            self._thread = None
            self.state = MonitorState.STOPPED
        if thread is not threading.current_thread():
            thread.join(timeout=JOIN_TIMEOUT_SECONDS)
        logger.info("Monitor %s stopped", self.key)
