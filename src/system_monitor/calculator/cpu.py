"""CPU usage calculator."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import psutil

from .base import BaseCalculator

logger = logging.getLogger(__name__)

TIME_FIELDS = ("user", "nice", "system", "idle", "irq")


@dataclass(frozen=True)
class CpuTimes:
    """Idle and total CPU seconds summed over all logical cores."""

    idle: float
    total: float


def read_cpu_times() -> CpuTimes:
    """Aggregate per-core counters into a single totals record.

    Fields a platform does not report (``nice`` and ``irq`` on some systems)
    count as zero.
    """
    totals = dict.fromkeys(TIME_FIELDS, 0.0)
    for core in psutil.cpu_times(percpu=True):
        for field in TIME_FIELDS:
            totals[field] += getattr(core, field, 0.0)
    return CpuTimes(idle=totals["idle"], total=sum(totals.values()))


def usage_percent(idle: float, total: float) -> int:
    """Busy share of *total* as a floored integer percentage."""
    if total <= 0:
        logger.debug("Degenerate CPU sample (total=%s), reporting 0", total)
        return 0
    return math.floor((1 - idle / total) * 100)


def delta_usage_percent(before: CpuTimes, after: CpuTimes) -> int:
    """Utilization between two counter snapshots."""
    return usage_percent(after.idle - before.idle, after.total - before.total)


class CpuCalculator(BaseCalculator):
    """Computes CPU utilization.

    With ``update_interval`` set (milliseconds), two snapshots are taken that
    far apart and the usage over that window is reported. With it set to
    ``None`` the cumulative figure since boot is reported instead.
    """

    default_options = {"update_interval": 1000}

    def __init__(self, sleep: Callable[[float], None] = time.sleep) -> None:
        self._sleep = sleep

    @property
    def name(self) -> str:
        return "cpu"

    def produce(self, options: Mapping[str, Any]) -> int:
        update_interval = options.get("update_interval")
        if update_interval is None:
            times = read_cpu_times()
            return usage_percent(times.idle, times.total)

        before = read_cpu_times()
        self._sleep(update_interval / 1000.0)
        after = read_cpu_times()
        return delta_usage_percent(before, after)
