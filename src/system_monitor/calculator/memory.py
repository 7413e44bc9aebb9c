"""Memory usage calculator."""

from __future__ import annotations

import math
from typing import Any, Mapping

import psutil

from .base import MB, BaseCalculator


class MemoryCalculator(BaseCalculator):
    """Reports physical memory usage.

    ``percentage_output`` selects between an integer percentage used and the
    raw ``{freemem, totalmem}`` figures in megabytes.
    """

    default_options = {"percentage_output": True}

    @property
    def name(self) -> str:
        return "mem"

    def produce(self, options: Mapping[str, Any]) -> int | dict[str, float]:
        mem = psutil.virtual_memory()
        free, total = mem.available, mem.total

        if options.get("percentage_output", True):
            return 100 - math.floor(free / total * 100)
        return {"freemem": free / MB, "totalmem": total / MB}
