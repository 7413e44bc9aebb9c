"""Disk space calculator."""

from __future__ import annotations

import math
from typing import Any, Mapping

import psutil

from ..errors import CalculatorFailure
from .base import MB, BaseCalculator


class DiskCalculator(BaseCalculator):
    """Reports free and used space at ``mount_point`` in megabytes.

    A failed query raises :class:`CalculatorFailure`: an unreadable mount
    point does not heal between ticks, so the owning monitor stops itself.
    """

    default_options = {"mount_point": "/", "free_only": False}

    @property
    def name(self) -> str:
        return "disk"

    def produce(self, options: Mapping[str, Any]) -> dict[str, int]:
        mount_point = options.get("mount_point", "/")
        try:
            usage = psutil.disk_usage(mount_point)
        except OSError as exc:
            raise CalculatorFailure(f"Disk query failed for {mount_point!r}: {exc}") from exc

        free, total = usage.free, usage.total
        return {
            "free": math.floor(free / MB),
            "used": math.floor((total - free) / MB),
        }

    def to_payload(self, value: dict[str, int], options: Mapping[str, Any]) -> Any:
        if options.get("free_only"):
            return value["free"]
        return value
