from .base import BaseCalculator
from .cpu import CpuCalculator
from .disk import DiskCalculator
from .memory import MemoryCalculator

__all__ = ["BaseCalculator", "CpuCalculator", "DiskCalculator", "MemoryCalculator"]
