"""Exceptions raised by system_monitor."""

from __future__ import annotations


class SystemMonitorError(Exception):
    """Base class for all system_monitor errors."""


class StorageConnectionError(SystemMonitorError):
    """The backing store could not be reached at startup."""


class CalculatorFailure(SystemMonitorError):
    """A calculator failed in a way that retrying will not fix.

    A monitor receiving this stops its own scheduler.
    """


class MonitorNotConfiguredError(SystemMonitorError):
    """A monitor was ticked before its calculator or sink was provided."""


class DuplicateMonitorError(SystemMonitorError):
    """A monitor with the same key is already registered."""
