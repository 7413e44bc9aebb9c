"""Base interface for sample sinks."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..errors import MonitorNotConfiguredError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Sample:
    """A single persisted metric value."""

    value: Any
    created_at: datetime = field(default_factory=utcnow)

    def to_document(self) -> dict[str, Any]:
        return {"createdAt": self.created_at, "value": self.value}


class BaseSink(abc.ABC):
    """Abstract base for append-only sinks.

    :meth:`store` must not raise for I/O or connectivity problems: the sample
    is logged and dropped instead.
    """

    @abc.abstractmethod
    def store(self, collection: str, value: Any) -> None:
        """Append ``{createdAt: now, value}`` to *collection*."""

    def shutdown(self) -> None:
        """Flush and release resources."""


class UndefinedSink(BaseSink):
    """Placeholder for a monitor whose sink was never provided."""

    def __init__(self, key: str) -> None:
        self._key = key

    def store(self, collection: str, value: Any) -> None:
        raise MonitorNotConfiguredError(f"Monitor persistence is not defined: {self._key}")
