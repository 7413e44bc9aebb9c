"""Local file sink – writes samples to JSONL files."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import IO, Any

from .base import BaseSink, Sample

logger = logging.getLogger(__name__)


class LocalSink(BaseSink):
    """Writes samples to JSONL files on disk.

    One file per collection per day is created inside *output_dir*, named
    ``<collection>-YYYY-MM-DD.jsonl``.
    """

    def __init__(self, output_dir: str | Path = "./monitor_data") -> None:
        self._output_dir = Path(output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._files: dict[str, tuple[str, IO[str]]] = {}
        self._lock = threading.Lock()
        logger.info("LocalSink initialized → %s", self._output_dir)

    def _ensure_file(self, collection: str, day: str) -> IO[str]:
        current = self._files.get(collection)
        if current is not None and current[0] == day:
            return current[1]
        if current is not None:
            current[1].close()
        filepath = self._output_dir / f"{collection}-{day}.jsonl"
        fh = open(filepath, "a", encoding="utf-8")  # noqa: SIM115
        self._files[collection] = (day, fh)
        return fh

    def store(self, collection: str, value: Any) -> None:
        sample = Sample(value)
        record = {"createdAt": sample.created_at.isoformat(), "value": sample.value}
        try:
            with self._lock:
                fh = self._ensure_file(collection, sample.created_at.strftime("%Y-%m-%d"))
                fh.write(json.dumps(record) + "\n")
                fh.flush()
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error while writing metrics to %s: %s", collection, exc)

    def shutdown(self) -> None:
        with self._lock:
            for _day, fh in self._files.values():
                fh.close()
            self._files.clear()
        logger.info("LocalSink shut down")
