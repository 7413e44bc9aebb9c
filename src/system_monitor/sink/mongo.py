"""MongoDB sink – appends samples to per-monitor collections."""

from __future__ import annotations

import logging
import threading
from typing import Any

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..config import DEFAULT_DATABASE, DEFAULT_MONGO_URL
from ..errors import StorageConnectionError
from .base import BaseSink, Sample

logger = logging.getLogger(__name__)


class MongoSink(BaseSink):
    """Writes samples with ``insert_one`` into ``database[collection]``.

    The database handle is shared by every monitor and is attached once,
    either directly via :meth:`attach` or by :meth:`connect`. Samples stored
    before a handle is attached are dropped with a warning.
    """

    def __init__(self, database: Database | None = None) -> None:
        self._database = database
        self._client: MongoClient | None = None
        self._lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._database is not None

    def attach(self, database: Database) -> None:
        with self._lock:
            self._database = database

    def connect(self, url: str = DEFAULT_MONGO_URL, timeout_ms: int = 5000) -> Database:
        """Open a client for *url*, verify it answers, and attach its database.

        Raises :class:`StorageConnectionError` if the server cannot be reached.
        """
        client: MongoClient = MongoClient(url, serverSelectionTimeoutMS=timeout_ms)
        try:
            client.admin.command("ping")
            database = client.get_default_database(default=DEFAULT_DATABASE)
        except PyMongoError as exc:
            client.close()
            raise StorageConnectionError(f"Failed to connect to Mongo: {exc}") from exc

        with self._lock:
            self._client = client
            self._database = database
        logger.info("MongoSink connected → %s (database=%s)", url, database.name)
        return database

    def store(self, collection: str, value: Any) -> None:
        database = self._database
        if database is None:
            logger.warning("Storage not ready, dropping sample for %s", collection)
            return
        try:
            database[collection].insert_one(Sample(value).to_document())
        except PyMongoError as exc:
            logger.error("Error while inserting metrics into %s: %s", collection, exc)

    def shutdown(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
            self._database = None
        logger.info("MongoSink shut down")
