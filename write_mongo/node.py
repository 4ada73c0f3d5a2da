"""Destination node: one lazily connected, serialized MongoDB writer."""

from __future__ import annotations

from threading import Lock
from typing import Any, Callable

from pymongo import MongoClient
from pymongo.errors import InvalidName, PyMongoError

from .config import NodeSettings
from .data import DataSet, ValueList
from .encoder import encode, namespace, split_namespace
from .errors import NodeClosedError, NodeConnectError, NodeWriteError
from .logging_conf import get_logger

ClientFactory = Callable[..., Any]


class DestinationNode:
    """Own the client of one configured endpoint and serialize writes to it.

    The client is created on the first write. A failed connect leaves the
    node disconnected so the next write tries again.
    """

    max_insert_failures = 3

    def __init__(self, settings: NodeSettings, client_factory: ClientFactory | None = None) -> None:
        self.settings = settings
        self._client_factory = client_factory or MongoClient
        self._client: Any = None
        self._lock = Lock()
        self._insert_failures = 0
        self.connected = False
        self.destroyed = False
        self.logger = get_logger("node", node=settings.name)

    @property
    def name(self) -> str:
        return self.settings.name

    # ------------------------------------------------------------------
    # Connection handling, callers hold the lock
    # ------------------------------------------------------------------
    def _client_options(self) -> dict[str, Any]:
        settings = self.settings
        options: dict[str, Any] = {
            "host": settings.endpoint_host,
            "port": settings.endpoint_port,
        }
        if settings.timeout > 0:
            options["serverSelectionTimeoutMS"] = settings.timeout
            options["connectTimeoutMS"] = settings.timeout
        if settings.user is not None:
            options["username"] = settings.user
            options["password"] = settings.password
        return options

    def _connect(self) -> None:
        host, port = self.settings.endpoint_host, self.settings.endpoint_port
        client = None
        try:
            client = self._client_factory(**self._client_options())
            client.admin.command("ping")
        except PyMongoError as exc:
            if client is not None:
                client.close()
            self.logger.error("connect_failed", host=host, port=port, error=str(exc))
            raise NodeConnectError(
                self.name, f'Connecting to host "{host}" (port {port}) failed: {exc}'
            ) from exc
        self._client = client
        self.connected = True
        self._insert_failures = 0
        self.logger.info("connected", host=host, port=port)

    def _disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self.connected = False

    def _insert_failed(self, exc: PyMongoError) -> None:
        self._insert_failures += 1
        self.logger.error("insert_failed", failures=self._insert_failures, error=str(exc))
        if self._insert_failures >= self.max_insert_failures:
            self.logger.warning("reconnect_scheduled", failures=self._insert_failures)
            self._disconnect()
            self._insert_failures = 0

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def write(self, ds: DataSet, vl: ValueList) -> None:
        """Encode one sample and insert it, connecting first if needed."""

        try:
            record = encode(ds, vl, self.settings.layout)
            database, collection = split_namespace(namespace(vl, self.settings.database))
        except ValueError as exc:
            self.logger.error("sample_rejected", plugin=vl.plugin, type=ds.type, error=str(exc))
            raise NodeWriteError(self.name, f"cannot store sample: {exc}") from exc

        with self._lock:
            if self.destroyed:
                raise NodeClosedError(self.name, "node has been destroyed")
            if not self.connected:
                self._connect()
            try:
                target = self._client[database][collection]
            except InvalidName as exc:
                # not counted as an insert failure
                self.logger.error(
                    "invalid_collection", database=database, collection=collection, error=str(exc)
                )
                raise NodeWriteError(self.name, f"invalid namespace {database}.{collection}: {exc}") from exc
            try:
                target.insert_one(record)
            except PyMongoError as exc:
                self._insert_failed(exc)
                raise NodeWriteError(self.name, f"insert into {database}.{collection} failed: {exc}") from exc
            self._insert_failures = 0

    def destroy(self) -> None:
        """Close the client if one was opened; safe to call repeatedly."""

        with self._lock:
            if self.connected:
                self._disconnect()
                self.logger.info("disconnected")
            self.destroyed = True

    def __repr__(self) -> str:
        return f"DestinationNode(name={self.name!r}, connected={self.connected})"


__all__ = ["ClientFactory", "DestinationNode"]
