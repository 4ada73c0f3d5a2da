"""Shared fixtures: sample data and an in-memory stand-in for MongoClient."""

from __future__ import annotations

import time
from threading import Lock
from typing import Any, Callable, Iterable

import pytest
from pymongo.errors import AutoReconnect, InvalidName, ServerSelectionTimeoutError

from write_mongo.config import NodeSettings
from write_mongo.data import DataSet, DSType, ValueList
from write_mongo.host import LocalHost


class FakeCollection:
    def __init__(self, client: "FakeClient", database: str, name: str) -> None:
        self.client = client
        self.database = database
        self.name = name

    def insert_one(self, document: dict) -> None:
        self.client.factory.record_insert(f"{self.database}.{self.name}", document)


class FakeDatabase:
    def __init__(self, client: "FakeClient", name: str) -> None:
        self.client = client
        self.name = name

    def __getitem__(self, name: str) -> FakeCollection:
        if "$" in name or name.startswith(".") or name.endswith("."):
            raise InvalidName(f"collection names must not contain '$' or start/end with '.': {name}")
        return FakeCollection(self.client, self.name, name)

    def command(self, name: str) -> dict:
        self.client.factory.check_reachable()
        return {"ok": 1.0}


class FakeClient:
    def __init__(self, factory: "FakeClientFactory", options: dict[str, Any]) -> None:
        self.factory = factory
        self.options = options
        self.closed = False

    @property
    def admin(self) -> FakeDatabase:
        return FakeDatabase(self, "admin")

    def __getitem__(self, name: str) -> FakeDatabase:
        return FakeDatabase(self, name)

    def close(self) -> None:
        self.closed = True


class FakeClientFactory:
    """Callable used in place of ``MongoClient``; records every insert."""

    def __init__(self) -> None:
        self.clients: list[FakeClient] = []
        self.inserts: list[tuple[str, dict]] = []
        self.reachable = True
        self.failing_inserts = 0
        self.insert_delay = 0.0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = Lock()

    def __call__(self, **options: Any) -> FakeClient:
        client = FakeClient(self, options)
        self.clients.append(client)
        return client

    def check_reachable(self) -> None:
        if not self.reachable:
            raise ServerSelectionTimeoutError("No servers found yet")

    def record_insert(self, ns: str, document: dict) -> None:
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.insert_delay:
                time.sleep(self.insert_delay)
            if self.failing_inserts:
                self.failing_inserts -= 1
                raise AutoReconnect("connection closed")
            self.inserts.append((ns, document))
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def client_factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def node_settings() -> Callable[..., NodeSettings]:
    def _builder(**overrides: Any) -> NodeSettings:
        base: dict[str, Any] = {"name": "primary"}
        base.update(overrides)
        return NodeSettings(**base)

    return _builder


@pytest.fixture
def gauge_ds() -> DataSet:
    return DataSet.build("gauge", [("value", DSType.GAUGE)])


@pytest.fixture
def gauge_sample() -> ValueList:
    return ValueList(
        values=[3.14],
        time=1700000000,
        host="h1",
        plugin="cpu",
        plugin_instance="0",
        type="gauge",
        type_instance="idle",
    )


@pytest.fixture
def counter_ds() -> DataSet:
    return DataSet.build("if_octets", [("rx", DSType.COUNTER), ("tx", DSType.COUNTER)])


@pytest.fixture
def counter_sample() -> ValueList:
    return ValueList(
        values=[100, 200],
        time=1700000001,
        host="h1",
        plugin="if",
        plugin_instance="eth0",
        type="if_octets",
    )


@pytest.fixture
def local_host() -> Iterable[LocalHost]:
    host = LocalHost(workers=8)
    yield host
    host.shutdown()
