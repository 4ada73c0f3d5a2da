from __future__ import annotations

from write_mongo.config import ConfigItem
from write_mongo.host import LocalHost, UserData
from write_mongo.plugin import PLUGIN_NAME, configure


def test_user_data_is_freed_once() -> None:
    released = []
    user_data = UserData("datum", released.append)
    user_data.free()
    user_data.free()
    assert released == ["datum"]
    assert user_data.freed


def test_register_write_rejects_duplicate_names(local_host) -> None:
    callback = lambda ds, vl, ud: 0  # noqa: E731
    assert local_host.register_write("a", callback, UserData(None)) == 0
    assert local_host.register_write("a", callback, UserData(None)) == -1


def test_configure_without_handler_fails(local_host) -> None:
    assert local_host.configure("missing", ConfigItem("missing")) == -1


def test_concurrent_dispatch_to_one_node(local_host, client_factory, gauge_ds, gauge_sample) -> None:
    configure(ConfigItem(PLUGIN_NAME, children=[ConfigItem("Node", ("n",))]), local_host, client_factory)
    client_factory.insert_delay = 0.001

    futures = []
    for _ in range(100):
        futures.extend(local_host.write_async(gauge_ds, gauge_sample, name="write_mongo/n"))

    assert [future.result() for future in futures] == [0] * 100
    assert len(client_factory.inserts) == 100
    assert client_factory.max_in_flight == 1
    assert len(client_factory.clients) == 1


def test_shutdown_releases_nodes(client_factory, gauge_ds, gauge_sample) -> None:
    host = LocalHost(workers=2)
    configure(
        ConfigItem(PLUGIN_NAME, children=[ConfigItem("Node", ("n",)), ConfigItem("Node", ("idle",))]),
        host,
        client_factory,
    )
    nodes = {name: user_data.data for name, user_data in host.registered().items()}
    host.write_async(gauge_ds, gauge_sample, name="write_mongo/n")[0].result()

    host.shutdown()

    assert host.registered() == {}
    assert all(node.destroyed for node in nodes.values())
    assert client_factory.clients[0].closed
    assert len(client_factory.clients) == 1
