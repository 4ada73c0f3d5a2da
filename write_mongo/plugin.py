"""Bind ``<Node>`` configuration blocks to registered destination nodes."""

from __future__ import annotations

from functools import partial
from typing import Any, Callable

from pydantic import ValidationError

from .config import (
    MAX_NAME_LEN,
    ConfigItem,
    NodeSettings,
    get_boolean,
    get_int,
    get_port_number,
    get_string,
    get_string_buffer,
)
from .data import DataSet, ValueList
from .encoder import DocumentLayout
from .errors import ConfigError, NodeError
from .host import PluginHost, UserData
from .logging_conf import get_logger
from .node import ClientFactory, DestinationNode

PLUGIN_NAME = "write_mongo"


def _get_layout(item: ConfigItem) -> DocumentLayout:
    return DocumentLayout.TYPED if get_boolean(item) else DocumentLayout.LEGACY


# option key (lowercase) -> (settings field, getter)
_NODE_OPTIONS: dict[str, tuple[str, Callable[[ConfigItem], Any]]] = {
    "host": ("host", get_string),
    "port": ("port", get_port_number),
    "timeout": ("timeout", get_int),
    "database": ("database", get_string),
    "user": ("user", get_string),
    "password": ("password", get_string),
    "storetypes": ("layout", _get_layout),
}


def write(ds: DataSet, vl: ValueList, user_data: UserData) -> int:
    """Write callback: 0 on success, -1 when the node could not store the sample."""

    node: DestinationNode = user_data.data
    try:
        node.write(ds, vl)
    except NodeError:
        return -1
    return 0


def free_node(node: DestinationNode) -> None:
    node.destroy()


def parse_node(ci: ConfigItem) -> NodeSettings:
    """Read one ``<Node "name">`` block into validated settings."""

    logger = get_logger("config")
    name = get_string_buffer(ci, MAX_NAME_LEN)
    options: dict[str, Any] = {}

    for child in ci.children:
        option = _NODE_OPTIONS.get(child.key.lower())
        if option is None:
            logger.warning("unknown_option", option=child.key, node=name)
            continue
        field_name, getter = option
        options[field_name] = getter(child)

    try:
        return NodeSettings(name=name, **options)
    except ValidationError as exc:
        raise ConfigError(f"Node {name!r}: {exc}") from exc


def configure_node(
    ci: ConfigItem, host: PluginHost, client_factory: ClientFactory | None = None
) -> DestinationNode:
    """Create a node from ``ci`` and register its write callback with ``host``."""

    settings = parse_node(ci)
    node = DestinationNode(settings, client_factory)

    callback_name = settings.callback_name
    status = host.register_write(callback_name, write, UserData(node, free_node))
    get_logger("config").info("registered_write_plugin", callback=callback_name, status=status)
    if status != 0:
        node.destroy()
        raise ConfigError(f"Registering write callback {callback_name} failed with status {status}")
    return node


def configure(ci: ConfigItem, host: PluginHost, client_factory: ClientFactory | None = None) -> int:
    """Complex-config handler. Node failures are logged and never abort the block."""

    logger = get_logger("config")
    for child in ci.children:
        if child.is_key("Node"):
            try:
                configure_node(child, host, client_factory)
            except ConfigError as exc:
                node_name = child.values[0] if child.values else None
                logger.error("node_config_failed", node=node_name, error=str(exc))
        else:
            logger.warning("unknown_top_level_option", option=child.key)
    return 0


def module_register(host: PluginHost, client_factory: ClientFactory | None = None) -> None:
    host.register_complex_config(PLUGIN_NAME, partial(configure, host=host, client_factory=client_factory))


__all__ = [
    "PLUGIN_NAME",
    "configure",
    "configure_node",
    "free_node",
    "module_register",
    "parse_node",
    "write",
]
