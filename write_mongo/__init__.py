"""collectd write plugin storing samples in MongoDB."""

from .data import DataSet, DataSource, DSType, ValueList
from .encoder import DocumentLayout, encode, encode_bson, namespace
from .errors import (
    ConfigError,
    NodeClosedError,
    NodeConnectError,
    NodeError,
    NodeWriteError,
    UnknownValueTypeError,
    WriteMongoError,
)
from .host import LocalHost, PluginHost, UserData
from .node import DestinationNode
from .plugin import PLUGIN_NAME, configure, configure_node, module_register, write

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DSType",
    "DataSet",
    "DataSource",
    "DestinationNode",
    "DocumentLayout",
    "LocalHost",
    "NodeClosedError",
    "NodeConnectError",
    "NodeError",
    "NodeWriteError",
    "PLUGIN_NAME",
    "PluginHost",
    "UnknownValueTypeError",
    "UserData",
    "ValueList",
    "WriteMongoError",
    "configure",
    "configure_node",
    "encode",
    "encode_bson",
    "module_register",
    "namespace",
    "write",
]
