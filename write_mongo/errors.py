"""Exception hierarchy shared by the write path and the config binder."""

from __future__ import annotations


class WriteMongoError(Exception):
    """Base class for all plugin errors."""


class ConfigError(WriteMongoError):
    """A configuration block could not be bound to a destination node."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class NodeError(WriteMongoError):
    """Failure raised by a destination node."""

    def __init__(self, node: str, message: str) -> None:
        super().__init__(f"{node}: {message}")
        self.node = node


class NodeConnectError(NodeError):
    """Connecting to the node's endpoint failed; retried on the next write."""


class NodeWriteError(NodeError):
    """The insert of a record failed."""


class NodeClosedError(NodeError):
    """The node was destroyed and no longer accepts writes."""


class UnknownValueTypeError(AssertionError):
    """A value carried a data source type outside the closed set."""


__all__ = [
    "ConfigError",
    "NodeClosedError",
    "NodeConnectError",
    "NodeError",
    "NodeWriteError",
    "UnknownValueTypeError",
    "WriteMongoError",
]
