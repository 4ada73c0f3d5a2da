"""Host configuration tree and typed value getters."""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

import yaml

from ..errors import ConfigError

ConfigValue = Union[str, int, float, bool]

# DATA_MAX_NAME_LEN of the host, terminating byte included
MAX_NAME_LEN = 128


@dataclass(slots=True)
class ConfigItem:
    """One ``Key value...`` line or ``<Key value...>`` block of the host config."""

    key: str
    values: tuple[ConfigValue, ...] = ()
    children: list["ConfigItem"] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.values = tuple(self.values)

    def is_key(self, name: str) -> bool:
        return self.key.lower() == name.lower()

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def from_mapping(cls, key: str, payload: Mapping[str, Any] | None) -> "ConfigItem":
        """Build a block from a mapping.

        Scalars and scalar lists become options. A nested mapping becomes one
        block per entry, the entry key being the block argument::

            Node:
              local:
                Host: localhost
        """

        return cls(key=key, children=list(_items_from_mapping(payload or {})))

    @classmethod
    def from_collectd(cls, conf: Any) -> "ConfigItem":
        """Convert collectd's ``Config`` object (key, values, children)."""

        return cls(
            key=str(conf.key),
            values=tuple(conf.values),
            children=[cls.from_collectd(child) for child in conf.children],
        )


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def _items_from_mapping(payload: Mapping[str, Any]) -> Iterable[ConfigItem]:
    for key, value in payload.items():
        key = str(key)
        if isinstance(value, Mapping):
            for argument, body in value.items():
                if body is not None and not isinstance(body, Mapping):
                    raise ConfigError(f"Block {key} {argument!r} must contain a mapping", key=key)
                yield ConfigItem(key=key, values=(argument,), children=list(_items_from_mapping(body or {})))
        elif isinstance(value, (list, tuple)):
            if not all(_is_scalar(entry) for entry in value):
                raise ConfigError(f"Option {key} only accepts scalar values", key=key)
            yield ConfigItem(key=key, values=tuple(value))
        elif value is None:
            yield ConfigItem(key=key)
        elif _is_scalar(value):
            yield ConfigItem(key=key, values=(value,))
        else:
            raise ConfigError(f"Unsupported value for option {key}: {value!r}", key=key)


def load_config(path: Path, key: str = "write_mongo") -> ConfigItem:
    """Read a YAML file into the plugin's configuration block."""

    payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return ConfigItem.from_mapping(key, payload)


# ----------------------------------------------------------------------
# Typed getters
# ----------------------------------------------------------------------
def _single_value(item: ConfigItem) -> ConfigValue:
    if len(item.values) != 1:
        raise ConfigError(f"The `{item.key}' option requires exactly one argument.", key=item.key)
    return item.values[0]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def get_string(item: ConfigItem) -> str:
    value = _single_value(item)
    if not isinstance(value, str):
        raise ConfigError(f"The `{item.key}' option requires exactly one string argument.", key=item.key)
    return value


def get_string_buffer(item: ConfigItem, size: int = MAX_NAME_LEN) -> str:
    """Like :func:`get_string`, truncated to fit a ``size`` byte buffer."""

    return get_string(item)[: size - 1]


def get_int(item: ConfigItem) -> int:
    value = _single_value(item)
    if not _is_number(value):
        raise ConfigError(f"The `{item.key}' option requires exactly one numeric argument.", key=item.key)
    return int(value)


def get_boolean(item: ConfigItem) -> bool:
    value = _single_value(item)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False
    raise ConfigError(f"The `{item.key}' option requires exactly one boolean argument.", key=item.key)


def get_port_number(item: ConfigItem) -> int:
    """Port as a number or a numeric/service string, within 1..65535."""

    value = _single_value(item)
    if _is_number(value):
        port = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            port = int(text)
        else:
            try:
                port = socket.getservbyname(text, "tcp")
            except OSError:
                raise ConfigError(
                    f"The `{item.key}' option: unknown service name \"{text}\".", key=item.key
                ) from None
    else:
        raise ConfigError(f"The `{item.key}' option requires a port number.", key=item.key)

    if port < 1 or port > 65535:
        raise ConfigError(
            f"The `{item.key}' option: port number {port} is out of range (1-65535).", key=item.key
        )
    return port


__all__ = [
    "ConfigItem",
    "ConfigValue",
    "MAX_NAME_LEN",
    "get_boolean",
    "get_int",
    "get_port_number",
    "get_string",
    "get_string_buffer",
    "load_config",
]
