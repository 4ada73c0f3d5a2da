"""Configuration package exports."""

from .items import (
    MAX_NAME_LEN,
    ConfigItem,
    get_boolean,
    get_int,
    get_port_number,
    get_string,
    get_string_buffer,
    load_config,
)
from .models import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT_MS, NodeSettings

__all__ = [
    "ConfigItem",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT_MS",
    "MAX_NAME_LEN",
    "NodeSettings",
    "get_boolean",
    "get_int",
    "get_port_number",
    "get_string",
    "get_string_buffer",
    "load_config",
]
