"""Run the plugin inside collectd's embedded Python interpreter.

collectd only exposes its ``collectd`` module to code it loads itself, so the
module is imported when a :class:`CollectdHost` is created, never at import
time of this file.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from .config import ConfigItem
from .data import DataSet, ValueList
from .host import ConfigCallback, UserData, WriteCallback
from .logging_conf import attach_handler, configure_logging, get_logger
from .node import ClientFactory
from .plugin import module_register


class CollectdLogHandler(logging.Handler):
    """Forward log records to the daemon's log functions."""

    def __init__(self, api: Any, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.api = api

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:  # noqa: BLE001
            self.handleError(record)
            return
        if record.levelno >= logging.ERROR:
            self.api.error(message)
        elif record.levelno >= logging.WARNING:
            self.api.warning(message)
        elif record.levelno >= logging.INFO:
            self.api.info(message)
        else:
            self.api.debug(message)


class CollectdHost:
    """:class:`~write_mongo.host.PluginHost` backed by the ``collectd`` module."""

    def __init__(self, api: Any = None) -> None:
        self.api = api if api is not None else importlib.import_module("collectd")
        self._datasets: dict[str, DataSet] = {}
        self._user_data: list[UserData] = []
        self._shutdown_registered = False
        self.logger = get_logger("collectd")

    def dataset(self, type_name: str) -> DataSet:
        ds = self._datasets.get(type_name)
        if ds is None:
            # entries are (name, type, min, max)
            sources = [(entry[0], entry[1]) for entry in self.api.get_dataset(type_name)]
            ds = DataSet.build(type_name, sources)
            self._datasets[type_name] = ds
        return ds

    def value_list(self, values: Any) -> ValueList:
        return ValueList(
            values=list(values.values),
            time=float(values.time),
            host=values.host,
            plugin=values.plugin,
            plugin_instance=values.plugin_instance,
            type=values.type,
            type_instance=values.type_instance,
            interval=float(values.interval),
            meta=dict(getattr(values, "meta", None) or {}),
        )

    def register_complex_config(self, key: str, callback: ConfigCallback) -> int:
        def _config(conf: Any) -> None:
            callback(ConfigItem.from_collectd(conf))

        self.api.register_config(_config, name=key)
        return 0

    def register_write(self, name: str, callback: WriteCallback, user_data: UserData) -> int:
        def _write(values: Any, data: Any = None) -> None:
            status = callback(self.dataset(values.type), self.value_list(values), user_data)
            if status != 0:
                self.logger.warning("write_failed", callback=name, status=status)

        self.api.register_write(_write, name=name)
        self._user_data.append(user_data)
        if not self._shutdown_registered:
            self.api.register_shutdown(self.shutdown)
            self._shutdown_registered = True
        return 0

    def shutdown(self) -> None:
        user_data, self._user_data = self._user_data, []
        for entry in user_data:
            entry.free()


def register(api: Any = None, client_factory: ClientFactory | None = None) -> CollectdHost:
    """Entry point used when collectd imports the plugin."""

    configure_logging()
    host = CollectdHost(api)
    attach_handler(CollectdLogHandler(host.api))
    module_register(host, client_factory)
    return host


__all__ = ["CollectdHost", "CollectdLogHandler", "register"]
