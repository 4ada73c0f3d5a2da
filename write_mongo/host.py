"""Host plugin registry surface and an in-process implementation of it."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Protocol

from .config import ConfigItem
from .data import DataSet, ValueList
from .logging_conf import get_logger


@dataclass(slots=True)
class UserData:
    """Opaque datum handed back to a callback, released through ``free_func``."""

    data: Any
    free_func: Callable[[Any], None] | None = None
    freed: bool = False

    def free(self) -> None:
        if self.freed:
            return
        self.freed = True
        if self.free_func is not None:
            self.free_func(self.data)


WriteCallback = Callable[[DataSet, ValueList, UserData], int]
ConfigCallback = Callable[[ConfigItem], int]


class PluginHost(Protocol):
    """Registration calls the daemon exposes to plugins."""

    def register_complex_config(self, key: str, callback: ConfigCallback) -> int:
        ...

    def register_write(self, name: str, callback: WriteCallback, user_data: UserData) -> int:
        ...


class LocalHost:
    """Registry dispatching samples to write callbacks from a worker pool."""

    def __init__(self, workers: int = 8) -> None:
        self.workers = workers
        self._configs: Dict[str, ConfigCallback] = {}
        self._writes: Dict[str, tuple[WriteCallback, UserData]] = {}
        self._executor: ThreadPoolExecutor | None = None
        self._lock = Lock()
        self.logger = get_logger("host")

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_complex_config(self, key: str, callback: ConfigCallback) -> int:
        self._configs[key.lower()] = callback
        return 0

    def register_write(self, name: str, callback: WriteCallback, user_data: UserData) -> int:
        with self._lock:
            if name in self._writes:
                self.logger.error("write_callback_exists", callback=name)
                return -1
            self._writes[name] = (callback, user_data)
        return 0

    def unregister_write(self, name: str) -> None:
        with self._lock:
            entry = self._writes.pop(name, None)
        if entry is not None:
            entry[1].free()

    def registered(self) -> dict[str, UserData]:
        with self._lock:
            return {name: user_data for name, (_, user_data) in self._writes.items()}

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def configure(self, key: str, item: ConfigItem) -> int:
        callback = self._configs.get(key.lower())
        if callback is None:
            self.logger.warning("config_callback_missing", key=key)
            return -1
        return callback(item)

    def write(self, ds: DataSet, vl: ValueList) -> dict[str, int]:
        """Run every write callback in the calling thread; return their statuses."""

        with self._lock:
            targets = list(self._writes.items())
        return {name: callback(ds, vl, user_data) for name, (callback, user_data) in targets}

    def write_async(self, ds: DataSet, vl: ValueList, name: str | None = None) -> list[Future]:
        """Submit the sample to the worker pool, to one callback or all of them."""

        with self._lock:
            if name is None:
                targets = list(self._writes.values())
            else:
                targets = [self._writes[name]]
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="write")
            executor = self._executor
        return [executor.submit(callback, ds, vl, user_data) for callback, user_data in targets]

    def shutdown(self) -> None:
        """Drain the pool, then release every registered user datum."""

        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        for name in list(self.registered()):
            self.unregister_write(name)


__all__ = ["ConfigCallback", "LocalHost", "PluginHost", "UserData", "WriteCallback"]
