"""Translate samples into BSON documents with a stable field layout."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

import bson
from bson.int64 import Int64

from .data import DataSet, DSType, ValueList
from .errors import UnknownValueTypeError

DEFAULT_DATABASE = "collectd"

_UINT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


class DocumentLayout(str, Enum):
    """Which sample fields populate the ``t`` and ``ti`` keys.

    ``LEGACY`` repeats the plugin instance in both keys, which is what every
    document written so far contains. ``TYPED`` stores the type and type
    instance the keys are named after.
    """

    LEGACY = "legacy"
    TYPED = "typed"


def _as_int64(value: Any) -> Int64:
    # unsigned counters are stored the way a signed 64-bit append would store them
    number = int(value) & _UINT64_MASK
    if number & _INT64_SIGN:
        number -= 1 << 64
    return Int64(number)


def _as_double(value: Any) -> float:
    return float(value)


_CONVERTERS: dict[DSType, Callable[[Any], Any]] = {
    DSType.COUNTER: _as_int64,
    DSType.GAUGE: _as_double,
    DSType.DERIVE: _as_int64,
    DSType.ABSOLUTE: _as_int64,
}


def native_value(ds_type: DSType, value: Any) -> Any:
    """Return ``value`` as the BSON type matching ``ds_type``."""

    try:
        converter = _CONVERTERS[ds_type]
    except (KeyError, TypeError):
        raise UnknownValueTypeError(f"Unknown data source type: {ds_type!r}") from None
    return converter(value)


def sample_time(vl: ValueList) -> datetime:
    return datetime.fromtimestamp(float(vl.time), tz=timezone.utc)


def encode(ds: DataSet, vl: ValueList, layout: DocumentLayout = DocumentLayout.LEGACY) -> dict:
    """Build the document stored for one sample.

    Single-value data sets store ``v`` as a scalar; anything else stores an
    embedded document keyed by data source name in descriptor order.
    """

    if len(vl.values) != ds.ds_num:
        raise ValueError(
            f"Data set {ds.type!r} declares {ds.ds_num} values, sample carries {len(vl.values)}"
        )

    if layout is DocumentLayout.TYPED:
        type_name, type_instance = vl.type, vl.type_instance
    else:
        type_name, type_instance = vl.plugin_instance, vl.plugin_instance

    record: dict[str, Any] = {
        "ts": sample_time(vl),
        "h": vl.host,
        "i": vl.plugin_instance,
        "t": type_name,
        "ti": type_instance,
    }

    if ds.ds_num == 1:
        record["v"] = native_value(ds.sources[0].type, vl.values[0])
    else:
        record["v"] = {
            source.name: native_value(source.type, value)
            for source, value in zip(ds.sources, vl.values)
        }
    return record


def encode_bson(ds: DataSet, vl: ValueList, layout: DocumentLayout = DocumentLayout.LEGACY) -> bytes:
    return bson.encode(encode(ds, vl, layout))


def namespace(vl: ValueList, database: str = DEFAULT_DATABASE) -> str:
    """Full ``<database>.<plugin>`` namespace a sample is inserted into."""

    return f"{database}.{vl.plugin}"


def split_namespace(ns: str) -> tuple[str, str]:
    database, _, collection = ns.partition(".")
    if not database or not collection:
        raise ValueError(f"Invalid namespace: {ns!r}")
    return database, collection


__all__ = [
    "DEFAULT_DATABASE",
    "DocumentLayout",
    "encode",
    "encode_bson",
    "namespace",
    "native_value",
    "sample_time",
    "split_namespace",
]
