"""Sample and descriptor types delivered by the host daemon."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Sequence


class DSType(str, Enum):
    """Closed set of data source types."""

    COUNTER = "counter"
    GAUGE = "gauge"
    DERIVE = "derive"
    ABSOLUTE = "absolute"

    @classmethod
    def parse(cls, value: "DSType | str | int") -> "DSType":
        """Accept an enum member, its name, or collectd's numeric type id."""

        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return _NUMERIC_TYPES[value]
            except KeyError:
                raise ValueError(f"Unknown data source type id: {value}") from None
        return cls(str(value).strip().lower())


# DS_TYPE_* constants as numbered by the daemon
_NUMERIC_TYPES = {
    0: DSType.COUNTER,
    1: DSType.GAUGE,
    2: DSType.DERIVE,
    3: DSType.ABSOLUTE,
}


@dataclass(frozen=True, slots=True)
class DataSource:
    """Name and type of one value inside a data set."""

    name: str
    type: DSType
    min: float = math.nan
    max: float = math.nan


@dataclass(frozen=True, slots=True)
class DataSet:
    """Descriptor of a sample's value layout."""

    type: str
    sources: tuple[DataSource, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "sources", tuple(self.sources))

    @classmethod
    def build(cls, type_name: str, sources: Iterable[tuple[str, DSType | str]]) -> "DataSet":
        return cls(
            type=type_name,
            sources=tuple(DataSource(name, DSType.parse(kind)) for name, kind in sources),
        )

    @property
    def ds_num(self) -> int:
        return len(self.sources)

    @property
    def names(self) -> list[str]:
        return [source.name for source in self.sources]


@dataclass(slots=True)
class ValueList:
    """One timestamped sample; values are parallel to the data set sources."""

    values: Sequence[Any]
    time: float = 0.0
    host: str = ""
    plugin: str = ""
    plugin_instance: str = ""
    type: str = ""
    type_instance: str = ""
    interval: float = 10.0
    meta: dict[str, Any] = field(default_factory=dict)


__all__ = ["DSType", "DataSet", "DataSource", "ValueList"]
