from __future__ import annotations

from dataclasses import dataclass
from typing import Union


KIND_UNKNOWN = "UNKNOWN"
KIND_COUNT = "COUNT"
KIND_GAUGE = "GAUGE"
KIND_TIMING = "TIMING"

METRIC_KINDS = (KIND_UNKNOWN, KIND_COUNT, KIND_GAUGE, KIND_TIMING)

# Kinds whose update rule needs a numeric measurement.
MAGNITUDE_KINDS = frozenset({KIND_GAUGE, KIND_TIMING})

SENTINEL_KEY = "<<<unknown>>>"


@dataclass
class Metric:
    kind: str
    count: int = 0
    value: float = 0.0

    def __post_init__(self) -> None:
        if self.kind not in METRIC_KINDS:
            raise ValueError(f"Invalid metric kind: {self.kind}")

    def copy(self) -> "Metric":
        return Metric(kind=self.kind, count=self.count, value=self.value)


@dataclass(frozen=True)
class Recognized:
    name: str
    measurement: str
    kind: str
    tags: str = ""

    @property
    def key(self) -> str:
        return aggregation_key(self.name, self.tags)


@dataclass(frozen=True)
class Malformed:
    reason: str


ParseOutcome = Union[Recognized, Malformed]


def aggregation_key(name: str, tags: str) -> str:
    return f"{name}{tags}"
