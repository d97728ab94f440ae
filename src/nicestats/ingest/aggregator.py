from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from nicestats.common.models import (
    KIND_COUNT,
    KIND_GAUGE,
    KIND_TIMING,
    MAGNITUDE_KINDS,
    SENTINEL_KEY,
    Malformed,
    Metric,
    ParseOutcome,
)
from nicestats.ingest.parser import parse_measurement


Snapshot = List[Tuple[str, Metric]]


@dataclass
class MetricTable:
    """Aggregation key -> Metric. Entries are created once and never removed."""

    _metrics: Dict[str, Metric] = field(default_factory=dict, init=False)

    def __len__(self) -> int:
        return len(self._metrics)

    def __contains__(self, key: object) -> bool:
        return key in self._metrics

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._metrics))

    def get(self, key: str) -> Optional[Metric]:
        return self._metrics.get(key)

    def ensure(self, key: str, kind: str) -> Metric:
        # The kind recorded on first sight stays authoritative for the key.
        metric = self._metrics.get(key)
        if metric is None:
            metric = Metric(kind=kind)
            self._metrics[key] = metric
        return metric

    def snapshot(self) -> Snapshot:
        return [(key, self._metrics[key].copy()) for key in sorted(self._metrics)]


@dataclass
class Aggregator:
    table: MetricTable = field(default_factory=MetricTable)
    logger: Optional[logging.Logger] = None
    datagrams_total: int = field(default=0, init=False)
    malformed_total: int = field(default=0, init=False)

    def update(self, outcome: ParseOutcome) -> str:
        self.datagrams_total += 1
        if isinstance(outcome, Malformed):
            return self._record_malformed(outcome.reason)

        key = outcome.key
        if key == SENTINEL_KEY:
            return self._record_malformed("reserved_key")

        existing = self.table.get(key)
        kind = existing.kind if existing is not None else outcome.kind
        magnitude = None
        if kind in MAGNITUDE_KINDS:
            magnitude = parse_measurement(outcome.measurement)
            if magnitude is None:
                return self._record_malformed("bad_measurement", key=key)

        metric = existing if existing is not None else self.table.ensure(key, kind)
        metric.count += 1
        if kind == KIND_GAUGE:
            metric.value = magnitude
        elif kind == KIND_TIMING:
            metric.value += magnitude
        return key

    def snapshot(self) -> Snapshot:
        return self.table.snapshot()

    def _record_malformed(self, reason: str, key: Optional[str] = None) -> str:
        self.malformed_total += 1
        if self.logger is not None:
            self.logger.debug("datagram_malformed", extra={"reason": reason, "key": key})
        metric = self.table.ensure(SENTINEL_KEY, KIND_COUNT)
        metric.count += 1
        return SENTINEL_KEY
