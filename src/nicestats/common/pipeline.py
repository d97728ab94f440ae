from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from nicestats.common.models import Metric
from nicestats.ingest.aggregator import Aggregator
from nicestats.ingest.parser import parse_datagram


class Display(Protocol):
    def open(self) -> None: ...

    def draw(self, snapshot: Sequence[Tuple[str, Metric]]) -> None: ...

    def close(self) -> None: ...


@dataclass
class Pipeline:
    """Parse, aggregate and render one datagram at a time, in that order."""

    aggregator: Aggregator = field(default_factory=Aggregator)
    display: Optional[Display] = None

    def process_datagram(self, data: bytes) -> str:
        outcome = parse_datagram(data)
        key = self.aggregator.update(outcome)
        if self.display is not None:
            self.display.draw(self.aggregator.snapshot())
        return key

    def process_datagrams(self, datagrams: Iterable[bytes]) -> List[str]:
        return [self.process_datagram(data) for data in datagrams]
