from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, TextIO


@dataclass
class MetricsEmitter:
    """Self-metrics of the collector, one ``[METRICS] {json}`` line per sample."""

    metrics_log_path: Optional[str] = None
    echo: bool = False
    _file: Optional[TextIO] = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.metrics_log_path:
            path = Path(self.metrics_log_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            self._file = path.open("a", encoding="utf-8")

    def emit(self, name: str, value: float, tags: Optional[Dict[str, Any]] = None) -> None:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "name": name,
            "value": value,
            "tags": tags or {},
        }
        line = f"[METRICS] {json.dumps(payload, ensure_ascii=True)}"
        if self.echo:
            print(line, file=sys.stdout)
        if self._file is not None:
            self._file.write(line + "\n")
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
