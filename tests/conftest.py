import io
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from nicestats.common.pipeline import Pipeline
from nicestats.display.renderer import StreamDisplay
from nicestats.ingest.aggregator import Aggregator


@pytest.fixture
def schema_path() -> Path:
    return REPO_ROOT / "config" / "schema.json"


@pytest.fixture
def aggregator() -> Aggregator:
    return Aggregator()


@pytest.fixture
def stream_display() -> StreamDisplay:
    return StreamDisplay(stream=io.StringIO())


@pytest.fixture
def pipeline(aggregator, stream_display) -> Pipeline:
    return Pipeline(aggregator=aggregator, display=stream_display)
