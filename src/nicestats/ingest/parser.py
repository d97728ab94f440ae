"""
Datagram parser.

Recognizes ``name:measurement|type[|tags]`` one byte at a time, left to right,
without backtracking. Failures are returned as ``Malformed`` values.
"""

from __future__ import annotations

import math
from typing import Optional

from nicestats.common.models import (
    KIND_COUNT,
    KIND_GAUGE,
    KIND_TIMING,
    KIND_UNKNOWN,
    Malformed,
    ParseOutcome,
    Recognized,
)


READING_NAME = "READING_NAME"
READING_MEASUREMENT = "READING_MEASUREMENT"
READING_TYPE = "READING_TYPE"
READING_TYPE_M = "READING_TYPE_M"
READING_TYPE_C = "READING_TYPE_C"
READING_TYPE_G = "READING_TYPE_G"
READING_TYPE_MS = "READING_TYPE_MS"
READING_TAGS = "READING_TAGS"

_COLON = ord(":")
_PIPE = ord("|")
_TYPE_STARTS = {
    ord("c"): (KIND_COUNT, READING_TYPE_C),
    ord("g"): (KIND_GAUGE, READING_TYPE_G),
}
_TYPE_COMPLETE = frozenset({READING_TYPE_C, READING_TYPE_G, READING_TYPE_MS})

# Reason reported when the buffer runs out before a type token completes.
_EXHAUSTED_REASONS = {
    READING_NAME: "missing_measurement",
    READING_MEASUREMENT: "missing_type",
    READING_TYPE: "missing_type",
    READING_TYPE_M: "bad_type",
}


def _decode(raw: bytearray) -> str:
    # surrogateescape keeps invalid bytes distinct, so keys stay byte-exact.
    return bytes(raw).decode("utf-8", errors="surrogateescape")


def parse_datagram(data: bytes) -> ParseOutcome:
    name = bytearray()
    measurement = bytearray()
    tags = bytearray()
    kind = KIND_UNKNOWN
    state = READING_NAME

    for byte in data:
        if state == READING_NAME:
            if byte == _COLON:
                state = READING_MEASUREMENT
            else:
                name.append(byte)
        elif state == READING_MEASUREMENT:
            if byte == _PIPE:
                state = READING_TYPE
            else:
                measurement.append(byte)
        elif state == READING_TYPE:
            if byte in _TYPE_STARTS:
                kind, state = _TYPE_STARTS[byte]
            elif byte == ord("m"):
                state = READING_TYPE_M
            else:
                return Malformed("bad_type")
        elif state == READING_TYPE_M:
            if byte != ord("s"):
                return Malformed("bad_type")
            kind = KIND_TIMING
            state = READING_TYPE_MS
        elif state in _TYPE_COMPLETE:
            if byte != _PIPE:
                return Malformed("bad_type_suffix")
            state = READING_TAGS
        else:
            tags.append(byte)

    if state not in _TYPE_COMPLETE and state != READING_TAGS:
        return Malformed(_EXHAUSTED_REASONS[state])
    return Recognized(
        name=_decode(name),
        measurement=_decode(measurement),
        kind=kind,
        tags=_decode(tags),
    )


def parse_measurement(raw: str) -> Optional[float]:
    """Convert a measurement token, returning None when it is not a finite number."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value
