from nicestats.common.models import (
    KIND_COUNT,
    KIND_GAUGE,
    KIND_TIMING,
    SENTINEL_KEY,
    Malformed,
)
from nicestats.ingest.parser import parse_datagram


def _feed(aggregator, *datagrams: bytes) -> None:
    for data in datagrams:
        aggregator.update(parse_datagram(data))


def test_count_repeated_n_times(aggregator) -> None:
    _feed(aggregator, *([b"x:5|c"] * 7))
    metric = aggregator.table.get("x")
    assert metric is not None
    assert metric.kind == KIND_COUNT
    assert metric.count == 7


def test_gauge_replaces_value(aggregator) -> None:
    _feed(aggregator, b"y:3.5|g", b"y:7|g")
    metric = aggregator.table.get("y")
    assert metric.kind == KIND_GAUGE
    assert metric.count == 2
    assert metric.value == 7.0


def test_timing_accumulates_value(aggregator) -> None:
    _feed(aggregator, b"z:10|ms", b"z:5|ms")
    metric = aggregator.table.get("z")
    assert metric.kind == KIND_TIMING
    assert metric.count == 2
    assert metric.value == 15.0


def test_missing_delimiters_count_as_malformed(aggregator) -> None:
    _feed(aggregator, b"bad", b"bad:1")
    assert aggregator.table.get(SENTINEL_KEY).count == 2
    assert aggregator.table.get(SENTINEL_KEY).kind == KIND_COUNT
    assert "bad" not in aggregator.table
    assert aggregator.malformed_total == 2


def test_tag_suffix_separates_keys(aggregator) -> None:
    _feed(aggregator, b"x:1|c|#env:prod", b"x:1|c|#env:dev")
    assert aggregator.table.get("x#env:prod").count == 1
    assert aggregator.table.get("x#env:dev").count == 1
    assert "x" not in aggregator.table


def test_non_numeric_gauge_is_malformed_not_fatal(aggregator) -> None:
    _feed(aggregator, b"g:abc|g", b"t:|ms")
    assert "g" not in aggregator.table
    assert "t" not in aggregator.table
    assert aggregator.table.get(SENTINEL_KEY).count == 2


def test_non_numeric_count_is_still_counted(aggregator) -> None:
    _feed(aggregator, b"c:abc|c")
    assert aggregator.table.get("c").count == 1
    assert SENTINEL_KEY not in aggregator.table


def test_first_kind_wins_for_key(aggregator) -> None:
    _feed(aggregator, b"k:1|g", b"k:5|ms", b"k:2|c")
    metric = aggregator.table.get("k")
    assert metric.kind == KIND_GAUGE
    assert metric.count == 3
    assert metric.value == 2.0


def test_count_key_ignores_later_magnitude(aggregator) -> None:
    _feed(aggregator, b"k:1|c", b"k:abc|g")
    metric = aggregator.table.get("k")
    assert metric.kind == KIND_COUNT
    assert metric.count == 2
    assert SENTINEL_KEY not in aggregator.table


def test_stored_kind_decides_numeric_check(aggregator) -> None:
    _feed(aggregator, b"k:2|g", b"k:abc|c")
    assert aggregator.table.get("k").count == 1
    assert aggregator.table.get(SENTINEL_KEY).count == 1


def test_sentinel_key_cannot_be_written_by_datagram(aggregator) -> None:
    key = aggregator.update(parse_datagram(b"<<<unknown>>>:1|g"))
    assert key == SENTINEL_KEY
    metric = aggregator.table.get(SENTINEL_KEY)
    assert metric.kind == KIND_COUNT
    assert metric.count == 1
    assert metric.value == 0.0


def test_update_returns_touched_key(aggregator) -> None:
    assert aggregator.update(parse_datagram(b"a:1|c|#t")) == "a#t"
    assert aggregator.update(Malformed("bad_type")) == SENTINEL_KEY
    assert aggregator.datagrams_total == 2


def test_snapshot_is_sorted_copy(aggregator) -> None:
    _feed(aggregator, b"b:1|c", b"a:2|g", b"c:3|ms", b"oops")
    snapshot = aggregator.snapshot()
    assert [key for key, _ in snapshot] == [SENTINEL_KEY, "a", "b", "c"]

    snapshot[1][1].value = 99.0
    snapshot[1][1].count = 0
    assert aggregator.table.get("a").value == 2.0
    assert aggregator.table.get("a").count == 1


def test_counts_never_decrease(aggregator) -> None:
    previous = 0
    for data in (b"x:1|c", b"x:oops", b"x:1|c", b"x:2|c|"):
        aggregator.update(parse_datagram(data))
        current = aggregator.table.get("x").count
        assert current >= previous
        previous = current
    assert previous == 3


def test_names_differing_in_invalid_byte_are_separate_keys(aggregator) -> None:
    _feed(aggregator, b"a\xff:1|c", b"a\xfe:1|c", b"a\xff:1|c")
    assert len(aggregator.table) == 2
    counts = sorted(metric.count for _, metric in aggregator.snapshot())
    assert counts == [1, 2]
