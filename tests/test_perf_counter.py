import io
import math
import statistics

import pytest

from agrifly.perf_counter import CounterType, PerfCounter, PerfRegistry


class FakeClock:
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now


def elapsed_counter(name="e"):
    clock = FakeClock()
    return PerfCounter(CounterType.ELAPSED, name, clock), clock


def test_count_counter_counts_and_formats():
    c = PerfCounter(CounterType.COUNT, "hits", FakeClock())
    for _ in range(3):
        c.count()
    assert c.event_count == 3
    assert c.format() == "hits: 3 events"


def test_set_count_only_for_count_counters():
    c = PerfCounter(CounterType.COUNT, "hits", FakeClock())
    c.set_count(42)
    assert c.event_count == 42
    e, _ = elapsed_counter()
    e.set_count(7)
    assert e.event_count == 0


def test_elapsed_begin_end_records_extremes():
    c, clock = elapsed_counter()
    clock.now = 100
    c.begin()
    clock.now = 150
    c.end()
    clock.now = 200
    c.begin()
    clock.now = 230
    c.end()
    assert c.event_count == 2
    assert c.time_total == 80
    assert c.time_least == 30
    assert c.time_most == 50
    assert c.mean == pytest.approx(40e-6)


def test_elapsed_format_rms_matches_sample_stdev():
    c, _ = elapsed_counter("work")
    samples = [50, 30, 70, 20]
    for s in samples:
        c.set_elapsed(s)
    text = c.format()
    assert text.startswith(
        f"work: 4 events, {sum(samples)}us elapsed, {sum(samples) // 4}us avg, "
        f"min {min(samples)}us max {max(samples)}us"
    )
    rms = float(text.rsplit(" ", 2)[1].removesuffix("us"))
    assert rms == pytest.approx(statistics.stdev(samples), abs=1e-3)


def test_end_without_begin_is_ignored():
    c, clock = elapsed_counter()
    clock.now = 500
    c.end()
    assert c.event_count == 0
    assert c.time_total == 0


def test_cancel_discards_started_event():
    c, clock = elapsed_counter()
    c.begin()
    c.cancel()
    clock.now = 10
    c.end()
    assert c.event_count == 0


def test_negative_elapsed_is_ignored():
    c, _ = elapsed_counter()
    c.set_elapsed(-5)
    assert c.event_count == 0


def test_context_manager_times_block():
    c, clock = elapsed_counter()
    with c:
        clock.now = 25
    assert c.event_count == 1
    assert c.time_total == 25


def test_single_elapsed_event_has_nan_rms():
    c, _ = elapsed_counter()
    c.set_elapsed(10)
    assert c.format().endswith("  nanus rms")


def test_empty_elapsed_format():
    c, _ = elapsed_counter("idle")
    assert c.format() == (
        "idle: 0 events, 0us elapsed, 0us avg, min 0us max 0us 0.000us rms"
    )


def test_count_has_no_effect_on_elapsed_counter():
    c, _ = elapsed_counter()
    c.count()
    assert c.event_count == 0


def test_interval_counter():
    clock = FakeClock()
    c = PerfCounter(CounterType.INTERVAL, "tick", clock)
    for t in (0, 10, 30):
        clock.now = t
        c.count()
    assert c.event_count == 3
    assert c.time_least == 10
    assert c.time_most == 20
    assert c.format().startswith("tick: 3 events, 10us avg, min 10us max 20us")


def test_reset_clears_counts():
    c, _ = elapsed_counter()
    c.set_elapsed(10)
    c.set_elapsed(20)
    c.reset()
    assert (c.event_count, c.time_total, c.time_least, c.time_most) == (0, 0, 0, 0)


def test_write_appends_newline():
    c = PerfCounter(CounterType.COUNT, "n", FakeClock())
    buf = io.StringIO()
    c.write(buf)
    assert buf.getvalue() == c.format() + "\n"


def test_invalid_kind_raises():
    with pytest.raises(ValueError):
        PerfCounter("bogus", "x", FakeClock())


def test_registry_alloc_once_returns_existing():
    reg = PerfRegistry(FakeClock())
    a = reg.alloc_once(CounterType.COUNT, "a")
    assert reg.alloc_once(CounterType.COUNT, "a") is a
    assert len(reg) == 1


def test_registry_alloc_once_type_mismatch():
    reg = PerfRegistry(FakeClock())
    reg.alloc(CounterType.COUNT, "a")
    with pytest.raises(ValueError):
        reg.alloc_once(CounterType.ELAPSED, "a")


def test_registry_newest_first_and_free():
    reg = PerfRegistry(FakeClock())
    a = reg.alloc(CounterType.COUNT, "a")
    b = reg.alloc(CounterType.COUNT, "b")
    assert [c.name for c in reg] == ["b", "a"]
    reg.free(b)
    assert list(reg) == [a]


def test_registry_reset_all():
    reg = PerfRegistry(FakeClock())
    a = reg.alloc(CounterType.COUNT, "a")
    a.set_count(5)
    reg.reset_all()
    assert a.event_count == 0


def test_registry_print_all():
    reg = PerfRegistry(FakeClock())
    a = reg.alloc(CounterType.COUNT, "a")
    b = reg.alloc(CounterType.COUNT, "b")
    buf = io.StringIO()
    reg.print_all(buf)
    assert buf.getvalue() == b.format() + "\n" + a.format() + "\n"


def test_registry_print_all_ordered():
    clock = FakeClock()
    reg = PerfRegistry(clock)
    cnt_low = reg.alloc(CounterType.COUNT, "few")
    cnt_low.set_count(1)
    cnt_high = reg.alloc(CounterType.COUNT, "many")
    cnt_high.set_count(9)
    iv = reg.alloc(CounterType.INTERVAL, "iv")
    iv.count()
    short = reg.alloc(CounterType.ELAPSED, "short")
    short.set_elapsed(5)
    long_ = reg.alloc(CounterType.ELAPSED, "long")
    long_.set_elapsed(500)
    buf = io.StringIO()
    reg.print_all_ordered(buf)
    names = [line.split(":")[0] for line in buf.getvalue().splitlines()]
    assert names == ["long", "short", "iv", "many", "few"]
    assert [c.name for c in reg] == names


def test_rms_is_finite_with_many_events():
    c, _ = elapsed_counter()
    for s in (1, 2, 3):
        c.set_elapsed(s)
    rms = float(c.format().rsplit(" ", 2)[1].removesuffix("us"))
    assert math.isfinite(rms)
    assert rms == pytest.approx(statistics.stdev([1, 2, 3]), abs=1e-3)