from datetime import datetime, timezone

import pytest

from recipe_catalog.ids import EPOCH, MAX_SEQUENCE, IdGenerator


class FakeClock:
    def __init__(self, start: float):
        self.now = start

    def __call__(self) -> float:
        return self.now


def test_ids_are_strictly_increasing():
    generator = IdGenerator()
    ids = [generator.next_id() for _ in range(2000)]

    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_same_millisecond_uses_sequence():
    clock = FakeClock(EPOCH.timestamp() + 10)
    generator = IdGenerator(generator_id=3, time_source=clock)

    first = generator.next_id()
    second = generator.next_id()

    assert second == first + 1
    assert (first >> 12) & 0x3FF == 3


def test_sequence_overflow_waits_for_next_millisecond():
    clock = FakeClock(EPOCH.timestamp() + 10)
    generator = IdGenerator(time_source=clock)
    for _ in range(MAX_SEQUENCE + 1):
        last = generator.next_id()

    ticks = iter([clock.now, clock.now + 0.01])
    generator._time_source = lambda: next(ticks)

    following = generator.next_id()

    assert following > last
    assert following & MAX_SEQUENCE == 0


def test_clock_going_backwards_raises():
    clock = FakeClock(EPOCH.timestamp() + 10)
    generator = IdGenerator(time_source=clock)
    generator.next_id()

    clock.now -= 1

    with pytest.raises(RuntimeError):
        generator.next_id()


def test_invalid_generator_id():
    with pytest.raises(ValueError):
        IdGenerator(generator_id=1024)


def test_timestamp_bits_count_milliseconds_since_epoch():
    moment = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
    generator = IdGenerator(time_source=lambda: moment.timestamp())

    elapsed_ms = int((moment - EPOCH).total_seconds() * 1000)
    assert generator.next_id() >> 22 == elapsed_ms
