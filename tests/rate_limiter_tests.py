"""
Rate Limiter Tests
------------------
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from locator_healing.healing.rate_limiter import RateLimiter


def test_exactly_n_calls_granted_within_window(clock) -> None:
    limiter = RateLimiter(max_calls=3, window_seconds=60, clock=clock)
    assert [limiter.try_acquire() for _ in range(3)] == [True, True, True]
    assert limiter.try_acquire() is False
    assert limiter.remaining() == 0


def test_slots_free_up_when_window_slides(clock) -> None:
    limiter = RateLimiter(max_calls=2, window_seconds=60, clock=clock)
    assert limiter.try_acquire()
    clock.advance(30)
    assert limiter.try_acquire()
    assert not limiter.try_acquire()

    clock.advance(31)  # first call is now older than the window
    assert limiter.remaining() == 1
    assert limiter.try_acquire()
    assert not limiter.try_acquire()


def test_call_on_window_boundary_still_counts(clock) -> None:
    limiter = RateLimiter(max_calls=1, window_seconds=10, clock=clock)
    assert limiter.try_acquire()
    clock.advance(10)
    assert not limiter.try_acquire()
    clock.advance(0.001)
    assert limiter.try_acquire()


def test_zero_capacity_denies_everything(clock) -> None:
    limiter = RateLimiter(max_calls=0, clock=clock)
    assert limiter.try_acquire() is False
    assert limiter.remaining() == 0


def test_reset_releases_all_slots(clock) -> None:
    limiter = RateLimiter(max_calls=2, clock=clock)
    limiter.try_acquire()
    limiter.try_acquire()
    limiter.reset()
    assert limiter.remaining() == 2


def test_concurrent_acquisition_never_overshoots() -> None:
    limiter = RateLimiter(max_calls=10, window_seconds=60)
    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: limiter.try_acquire(), range(200)))
    assert results.count(True) == 10


@pytest.mark.parametrize("kwargs", [{"max_calls": -1}, {"window_seconds": 0}])
def test_invalid_configuration_is_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        RateLimiter(**kwargs)
