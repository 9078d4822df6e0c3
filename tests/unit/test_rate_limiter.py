import pytest

from playlist_analyzer.rate_limiter import RateLimiter


def test_pause_sleeps_full_delay(recording_sleep):
    limiter = RateLimiter(delay_seconds=1.0, sleep=recording_sleep)
    limiter.pause()
    limiter.pause()
    assert recording_sleep.calls == [1.0, 1.0]
    assert limiter.get_stats() == {"total_waits": 2, "total_wait_time": 2.0}


def test_zero_delay_never_sleeps(recording_sleep):
    limiter = RateLimiter(delay_seconds=0, sleep=recording_sleep)
    limiter.pause()
    assert recording_sleep.calls == []


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        RateLimiter(delay_seconds=-1)
