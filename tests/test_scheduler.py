"""Tests for the refresh scheduler."""

import pytest

from tele_station.errors import ConfigurationError
from tele_station.scheduler import RefreshScheduler


def test_first_attempt_allowed_immediately(clock) -> None:
    sched = RefreshScheduler(600, allow_immediate_first_attempt=True, clock=clock)
    assert sched.should_update_now() is True


def test_first_attempt_waits_one_period_when_not_allowed(clock) -> None:
    sched = RefreshScheduler(600, allow_immediate_first_attempt=False, clock=clock)
    assert sched.should_update_now() is False
    clock.advance(599)
    assert sched.should_update_now() is False
    clock.advance(1)
    assert sched.should_update_now() is True


def test_should_update_now_does_not_mutate(clock) -> None:
    sched = RefreshScheduler(600, clock=clock)
    for _ in range(5):
        assert sched.should_update_now() is True
    assert sched.last_attempt_at is None
    assert sched.consecutive_failures == 0


def test_gated_after_success_until_period_elapses(clock) -> None:
    sched = RefreshScheduler(600, clock=clock)
    sched.update_successful()
    assert sched.should_update_now() is False
    clock.advance(599.9)
    assert sched.should_update_now() is False
    clock.advance(0.1)
    assert sched.should_update_now() is True


def test_gated_after_failure_until_period_elapses(clock) -> None:
    sched = RefreshScheduler(600, clock=clock)
    sched.update_failed()
    assert sched.should_update_now() is False
    clock.advance(300)
    assert sched.should_update_now() is False
    clock.advance(300)
    assert sched.should_update_now() is True


def test_success_records_times_and_resets_failures(clock) -> None:
    sched = RefreshScheduler(60, clock=clock)
    sched.update_failed()
    sched.update_failed()
    assert sched.consecutive_failures == 2
    clock.advance(120)
    sched.update_successful()
    assert sched.consecutive_failures == 0
    assert sched.last_attempt_at == clock.now
    assert sched.last_success_at == clock.now


def test_failure_keeps_last_success(clock) -> None:
    sched = RefreshScheduler(60, clock=clock)
    sched.update_successful()
    success_at = clock.now
    clock.advance(90)
    sched.update_failed()
    assert sched.last_success_at == success_at
    assert sched.last_attempt_at == clock.now
    assert sched.consecutive_failures == 1


def test_zero_period_is_always_eligible(clock) -> None:
    sched = RefreshScheduler(0, allow_immediate_first_attempt=False, clock=clock)
    assert sched.should_update_now() is True
    sched.update_successful()
    assert sched.should_update_now() is True
    sched.update_failed()
    assert sched.should_update_now() is True


def test_negative_period_rejected() -> None:
    with pytest.raises(ConfigurationError):
        RefreshScheduler(-1)


def test_negative_minutes_rejected() -> None:
    with pytest.raises(ConfigurationError):
        RefreshScheduler.from_minutes(-5)


def test_from_minutes_converts_to_seconds(clock) -> None:
    sched = RefreshScheduler.from_minutes(10, clock=clock)
    assert sched.expiration_period_s == 600.0


def test_fixed_period_without_backoff(clock) -> None:
    sched = RefreshScheduler(60, clock=clock)
    for _ in range(4):
        sched.update_failed()
    assert sched.effective_period_s() == 60
    clock.advance(60)
    assert sched.should_update_now() is True


def test_optional_backoff_grows_and_caps(clock) -> None:
    sched = RefreshScheduler(60, clock=clock, max_backoff_s=300)
    sched.update_failed()
    assert sched.effective_period_s() == 60
    sched.update_failed()
    assert sched.effective_period_s() == 120
    sched.update_failed()
    assert sched.effective_period_s() == 240
    sched.update_failed()
    assert sched.effective_period_s() == 300
    clock.advance(299)
    assert sched.should_update_now() is False
    clock.advance(1)
    assert sched.should_update_now() is True
    sched.update_successful()
    assert sched.effective_period_s() == 60


def test_seconds_until_next_attempt(clock) -> None:
    sched = RefreshScheduler(600, clock=clock)
    assert sched.seconds_until_next_attempt() == 0.0
    sched.update_successful()
    clock.advance(100)
    assert sched.seconds_until_next_attempt() == pytest.approx(500.0)
