"""Тесты для Proximity Verification State Machine.

Coverage:
- start/stop
- within_range → VERIFIED, окно подтверждения 30 сек
- Обновление окна, выход из радиуса
- EXPIRED по таймауту
- Подтверждение только внутри окна
- Отбраковка сэмплов по accuracy/staleness
- FAILED при ошибке сенсора
"""

import pytest

from src.core.domain.geo import GeoPoint, ProximityBand
from src.verification import (
    InvalidVerificationTransition,
    ProximityVerificationSession,
    VerificationConfig,
    VerificationState,
)


BASE_LAT = 40.7128
BASE_LON = -74.0060
METERS_PER_DEG_LAT = 6_371_000.0 * 3.141592653589793 / 180
T0 = 1_700_000_000_000


def point(offset_m: float = 0.0, ts: int = T0, accuracy: float = 5.0) -> GeoPoint:
    """GeoPoint смещённый на offset_m метров к северу от базовой точки."""
    return GeoPoint(
        latitude=BASE_LAT + offset_m / METERS_PER_DEG_LAT,
        longitude=BASE_LON,
        accuracy_meters=accuracy,
        captured_at_epoch_ms=ts,
    )


@pytest.fixture
def session():
    s = ProximityVerificationSession()
    s.start(T0)
    return s


class TestLifecycle:
    """start / stop."""

    def test_initial_state_idle(self):
        s = ProximityVerificationSession()
        assert s.state == VerificationState.IDLE
        assert s.countdown_seconds(T0) == 0

    def test_start_moves_to_tracking(self):
        s = ProximityVerificationSession()
        result = s.start(T0)

        assert result.new_state == VerificationState.TRACKING
        assert result.previous_state == VerificationState.IDLE
        assert result.transition_occurred
        assert result.transition_reason == "tracking_started"

    def test_double_start_rejected(self, session):
        with pytest.raises(InvalidVerificationTransition):
            session.start(T0 + 1)

    def test_stop_returns_to_idle(self, session):
        result = session.stop(T0 + 1000)
        assert result.new_state == VerificationState.IDLE

    def test_samples_rejected_when_idle(self):
        s = ProximityVerificationSession()
        with pytest.raises(InvalidVerificationTransition):
            s.submit_samples(point(), point(5.0), T0)


class TestVerification:
    """within_range / out_of_range."""

    def test_within_range_verifies(self, session):
        result = session.submit_samples(point(), point(10.0), T0)

        assert result.new_state == VerificationState.VERIFIED
        assert result.transition_reason == "within_range"
        assert result.verdict.within_range is True
        assert result.verdict.distance_meters == pytest.approx(10.0, rel=1e-6)
        assert result.band == ProximityBand.WITHIN_RANGE
        assert result.expires_at_ms == T0 + 30_000

    def test_out_of_range_stays_tracking(self, session):
        result = session.submit_samples(point(), point(60.0), T0)

        assert result.new_state == VerificationState.TRACKING
        assert not result.transition_occurred
        assert result.transition_reason == "out_of_range"
        assert result.verdict.within_range is False
        assert result.band == ProximityBand.CLOSE

    def test_far_away_band(self, session):
        result = session.submit_samples(point(), point(500.0), T0)
        assert result.band == ProximityBand.TOO_FAR

    def test_leaving_range_returns_to_tracking(self, session):
        session.submit_samples(point(), point(10.0), T0)
        result = session.submit_samples(point(ts=T0 + 5000), point(45.0, ts=T0 + 5000), T0 + 5000)

        assert result.new_state == VerificationState.TRACKING
        assert result.previous_state == VerificationState.VERIFIED
        assert result.transition_reason == "left_range"
        assert result.expires_at_ms is None
        assert session.countdown_seconds(T0 + 5000) == 0

    def test_fresh_sample_refreshes_window(self, session):
        session.submit_samples(point(), point(10.0), T0)
        result = session.submit_samples(point(ts=T0 + 20_000), point(12.0, ts=T0 + 20_000), T0 + 20_000)

        assert result.new_state == VerificationState.VERIFIED
        assert not result.transition_occurred
        assert result.transition_reason == "verification_refreshed"
        assert result.expires_at_ms == T0 + 50_000


class TestCountdownAndExpiry:
    """Окно подтверждения."""

    def test_countdown(self, session):
        session.submit_samples(point(), point(10.0), T0)

        assert session.countdown_seconds(T0) == 30
        assert session.countdown_seconds(T0 + 500) == 30
        assert session.countdown_seconds(T0 + 1000) == 29
        assert session.countdown_seconds(T0 + 29_001) == 1
        assert session.countdown_seconds(T0 + 30_000) == 0

    def test_tick_before_expiry_no_transition(self, session):
        session.submit_samples(point(), point(10.0), T0)
        result = session.tick(T0 + 29_999)
        assert result.new_state == VerificationState.VERIFIED
        assert not result.transition_occurred

    def test_tick_after_expiry(self, session):
        session.submit_samples(point(), point(10.0), T0)
        result = session.tick(T0 + 30_000)

        assert result.new_state == VerificationState.EXPIRED
        assert result.transition_reason == "confirmation_window_expired"

    def test_sample_after_expiry_expires_first(self, session):
        session.submit_samples(point(), point(10.0), T0)
        late = T0 + 31_000
        result = session.submit_samples(point(ts=late), point(10.0, ts=late), late)
        assert result.new_state == VerificationState.EXPIRED

    def test_restart_after_expiry(self, session):
        session.submit_samples(point(), point(10.0), T0)
        session.tick(T0 + 30_000)
        result = session.start(T0 + 40_000)
        assert result.new_state == VerificationState.TRACKING
        assert session.last_verdict is None


class TestConfirm:
    """Подтверждение сделки."""

    def test_confirm_inside_window(self, session):
        session.submit_samples(point(), point(10.0), T0)
        result = session.confirm(T0 + 10_000)

        assert result.new_state == VerificationState.CONFIRMED
        assert result.transition_reason == "transaction_confirmed"

    def test_confirm_without_verification_rejected(self, session):
        with pytest.raises(InvalidVerificationTransition):
            session.confirm(T0)

    def test_confirm_after_expiry_rejected(self, session):
        session.submit_samples(point(), point(10.0), T0)
        with pytest.raises(InvalidVerificationTransition, match="expired"):
            session.confirm(T0 + 30_000)
        assert session.state == VerificationState.EXPIRED

    def test_confirmed_is_terminal(self, session):
        session.submit_samples(point(), point(10.0), T0)
        session.confirm(T0 + 1000)
        with pytest.raises(InvalidVerificationTransition):
            session.start(T0 + 2000)
        with pytest.raises(InvalidVerificationTransition):
            session.fail("permission denied", T0 + 2000)


class TestSampleFiltering:
    """Отбраковка неточных и устаревших сэмплов."""

    def test_inaccurate_sample_rejected(self, session):
        result = session.submit_samples(point(accuracy=120.0), point(10.0), T0)

        assert result.new_state == VerificationState.TRACKING
        assert result.transition_reason == "sample_rejected"
        assert "accuracy" in result.details
        assert result.verdict is None

    def test_stale_sample_rejected(self, session):
        now = T0 + 60_000
        result = session.submit_samples(point(ts=now), point(10.0, ts=T0), now)

        assert result.transition_reason == "sample_rejected"
        assert "counterparty" in result.details
        assert "stale" in result.details

    def test_custom_limits(self):
        s = ProximityVerificationSession(
            VerificationConfig(max_accuracy_meters=200.0, max_sample_age_ms=120_000)
        )
        s.start(T0)
        result = s.submit_samples(point(accuracy=150.0), point(10.0, ts=T0 - 60_000), T0)
        assert result.new_state == VerificationState.VERIFIED

    def test_custom_window(self):
        s = ProximityVerificationSession(VerificationConfig(confirmation_window_sec=5))
        s.start(T0)
        s.submit_samples(point(), point(10.0), T0)
        assert s.countdown_seconds(T0) == 5
        assert s.tick(T0 + 5000).new_state == VerificationState.EXPIRED


class TestFailure:
    def test_location_error(self, session):
        result = session.fail("Geolocation error: User denied Geolocation", T0 + 100)

        assert result.new_state == VerificationState.FAILED
        assert result.transition_reason == "location_error"
        assert session.failure_reason == "Geolocation error: User denied Geolocation"

    def test_retry_after_failure(self, session):
        session.fail("timeout", T0 + 100)
        assert session.start(T0 + 200).new_state == VerificationState.TRACKING
        assert session.failure_reason is None


def test_history_records_transitions(session):
    session.submit_samples(point(), point(10.0), T0 + 1000)
    session.confirm(T0 + 2000)

    reasons = [reason for _, _, _, reason in session.history]
    assert reasons == ["tracking_started", "within_range", "transaction_confirmed"]
