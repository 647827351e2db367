"""Proximity Verification State Machine — подтверждение встречи покупателя и продавца.

- Свежая пара GeoPoint → Distance Evaluator → verdict
- within_range → VERIFIED, открывается окно подтверждения
- Новая within_range пара в VERIFIED обновляет окно
- Выход из радиуса в VERIFIED → обратно в TRACKING
- Окно истекло без подтверждения → EXPIRED
- Ошибка сенсора → FAILED
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from src.core.domain.geo import PROXIMITY_THRESHOLD_M, GeoPoint, ProximityBand, ProximityVerdict
from src.core.log import get_logger
from src.core.math.geodesy import evaluate_proximity, proximity_band

logger = get_logger("verification")


class VerificationState(str, Enum):
    """Состояние сессии верификации."""
    IDLE = "IDLE"
    TRACKING = "TRACKING"
    VERIFIED = "VERIFIED"
    CONFIRMED = "CONFIRMED"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"


# Состояния, из которых разрешён start()
_RESTARTABLE_STATES = frozenset(
    {VerificationState.IDLE, VerificationState.EXPIRED, VerificationState.FAILED}
)

# Состояния, в которых принимаются GeoPoint
_SAMPLING_STATES = frozenset({VerificationState.TRACKING, VerificationState.VERIFIED})


class InvalidVerificationTransition(Exception):
    """Операция недопустима в текущем состоянии сессии."""
    pass


@dataclass(frozen=True)
class VerificationConfig:
    """Конфигурация верификации.

    - threshold_m: порог близости (100 футов)
    - confirmation_window_sec: время на подтверждение после успешной проверки
    - max_accuracy_meters: сэмплы с худшей точностью отбрасываются
    - max_sample_age_ms: сэмплы старше отбрасываются
    """
    threshold_m: float = PROXIMITY_THRESHOLD_M
    confirmation_window_sec: int = 30
    max_accuracy_meters: float = 50.0
    max_sample_age_ms: int = 10_000


@dataclass(frozen=True)
class VerificationStepResult:
    """Результат одного шага сессии."""

    new_state: VerificationState
    previous_state: VerificationState
    transition_occurred: bool
    transition_reason: str

    verdict: Optional[ProximityVerdict]
    band: ProximityBand
    expires_at_ms: Optional[int]

    # Для отладки
    details: str


class ProximityVerificationSession:
    """Сессия верификации одной сделки.

    Время передаётся явно (now_ms) во все методы; сессия не запускает
    таймеров и потоков.

    States:
    - IDLE: сессия не запущена
    - TRACKING: сэмплы принимаются, стороны ещё не рядом
    - VERIFIED: стороны рядом, открыто окно подтверждения
    - CONFIRMED: сделка подтверждена (терминальное)
    - EXPIRED: окно истекло, требуется start()
    - FAILED: ошибка сенсора, требуется start()
    """

    def __init__(self, config: Optional[VerificationConfig] = None):
        self.config = config or VerificationConfig()

        self._state = VerificationState.IDLE
        self._expires_at_ms: Optional[int] = None
        self._last_verdict: Optional[ProximityVerdict] = None
        self._failure_reason: Optional[str] = None

        # История переходов: (ts_ms, from, to, reason)
        self._transition_history: List[tuple[int, VerificationState, VerificationState, str]] = []

    @property
    def state(self) -> VerificationState:
        return self._state

    @property
    def last_verdict(self) -> Optional[ProximityVerdict]:
        return self._last_verdict

    @property
    def expires_at_ms(self) -> Optional[int]:
        return self._expires_at_ms

    @property
    def failure_reason(self) -> Optional[str]:
        return self._failure_reason

    @property
    def history(self) -> List[tuple[int, VerificationState, VerificationState, str]]:
        return list(self._transition_history)

    def start(self, now_ms: int) -> VerificationStepResult:
        """Запуск (или перезапуск) трекинга."""
        if self._state not in _RESTARTABLE_STATES:
            raise InvalidVerificationTransition(
                f"Cannot start verification from state {self._state.value}"
            )

        self._expires_at_ms = None
        self._last_verdict = None
        self._failure_reason = None
        return self._transition(
            VerificationState.TRACKING, now_ms, "tracking_started", "Location tracking started"
        )

    def stop(self, now_ms: int) -> VerificationStepResult:
        """Остановка трекинга пользователем."""
        if self._state not in _SAMPLING_STATES:
            raise InvalidVerificationTransition(
                f"Cannot stop verification from state {self._state.value}"
            )

        self._expires_at_ms = None
        return self._transition(
            VerificationState.IDLE, now_ms, "tracking_stopped", "Location tracking stopped"
        )

    def submit_samples(
        self, observer: GeoPoint, counterparty: GeoPoint, now_ms: int
    ) -> VerificationStepResult:
        """Обработка свежей пары местоположений.

        Args:
            observer: местоположение текущего участника
            counterparty: местоположение второй стороны
            now_ms: текущее время (Unix timestamp ms)

        Returns:
            VerificationStepResult; для отброшенных сэмплов состояние не меняется
        """
        expired = self._expire_if_due(now_ms)
        if expired is not None:
            return expired

        if self._state not in _SAMPLING_STATES:
            raise InvalidVerificationTransition(
                f"Cannot accept location samples in state {self._state.value}"
            )

        # 1. Фильтрация сэмплов по точности и свежести
        rejection = self._check_samples(observer, counterparty, now_ms)
        if rejection is not None:
            logger.warning(f"Location sample rejected: {rejection}")
            return self._stay(
                reason="sample_rejected",
                details=rejection,
            )

        # 2. Distance Evaluator
        verdict = evaluate_proximity(observer, counterparty, self.config.threshold_m)
        self._last_verdict = verdict

        # 3. В радиусе: VERIFIED, окно открывается (или обновляется)
        if verdict.within_range:
            self._expires_at_ms = now_ms + self.config.confirmation_window_sec * 1000
            if self._state == VerificationState.VERIFIED:
                return self._stay(
                    reason="verification_refreshed",
                    details=f"distance={verdict.distance_meters:.2f}m, window refreshed",
                )
            return self._transition(
                VerificationState.VERIFIED,
                now_ms,
                "within_range",
                f"distance={verdict.distance_meters:.2f}m <= {self.config.threshold_m}m",
            )

        # 4. Вне радиуса
        if self._state == VerificationState.VERIFIED:
            self._expires_at_ms = None
            return self._transition(
                VerificationState.TRACKING,
                now_ms,
                "left_range",
                f"distance={verdict.distance_meters:.2f}m > {self.config.threshold_m}m",
            )

        return self._stay(
            reason="out_of_range",
            details=f"distance={verdict.distance_meters:.2f}m > {self.config.threshold_m}m",
        )

    def tick(self, now_ms: int) -> VerificationStepResult:
        """Проверка истечения окна подтверждения."""
        expired = self._expire_if_due(now_ms)
        if expired is not None:
            return expired
        return self._stay(reason="no_transition", details=f"State={self._state.value}")

    def countdown_seconds(self, now_ms: int) -> int:
        """Оставшиеся целые секунды окна подтверждения (0 вне VERIFIED)."""
        if self._state != VerificationState.VERIFIED or self._expires_at_ms is None:
            return 0
        remaining_ms = self._expires_at_ms - now_ms
        if remaining_ms <= 0:
            return 0
        return math.ceil(remaining_ms / 1000)

    def confirm(self, now_ms: int) -> VerificationStepResult:
        """Подтверждение сделки. Допустимо только внутри окна."""
        expired = self._expire_if_due(now_ms)
        if expired is not None:
            raise InvalidVerificationTransition("Confirmation window has expired")

        if self._state != VerificationState.VERIFIED:
            raise InvalidVerificationTransition(
                f"Cannot confirm transaction in state {self._state.value}"
            )

        distance = self._last_verdict.distance_meters if self._last_verdict else math.nan
        return self._transition(
            VerificationState.CONFIRMED,
            now_ms,
            "transaction_confirmed",
            f"Confirmed at distance={distance:.2f}m",
        )

    def fail(self, reason: str, now_ms: int) -> VerificationStepResult:
        """Ошибка геолокации (нет разрешения, таймаут сенсора)."""
        if self._state == VerificationState.CONFIRMED:
            raise InvalidVerificationTransition("Cannot fail a confirmed verification")

        self._failure_reason = reason
        self._expires_at_ms = None
        logger.error(f"Location error: {reason}")
        return self._transition(VerificationState.FAILED, now_ms, "location_error", reason)

    def _check_samples(
        self, observer: GeoPoint, counterparty: GeoPoint, now_ms: int
    ) -> Optional[str]:
        """Причина отбраковки сэмплов, None если оба пригодны."""
        for role, point in (("observer", observer), ("counterparty", counterparty)):
            if point.accuracy_meters > self.config.max_accuracy_meters:
                return (
                    f"{role} accuracy {point.accuracy_meters:.1f}m exceeds "
                    f"{self.config.max_accuracy_meters:.1f}m"
                )
            age_ms = point.age_ms(now_ms)
            if age_ms > self.config.max_sample_age_ms:
                return f"{role} sample is stale: age {age_ms}ms > {self.config.max_sample_age_ms}ms"
        return None

    def _expire_if_due(self, now_ms: int) -> Optional[VerificationStepResult]:
        if (
            self._state == VerificationState.VERIFIED
            and self._expires_at_ms is not None
            and now_ms >= self._expires_at_ms
        ):
            expired_at = self._expires_at_ms
            self._expires_at_ms = None
            return self._transition(
                VerificationState.EXPIRED,
                now_ms,
                "confirmation_window_expired",
                f"Window expired at {expired_at}",
            )
        return None

    def _transition(
        self,
        new_state: VerificationState,
        now_ms: int,
        reason: str,
        details: str,
    ) -> VerificationStepResult:
        previous_state = self._state
        self._state = new_state
        self._transition_history.append((now_ms, previous_state, new_state, reason))
        logger.info(f"Verification {previous_state.value} → {new_state.value}: {reason}")
        return self._create_result(previous_state, True, reason, details)

    def _stay(self, reason: str, details: str) -> VerificationStepResult:
        return self._create_result(self._state, False, reason, details)

    def _create_result(
        self,
        previous_state: VerificationState,
        transition_occurred: bool,
        reason: str,
        details: str,
    ) -> VerificationStepResult:
        """Создание результата шага."""
        verdict = self._last_verdict
        band = (
            proximity_band(verdict.distance_meters, self.config.threshold_m)
            if verdict is not None
            else ProximityBand.UNKNOWN
        )
        return VerificationStepResult(
            new_state=self._state,
            previous_state=previous_state,
            transition_occurred=transition_occurred,
            transition_reason=reason,
            verdict=verdict,
            band=band,
            expires_at_ms=self._expires_at_ms,
            details=details,
        )
