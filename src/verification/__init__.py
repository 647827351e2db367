"""Verification — workflow подтверждения личной встречи сторон сделки.

- Sampling GeoPoint обеих сторон с фильтрацией по accuracy/staleness
- Proximity verdict на каждой свежей паре
- Окно подтверждения (30 сек) после успешной проверки
- Подтверждение сделки только внутри окна
"""

from .state_machine import (
    InvalidVerificationTransition,
    ProximityVerificationSession,
    VerificationConfig,
    VerificationState,
    VerificationStepResult,
)

__all__ = [
    "InvalidVerificationTransition",
    "ProximityVerificationSession",
    "VerificationConfig",
    "VerificationState",
    "VerificationStepResult",
]
