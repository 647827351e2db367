"""
GeoPoint / ProximityVerdict — геолокация участников сделки

GeoPoint — immutable снимок с сенсора местоположения устройства.
ProximityVerdict — производное значение, не персистится, пересчитывается
на каждой паре свежих GeoPoint.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Final

from pydantic import BaseModel, Field

from src.core.domain.units import feet_to_meters


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Порог proximity: 100 футов
PROXIMITY_THRESHOLD_FEET: Final[float] = 100.0
PROXIMITY_THRESHOLD_M: Final[float] = feet_to_meters(PROXIMITY_THRESHOLD_FEET)

# Верхняя граница "почти рядом" для UI-статуса
CLOSE_RANGE_M: Final[float] = 100.0

LATITUDE_MIN: Final[float] = -90.0
LATITUDE_MAX: Final[float] = 90.0
LONGITUDE_MIN: Final[float] = -180.0
LONGITUDE_MAX: Final[float] = 180.0


# =============================================================================
# ENUMS
# =============================================================================


class ProximityBand(str, Enum):
    """Грубая классификация расстояния для отображения статуса."""

    WITHIN_RANGE = "within_range"
    CLOSE = "close"
    TOO_FAR = "too_far"
    UNKNOWN = "unknown"


# =============================================================================
# GEOPOINT MODEL
# =============================================================================


class GeoPoint(BaseModel):
    """
    Снимок местоположения устройства.

    Immutable модель (frozen=True). Владелец — вызывающий код, который держит
    значение; accuracy и staleness фильтрует вызывающий код.

    Валидация диапазонов координат выполняется здесь, на границе модели:
    evaluator сам диапазоны не проверяет.
    """

    latitude: float = Field(
        ...,
        ge=LATITUDE_MIN,
        le=LATITUDE_MAX,
        allow_inf_nan=False,
        description="Широта, градусы",
    )
    longitude: float = Field(
        ...,
        ge=LONGITUDE_MIN,
        le=LONGITUDE_MAX,
        allow_inf_nan=False,
        description="Долгота, градусы",
    )
    accuracy_meters: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Радиус точности сенсора (м)"
    )
    captured_at_epoch_ms: int = Field(
        ..., ge=0, description="Время захвата (UTC, миллисекунды)"
    )

    model_config = {"frozen": True}

    def age_ms(self, now_ms: int) -> int:
        """Возраст снимка относительно now_ms (не меньше 0)."""
        return max(0, now_ms - self.captured_at_epoch_ms)


# =============================================================================
# PROXIMITY VERDICT
# =============================================================================


@dataclass(frozen=True)
class ProximityVerdict:
    """
    Результат проверки близости.

    Инвариант: within_range == (distance_meters <= PROXIMITY_THRESHOLD_M).
    Для некорректного входа distance_meters = NaN и within_range = False.
    """

    distance_meters: float
    within_range: bool

    @property
    def is_defined(self) -> bool:
        """False если расстояние не удалось вычислить (NaN)."""
        return not math.isnan(self.distance_meters)

    def to_dict(self) -> dict:
        return {
            "distance_meters": self.distance_meters,
            "within_range": self.within_range,
        }
