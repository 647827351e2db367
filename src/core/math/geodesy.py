"""
Geodesy — расстояние по большому кругу и proximity verdict

Distance Evaluator: чистая функция двух координат → расстояние в метрах
и булев вердикт "в пределах порога".

Формула haversine, средний радиус Земли R = 6 371 000 м:
    a = sin²(Δφ/2) + cos(φ1)·cos(φ2)·sin²(Δλ/2)
    c = 2·atan2(√a, √(1-a))
    d = R·c

Порог 30.48 м (100 футов) включительный.

Предусловие: latitude ∈ [-90, 90], longitude ∈ [-180, 180]. Диапазоны здесь
НЕ проверяются (это делает GeoPoint). NaN/Inf на входе даёт NaN расстояние
и within_range = False.

Функции без побочных эффектов, детерминированы, reentrant.
"""

import math
from typing import Final

from src.core.domain.geo import (
    CLOSE_RANGE_M,
    PROXIMITY_THRESHOLD_M,
    GeoPoint,
    ProximityBand,
    ProximityVerdict,
)
from src.core.math.numerical_safeguards import all_valid_floats, clamp


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Средний радиус Земли (м)
EARTH_RADIUS_M: Final[float] = 6_371_000.0


# =============================================================================
# DISTANCE
# =============================================================================


def haversine_distance_m(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius_m: float = EARTH_RADIUS_M,
) -> float:
    """
    Расстояние по поверхности сферы между двумя точками.

    Args:
        lat1, lon1: Первая точка (градусы)
        lat2, lon2: Вторая точка (градусы)
        radius_m: Радиус сферы (default: средний радиус Земли)

    Returns:
        Расстояние в метрах (>= 0), либо NaN при NaN/Inf на входе

    Examples:
        >>> haversine_distance_m(0.0, 0.0, 0.0, 0.0)
        0.0
    """
    if not all_valid_floats(lat1, lon1, lat2, lon2):
        return math.nan

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Ошибки округления могут вывести a за [0, 1] для антиподов
    a = clamp(a, 0.0, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return radius_m * c


def distance_between(observer: GeoPoint, counterparty: GeoPoint) -> float:
    """Расстояние между двумя GeoPoint в метрах."""
    return haversine_distance_m(
        observer.latitude,
        observer.longitude,
        counterparty.latitude,
        counterparty.longitude,
    )


# =============================================================================
# CLASSIFICATION
# =============================================================================


def is_within_range(
    distance_m: float, threshold_m: float = PROXIMITY_THRESHOLD_M
) -> bool:
    """
    Порог включительный. NaN → False (сравнение с NaN всегда ложно).
    """
    return distance_m <= threshold_m


def proximity_band(
    distance_m: float,
    threshold_m: float = PROXIMITY_THRESHOLD_M,
    close_range_m: float = CLOSE_RANGE_M,
) -> ProximityBand:
    """
    Классификация расстояния для статуса верификации.

    - <= threshold_m: WITHIN_RANGE
    - <= close_range_m: CLOSE
    - иначе: TOO_FAR
    - NaN: UNKNOWN
    """
    if math.isnan(distance_m):
        return ProximityBand.UNKNOWN
    if distance_m <= threshold_m:
        return ProximityBand.WITHIN_RANGE
    if distance_m <= close_range_m:
        return ProximityBand.CLOSE
    return ProximityBand.TOO_FAR


# =============================================================================
# EVALUATOR
# =============================================================================


def evaluate_proximity_coords(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    threshold_m: float = PROXIMITY_THRESHOLD_M,
) -> ProximityVerdict:
    """Proximity verdict по сырым координатам (градусы)."""
    distance_m = haversine_distance_m(lat1, lon1, lat2, lon2)
    return ProximityVerdict(
        distance_meters=distance_m,
        within_range=is_within_range(distance_m, threshold_m),
    )


def evaluate_proximity(
    observer: GeoPoint,
    counterparty: GeoPoint,
    threshold_m: float = PROXIMITY_THRESHOLD_M,
) -> ProximityVerdict:
    """
    Distance Evaluator.

    Args:
        observer: Местоположение текущего участника
        counterparty: Местоположение второй стороны
        threshold_m: Порог близости (default: 30.48 м, включительно)

    Returns:
        ProximityVerdict(distance_meters, within_range)
    """
    return evaluate_proximity_coords(
        observer.latitude,
        observer.longitude,
        counterparty.latitude,
        counterparty.longitude,
        threshold_m=threshold_m,
    )
