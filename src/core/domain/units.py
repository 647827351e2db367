"""
Units — централизованный модуль конверсии единиц

Единственный допустимый способ преобразований между:
- футы ↔ метры (порог proximity задан в футах, расчёты идут в метрах)
- доллары ↔ центы (платёжный процессор принимает целые центы)
- метры → человекочитаемая строка расстояния

ЗАПРЕЩЕНО умножать на 0.3048 или на 100 вне этого модуля.
"""

from typing import Final

from src.core.math.numerical_safeguards import (
    is_valid_float,
    round_half_up,
    validate_non_negative,
)


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Международный фут (точно)
METERS_PER_FOOT: Final[float] = 0.3048

CENTS_PER_DOLLAR: Final[int] = 100

METERS_PER_KILOMETER: Final[float] = 1000.0

CENTIMETERS_PER_METER: Final[int] = 100


# =============================================================================
# РАССТОЯНИЯ
# =============================================================================


def feet_to_meters(feet: float) -> float:
    """
    Конверсия футов в метры.

    Examples:
        >>> feet_to_meters(100.0)
        30.48
    """
    return round(feet * METERS_PER_FOOT, 10)


def meters_to_feet(meters: float) -> float:
    """Конверсия метров в футы."""
    return meters / METERS_PER_FOOT


def format_distance(meters: float) -> str:
    """
    Человекочитаемое расстояние.

    - < 1 m: сантиметры, целое число
    - < 1 km: метры, целое число
    - иначе: километры, один знак после запятой

    Args:
        meters: Расстояние в метрах

    Returns:
        Строка вида "45 cm", "27 m", "3935.7 km"; "unknown" для NaN/Inf

    Examples:
        >>> format_distance(0.45)
        '45 cm'
        >>> format_distance(27.4)
        '27 m'
        >>> format_distance(3935746.25)
        '3935.7 km'
    """
    if not is_valid_float(meters):
        return "unknown"

    if meters < 1:
        return f"{int(round_half_up(meters * CENTIMETERS_PER_METER))} cm"
    if meters < METERS_PER_KILOMETER:
        return f"{int(round_half_up(meters))} m"
    return f"{meters / METERS_PER_KILOMETER:.1f} km"


# =============================================================================
# ДЕНЬГИ
# =============================================================================


def round_money(amount_usd: float) -> float:
    """Округление суммы до центов (half-up)."""
    return round_half_up(amount_usd, 2)


def dollars_to_cents(amount_usd: float) -> int:
    """
    Конверсия USD → целые центы (half-up).

    Args:
        amount_usd: Сумма в долларах (неотрицательная)

    Returns:
        Сумма в центах

    Raises:
        ValueError: Если сумма отрицательная или NaN/Inf

    Examples:
        >>> dollars_to_cents(5.5775)
        558
        >>> dollars_to_cents(0.5)
        50
    """
    validate_non_negative(amount_usd, "amount_usd")
    return int(round_half_up(amount_usd * CENTS_PER_DOLLAR))


def cents_to_dollars(amount_cents: int) -> float:
    """Конверсия центов → USD."""
    if amount_cents < 0:
        raise ValueError(f"amount_cents cannot be negative: {amount_cents}")
    return amount_cents / CENTS_PER_DOLLAR
