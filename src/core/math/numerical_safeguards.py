"""
Numerical Safeguards — примитивы безопасной арифметики

Используются геодезией (haversine) и денежными расчётами (escrow, checkout):
- NaN/Inf детекция (координаты с сенсора могут быть мусором)
- Clamp для промежуточных значений (haversine `a` обязан лежать в [0, 1])
- Epsilon-сравнения float
- Округление half-up (денежные суммы округляются как в UI, а не banker's)
- Валидация аргументов с понятными сообщениями об ошибках

ИНВАРИАНТЫ:
1. NaN никогда не превращается в валидное число молча
2. Все функции детерминированы и не имеют побочных эффектов
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Относительная толерантность для is_close
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Абсолютная толерантность для is_close
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12

# Толерантность для денежных сумм (доли цента)
EPS_MONEY: Final[float] = 1e-9


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, что значение конечное (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение finite
    """
    return math.isfinite(value)


def all_valid_floats(*values: float) -> bool:
    """True если все значения конечные."""
    return all(is_valid_float(v) for v in values)


# =============================================================================
# СРАВНЕНИЯ И ОГРАНИЧЕНИЯ
# =============================================================================


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение float с учётом машинной точности.

    abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Ограничение значения диапазоном [min_value, max_value].

    NaN пропагируется без изменений: max()/min() в Python молча
    заменили бы его на границу.

    Examples:
        >>> clamp(1.0000000002, 0.0, 1.0)
        1.0
        >>> clamp(-1e-17, 0.0, 1.0)
        0.0
    """
    if math.isnan(value):
        return value

    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def round_half_up(value: float, decimals: int = 0) -> float:
    """
    Округление half away from zero до `decimals` знаков.

    Встроенный round() использует banker's rounding (round(0.125, 2) == 0.12),
    денежные суммы так округлять нельзя.

    Examples:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(0.125, 2)
        0.13
        >>> round_half_up(-2.5)
        -3.0
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    scale = 10 ** decimals
    # repr-округление убирает артефакты вида 0.125 * 100 = 12.499999999999998
    scaled = float(f"{value * scale:.9f}")

    if scaled >= 0:
        steps = math.floor(scaled + 0.5)
    else:
        steps = math.ceil(scaled - 0.5)

    return steps / scale


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_positive(value: float, name: str) -> None:
    """
    Валидация, что значение строго положительное.

    Raises:
        ValueError: Если value <= 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное.

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Валидация, что значение в заданном диапазоне (границы включительно).

    Raises:
        ValueError: Если value вне диапазона или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")
