"""Swipe classification — жесты карточки товара.

Экранные координаты: ось y направлена вниз (dy < 0 — свайп вверх).
Свайп засчитывается, когда смещение строго больше commit_distance_px;
доминирующая ось определяется строгим сравнением |dx| > |dy|
(при равенстве — вертикальный свайп).
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.core.math.numerical_safeguards import all_valid_floats, clamp


class SwipeDirection(str, Enum):
    """Направление свайпа и действие над карточкой."""

    LEFT = "left"  # пропустить
    RIGHT = "right"  # в избранное
    UP = "up"  # сделать ставку
    DOWN = "down"  # подробнее


@dataclass(frozen=True)
class SwipeConfig:
    """Параметры жестов (в пикселях экрана)."""

    commit_distance_px: float = 100.0
    rotation_per_px: float = 0.1
    fade_distance_px: float = 300.0
    min_opacity: float = 0.3


@dataclass(frozen=True)
class DragFeedback:
    """Визуальная обратная связь во время перетаскивания."""

    rotation_deg: float
    opacity: float


def classify_swipe(
    dx: float, dy: float, config: Optional[SwipeConfig] = None
) -> Optional[SwipeDirection]:
    """
    Классификация завершённого жеста.

    Args:
        dx: Смещение по x (px), вправо положительное
        dy: Смещение по y (px), вниз положительное
        config: Параметры жестов

    Returns:
        SwipeDirection, либо None если жест короче порога (карточка
        возвращается на место)
    """
    config = config or SwipeConfig()

    if not all_valid_floats(dx, dy):
        return None

    if math.hypot(dx, dy) <= config.commit_distance_px:
        return None

    if abs(dx) > abs(dy):
        return SwipeDirection.RIGHT if dx > 0 else SwipeDirection.LEFT
    return SwipeDirection.UP if dy < 0 else SwipeDirection.DOWN


def drag_feedback(
    dx: float, dy: float, config: Optional[SwipeConfig] = None
) -> DragFeedback:
    """Наклон и прозрачность карточки при смещении (dx, dy).

    NaN/Inf смещение даёт карточку в покое (без наклона, непрозрачную).
    """
    config = config or SwipeConfig()

    if not all_valid_floats(dx, dy):
        return DragFeedback(rotation_deg=0.0, opacity=1.0)

    distance = math.hypot(dx, dy)
    opacity = clamp(1 - distance / config.fade_distance_px, config.min_opacity, 1.0)
    return DragFeedback(rotation_deg=dx * config.rotation_per_px, opacity=opacity)
