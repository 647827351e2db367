"""Bidding timers — обратный отсчёт торгов по товарам.

Реестр таймеров с инжектируемыми часами. Состояние сериализуется в
JSON-совместимый dict и восстанавливается после перезапуска клиента
(восстанавливаются только активные и не истёкшие таймеры).
"""

import time
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Optional

from src.core.log import get_logger
from src.core.math.numerical_safeguards import validate_positive

logger = get_logger("bidding_timer")

Clock = Callable[[], int]


def system_clock_ms() -> int:
    """Текущее время (Unix timestamp ms)."""
    return int(time.time() * 1000)


@dataclass
class TimerRecord:
    """Таймер торгов по одному товару."""
    item_id: str
    start_time_ms: int
    end_time_ms: int
    duration_ms: int
    is_active: bool = True


class BiddingTimerRegistry:
    """Реестр таймеров торгов.

    Время берётся из clock() при каждом вызове; poll() вызывается
    владельцем реестра (например, раз в секунду) и возвращает товары,
    торги по которым завершились с прошлого poll().
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or system_clock_ms
        self._timers: Dict[str, TimerRecord] = {}

    def start_timer(self, item_id: str, duration_ms: int) -> TimerRecord:
        """Запуск (или перезапуск) таймера товара."""
        validate_positive(duration_ms, "duration_ms")

        now = self._clock()
        record = TimerRecord(
            item_id=item_id,
            start_time_ms=now,
            end_time_ms=now + duration_ms,
            duration_ms=duration_ms,
        )
        self._timers[item_id] = record
        logger.info(f"Started bidding timer for item {item_id}, ends in {duration_ms // 1000}s")
        return record

    def time_left(self, item_id: str) -> int:
        """Оставшееся время в ms (0 для неизвестного или остановленного)."""
        record = self._timers.get(item_id)
        if record is None or not record.is_active:
            return 0
        return max(0, record.end_time_ms - self._clock())

    def is_active(self, item_id: str) -> bool:
        return self.time_left(item_id) > 0

    def stop_timer(self, item_id: str) -> bool:
        """Остановка таймера. False если таймера нет."""
        record = self._timers.get(item_id)
        if record is None:
            return False
        record.is_active = False
        logger.info(f"Stopped bidding timer for item {item_id}")
        return True

    def active_timers(self) -> Dict[str, int]:
        """item_id → оставшееся время (ms) для активных таймеров."""
        return {
            item_id: self.time_left(item_id)
            for item_id, record in self._timers.items()
            if record.is_active
        }

    def poll(self) -> List[str]:
        """Деактивация истёкших таймеров; возвращает их item_id."""
        now = self._clock()
        ended = []
        for item_id, record in self._timers.items():
            if record.is_active and record.end_time_ms <= now:
                record.is_active = False
                ended.append(item_id)
                logger.info(f"Bidding ended for item {item_id}")
        return ended

    def to_dict(self) -> Dict[str, dict]:
        return {item_id: asdict(record) for item_id, record in self._timers.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, dict], clock: Optional[Clock] = None) -> "BiddingTimerRegistry":
        """Восстановление реестра; истёкшие и остановленные таймеры отбрасываются."""
        registry = cls(clock=clock)
        now = registry._clock()
        for item_id, raw in data.items():
            record = TimerRecord(**raw)
            if record.is_active and record.end_time_ms > now:
                registry._timers[item_id] = record
                logger.info(f"Restored timer for item {item_id}")
        return registry


def format_countdown(milliseconds: int) -> str:
    """
    Формат обратного отсчёта: HH:MM:SS если есть часы, иначе MM:SS.

    Examples:
        >>> format_countdown(3_725_000)
        '01:02:05'
        >>> format_countdown(65_000)
        '01:05'
        >>> format_countdown(0)
        '00:00:00'
    """
    if milliseconds <= 0:
        return "00:00:00"

    seconds = milliseconds // 1000
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
