"""Auction bidding — ставки, закрытие аукциона, статус участника.

Правила:
- Ставка повышает current_bid на increment (не меньше min_increment)
- Новая ставка становится winning, предыдущие — нет
- Ставки принимаются только в ACTIVE аукционе до end_time_ms
- Закрытие фиксирует winner_id по winning ставке
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from src.core.domain.auction import Auction, AuctionStatus, Bid
from src.core.domain.units import round_money
from src.core.log import get_logger

logger = get_logger("auction")


# =============================================================================
# EXCEPTIONS
# =============================================================================


class BidRejected(Exception):
    """Ставка не удовлетворяет правилам аукциона."""
    pass


class AuctionClosed(Exception):
    """Аукцион не принимает ставки (завершён, отменён или время вышло)."""
    pass


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class AuctionConfig:
    """Параметры ставок.

    quick_increments — предустановленные шаги в UI.
    """
    min_increment: float = 0.05
    quick_increments: tuple[float, ...] = field(default=(0.05, 0.10, 0.25, 0.50))


@dataclass(frozen=True)
class UserStanding:
    """Положение участника в аукционе."""

    bid_count: int
    is_winning: bool

    @property
    def label(self) -> str:
        if self.bid_count == 0:
            return "No bids"
        return "Winning" if self.is_winning else "Outbid"


# =============================================================================
# OPERATIONS
# =============================================================================


def next_bid_amount(auction: Auction, increment: float) -> float:
    """Цена после ставки с шагом increment."""
    return round_money(auction.current_bid + increment)


def place_bid(
    auction: Auction,
    user_id: str,
    user_name: str,
    increment: float,
    now_ms: int,
    config: Optional[AuctionConfig] = None,
) -> Auction:
    """
    Ставка участника.

    Args:
        auction: Текущее состояние аукциона
        user_id: Идентификатор участника
        user_name: Отображаемое имя
        increment: Шаг повышения цены (USD)
        now_ms: Текущее время (Unix timestamp ms)
        config: Параметры ставок

    Returns:
        Новый экземпляр Auction с добавленной ставкой

    Raises:
        AuctionClosed: Аукцион не ACTIVE или время истекло
        BidRejected: Шаг меньше минимального или NaN/Inf
    """
    config = config or AuctionConfig()

    if auction.status != AuctionStatus.ACTIVE:
        raise AuctionClosed(f"Auction {auction.auction_id} is {auction.status.value}")

    if now_ms >= auction.end_time_ms:
        raise AuctionClosed(f"Auction {auction.auction_id} ended at {auction.end_time_ms}")

    if now_ms < auction.start_time_ms:
        raise AuctionClosed(f"Auction {auction.auction_id} starts at {auction.start_time_ms}")

    if not math.isfinite(increment):
        raise BidRejected(f"Bid increment must be a valid number, got {increment}")

    # Сравнение в центах: 0.05 из UI не должен проваливаться из-за float
    if round_money(increment) < round_money(config.min_increment):
        raise BidRejected(
            f"Bid increment {increment:.2f} below minimum {config.min_increment:.2f}"
        )

    amount = next_bid_amount(auction, increment)
    bid = Bid(
        bid_id=f"{auction.auction_id}_bid_{auction.bid_count + 1}",
        user_id=user_id,
        user_name=user_name,
        amount=amount,
        placed_at_ms=now_ms,
        is_winning=True,
    )

    previous = tuple(b.model_copy(update={"is_winning": False}) for b in auction.bids)
    logger.info(
        f"Bid accepted: auction={auction.auction_id} user={user_id} "
        f"amount={amount:.2f} (+{increment:.2f})"
    )

    return auction.model_copy(update={"current_bid": amount, "bids": previous + (bid,)})


def close_auction(auction: Auction, now_ms: int) -> Auction:
    """
    Закрытие аукциона по времени.

    Raises:
        AuctionClosed: Аукцион не ACTIVE
        ValueError: Время ещё не истекло
    """
    if auction.status != AuctionStatus.ACTIVE:
        raise AuctionClosed(f"Auction {auction.auction_id} is {auction.status.value}")

    if now_ms < auction.end_time_ms:
        raise ValueError(
            f"Auction {auction.auction_id} still running: {auction.end_time_ms - now_ms}ms left"
        )

    winning = auction.winning_bid
    winner_id = winning.user_id if winning is not None else None
    logger.info(f"Auction {auction.auction_id} ended, winner={winner_id}")

    return auction.model_copy(update={"status": AuctionStatus.ENDED, "winner_id": winner_id})


def cancel_auction(auction: Auction) -> Auction:
    """Отмена активного аукциона."""
    if auction.status != AuctionStatus.ACTIVE:
        raise AuctionClosed(f"Auction {auction.auction_id} is {auction.status.value}")
    return auction.model_copy(update={"status": AuctionStatus.CANCELLED})


def user_standing(auction: Auction, user_id: str) -> UserStanding:
    """Количество ставок участника и признак лидерства."""
    user_bids = [b for b in auction.bids if b.user_id == user_id]
    return UserStanding(
        bid_count=len(user_bids),
        is_winning=any(b.is_winning for b in user_bids),
    )


def format_time_remaining(remaining_ms: int) -> str:
    """
    Оставшееся время в виде "Hh Mm Ss".

    Examples:
        >>> format_time_remaining(3_723_000)
        '1h 2m 3s'
        >>> format_time_remaining(0)
        'Auction Ended'
    """
    if remaining_ms <= 0:
        return "Auction Ended"

    hours = remaining_ms // 3_600_000
    minutes = (remaining_ms % 3_600_000) // 60_000
    seconds = (remaining_ms % 60_000) // 1000
    return f"{hours}h {minutes}m {seconds}s"
