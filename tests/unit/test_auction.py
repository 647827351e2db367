"""Тесты для auction bidding.

Покрытие:
- Ставки: шаг, winning флаг, минимальный шаг
- Закрытый / истёкший аукцион
- Закрытие и победитель
- Статус участника
- Формат оставшегося времени
"""

import pytest

from src.core.domain.auction import Auction, AuctionStatus
from src.marketplace.auction import (
    AuctionClosed,
    AuctionConfig,
    BidRejected,
    cancel_auction,
    close_auction,
    format_time_remaining,
    next_bid_amount,
    place_bid,
    user_standing,
)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def auction():
    """Активный аукцион на 1 час, старт $1.00."""
    return Auction(
        auction_id="auction_123",
        product_id="iphone_13_128gb",
        starting_price=1.00,
        current_bid=1.00,
        start_time_ms=0,
        end_time_ms=3_600_000,
    )


# =============================================================================
# ТЕСТЫ: ставки
# =============================================================================


def test_bid_raises_current_price(auction):
    """Ставка $0.05 → current_bid $1.05."""
    updated = place_bid(auction, "u1", "Alice", 0.05, now_ms=1000)

    assert updated.current_bid == 1.05
    assert updated.bid_count == 1
    assert updated.winning_bid.user_id == "u1"
    assert updated.winning_bid.amount == 1.05
    # Исходный экземпляр не изменился
    assert auction.bid_count == 0
    assert auction.current_bid == 1.00


def test_new_bid_outbids_previous(auction):
    a1 = place_bid(auction, "u1", "Alice", 0.05, now_ms=1000)
    a2 = place_bid(a1, "u2", "Bob", 0.10, now_ms=2000)

    assert a2.current_bid == 1.15
    assert a2.winning_bid.user_id == "u2"
    assert [b.is_winning for b in a2.bids] == [False, True]


@pytest.mark.parametrize("increment", AuctionConfig().quick_increments)
def test_quick_increments_accepted(auction, increment):
    updated = place_bid(auction, "u1", "Alice", increment, now_ms=1000)
    assert updated.current_bid == next_bid_amount(auction, increment)


@pytest.mark.parametrize("increment", [0.04, 0.0, -0.05])
def test_increment_below_minimum_rejected(auction, increment):
    with pytest.raises(BidRejected, match="below minimum"):
        place_bid(auction, "u1", "Alice", increment, now_ms=1000)


def test_nan_increment_rejected(auction):
    with pytest.raises(BidRejected):
        place_bid(auction, "u1", "Alice", float("nan"), now_ms=1000)


def test_custom_min_increment(auction):
    config = AuctionConfig(min_increment=1.0)
    with pytest.raises(BidRejected):
        place_bid(auction, "u1", "Alice", 0.50, now_ms=1000, config=config)


def test_bid_after_end_rejected(auction):
    with pytest.raises(AuctionClosed):
        place_bid(auction, "u1", "Alice", 0.05, now_ms=3_600_000)


def test_bid_before_start_rejected():
    future = Auction(
        auction_id="a2",
        product_id="p",
        starting_price=1.0,
        current_bid=1.0,
        start_time_ms=10_000,
        end_time_ms=20_000,
    )
    with pytest.raises(AuctionClosed, match="starts at"):
        place_bid(future, "u1", "Alice", 0.05, now_ms=5000)


def test_bid_on_cancelled_rejected(auction):
    cancelled = cancel_auction(auction)
    assert cancelled.status == AuctionStatus.CANCELLED
    with pytest.raises(AuctionClosed):
        place_bid(cancelled, "u1", "Alice", 0.05, now_ms=1000)


# =============================================================================
# ТЕСТЫ: закрытие
# =============================================================================


def test_close_sets_winner(auction):
    a = place_bid(auction, "u1", "Alice", 0.05, now_ms=1000)
    a = place_bid(a, "u2", "Bob", 0.25, now_ms=2000)

    closed = close_auction(a, now_ms=3_600_000)

    assert closed.status == AuctionStatus.ENDED
    assert closed.winner_id == "u2"
    assert closed.current_bid == 1.30


def test_close_without_bids(auction):
    closed = close_auction(auction, now_ms=3_600_001)
    assert closed.winner_id is None


def test_close_before_end_rejected(auction):
    with pytest.raises(ValueError, match="still running"):
        close_auction(auction, now_ms=1000)


def test_close_twice_rejected(auction):
    closed = close_auction(auction, now_ms=3_600_000)
    with pytest.raises(AuctionClosed):
        close_auction(closed, now_ms=3_600_001)


# =============================================================================
# ТЕСТЫ: статус участника / формат времени
# =============================================================================


def test_user_standing(auction):
    a = place_bid(auction, "u1", "Alice", 0.05, now_ms=1000)
    a = place_bid(a, "u2", "Bob", 0.05, now_ms=2000)
    a = place_bid(a, "u1", "Alice", 0.05, now_ms=3000)

    alice = user_standing(a, "u1")
    bob = user_standing(a, "u2")

    assert alice.bid_count == 2
    assert alice.is_winning is True
    assert alice.label == "Winning"
    assert bob.bid_count == 1
    assert bob.label == "Outbid"
    assert user_standing(a, "u3").label == "No bids"


@pytest.mark.parametrize(
    "remaining_ms, expected",
    [
        (3_723_000, "1h 2m 3s"),
        (59_999, "0h 0m 59s"),
        (0, "Auction Ended"),
        (-5, "Auction Ended"),
    ],
)
def test_format_time_remaining(remaining_ms, expected):
    assert format_time_remaining(remaining_ms) == expected
