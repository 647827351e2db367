"""
Auction / Bid — модели аукциона

Immutable Pydantic модели. Ставка не изменяет аукцион, а создаёт новый
экземпляр (см. src.marketplace.auction).
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class AuctionStatus(str, Enum):
    """Статус аукциона"""

    ACTIVE = "active"
    ENDED = "ended"
    CANCELLED = "cancelled"


class Bid(BaseModel):
    """Ставка участника."""

    bid_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    user_name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, allow_inf_nan=False, description="Цена после ставки (USD)")
    placed_at_ms: int = Field(..., ge=0)
    is_winning: bool = False

    model_config = {"frozen": True}


class Auction(BaseModel):
    """
    Аукцион по товару.

    current_bid — текущая цена; каждая ставка повышает её на increment.
    """

    auction_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    starting_price: float = Field(..., gt=0, allow_inf_nan=False)
    current_bid: float = Field(..., gt=0, allow_inf_nan=False)
    start_time_ms: int = Field(..., ge=0)
    end_time_ms: int = Field(..., ge=0)
    status: AuctionStatus = AuctionStatus.ACTIVE
    winner_id: str | None = None
    bids: tuple[Bid, ...] = ()

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_consistency(self) -> "Auction":
        if self.end_time_ms <= self.start_time_ms:
            raise ValueError(
                f"end_time_ms {self.end_time_ms} must be after start_time_ms {self.start_time_ms}"
            )
        if self.current_bid < self.starting_price:
            raise ValueError(
                f"current_bid {self.current_bid} below starting_price {self.starting_price}"
            )
        if sum(1 for b in self.bids if b.is_winning) > 1:
            raise ValueError("at most one bid can be winning")
        return self

    @property
    def bid_count(self) -> int:
        return len(self.bids)

    @property
    def winning_bid(self) -> Bid | None:
        for bid in self.bids:
            if bid.is_winning:
                return bid
        return None

    def recent_bids(self, limit: int = 5) -> list[Bid]:
        """Последние `limit` ставок, новые первыми."""
        return list(reversed(self.bids[-limit:])) if limit > 0 else []
