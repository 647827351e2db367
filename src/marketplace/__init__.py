"""Marketplace — операции площадки поверх domain моделей.

- auction: ставки и закрытие аукциона
- bidding_timer: таймеры торгов
- escrow: открытие escrow и payload платежа
- disputes: трекинг споров
- swipe: классификация жестов карточки
"""

from .auction import (
    AuctionClosed,
    AuctionConfig,
    BidRejected,
    UserStanding,
    cancel_auction,
    close_auction,
    format_time_remaining,
    next_bid_amount,
    place_bid,
    user_standing,
)
from .bidding_timer import BiddingTimerRegistry, TimerRecord, format_countdown
from .disputes import (
    DisputeSortKey,
    DisputeStats,
    DisputeTransitionError,
    add_message,
    dispute_stats,
    escalate_dispute,
    filter_disputes,
    resolve_dispute,
    sort_disputes,
    update_status,
)
from .escrow import (
    MIN_CHARGE_CENTS,
    MIN_ITEM_PRICE_CENTS,
    EscrowOpening,
    EscrowTransitionError,
    PaymentAmountError,
    advance_escrow,
    build_escrow_payment_request,
    build_payment_intent_request,
    generate_escrow_id,
    open_escrow,
)
from .swipe import DragFeedback, SwipeConfig, SwipeDirection, classify_swipe, drag_feedback

__all__ = [
    "AuctionClosed",
    "AuctionConfig",
    "BidRejected",
    "UserStanding",
    "cancel_auction",
    "close_auction",
    "format_time_remaining",
    "next_bid_amount",
    "place_bid",
    "user_standing",
    "BiddingTimerRegistry",
    "TimerRecord",
    "format_countdown",
    "DisputeSortKey",
    "DisputeStats",
    "DisputeTransitionError",
    "add_message",
    "dispute_stats",
    "escalate_dispute",
    "filter_disputes",
    "resolve_dispute",
    "sort_disputes",
    "update_status",
    "MIN_CHARGE_CENTS",
    "MIN_ITEM_PRICE_CENTS",
    "EscrowOpening",
    "EscrowTransitionError",
    "PaymentAmountError",
    "advance_escrow",
    "build_escrow_payment_request",
    "build_payment_intent_request",
    "generate_escrow_id",
    "open_escrow",
    "DragFeedback",
    "SwipeConfig",
    "SwipeDirection",
    "classify_swipe",
    "drag_feedback",
]
