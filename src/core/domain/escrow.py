"""
Escrow — модели escrow сделки

EscrowRequest — вход escrow backend (цена + стороны).
EscrowRecord — immutable снимок состояния escrow; любое изменение статуса
создаёт новый экземпляр.
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class EscrowStatus(str, Enum):
    """Статус escrow сделки"""

    PENDING = "pending"  # создан, оплата не подтверждена
    FUNDED = "funded"  # платёж захвачен, средства удерживаются
    RELEASED = "released"  # доставка подтверждена, средства у продавца
    DISPUTED = "disputed"  # открыт спор, выплата заморожена
    REFUNDED = "refunded"  # средства возвращены покупателю
    CANCELLED = "cancelled"  # отменён до оплаты


# Допустимые переходы статусов
ESCROW_TRANSITIONS: dict[EscrowStatus, frozenset[EscrowStatus]] = {
    EscrowStatus.PENDING: frozenset({EscrowStatus.FUNDED, EscrowStatus.CANCELLED}),
    EscrowStatus.FUNDED: frozenset(
        {EscrowStatus.RELEASED, EscrowStatus.DISPUTED, EscrowStatus.REFUNDED}
    ),
    EscrowStatus.DISPUTED: frozenset({EscrowStatus.RELEASED, EscrowStatus.REFUNDED}),
    EscrowStatus.RELEASED: frozenset(),
    EscrowStatus.REFUNDED: frozenset(),
    EscrowStatus.CANCELLED: frozenset(),
}


# =============================================================================
# MODELS
# =============================================================================


class EscrowRequest(BaseModel):
    """Запрос на создание escrow."""

    item_price: float = Field(..., gt=0, allow_inf_nan=False, description="Цена товара (USD)")
    auction_id: str = Field(..., min_length=1)
    buyer_id: str = Field(..., min_length=1)
    seller_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class EscrowRecord(BaseModel):
    """
    Состояние escrow сделки.

    Суммы в USD, округлены до центов.
    """

    escrow_id: str = Field(..., pattern=r"^escrow_\d+_[0-9a-z]{9}$")
    auction_id: str = Field(..., min_length=1)
    buyer_id: str = Field(..., min_length=1)
    seller_id: str = Field(..., min_length=1)
    status: EscrowStatus = Field(default=EscrowStatus.PENDING)

    item_price: float = Field(..., gt=0)
    escrow_fee: float = Field(..., ge=0)
    total_amount: float = Field(..., gt=0)
    seller_amount: float = Field(..., gt=0)

    created_at_ms: int = Field(..., ge=0)
    updated_at_ms: int = Field(..., ge=0)

    model_config = {"frozen": True}

    def is_terminal(self) -> bool:
        """True если дальнейшие переходы невозможны."""
        return not ESCROW_TRANSITIONS[self.status]

    def can_transition_to(self, status: EscrowStatus) -> bool:
        return status in ESCROW_TRANSITIONS[self.status]
