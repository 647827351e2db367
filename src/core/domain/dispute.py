"""
Dispute — модели споров по сделкам

Immutable Pydantic модели; изменения создают новый экземпляр
(см. src.marketplace.disputes).
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class DisputeType(str, Enum):
    """Тип спора"""

    ITEM_NOT_RECEIVED = "item_not_received"
    ITEM_NOT_AS_DESCRIBED = "item_not_as_described"
    DAMAGED_ITEM = "damaged_item"
    WRONG_ITEM = "wrong_item"
    SELLER_NO_SHOW = "seller_no_show"
    BUYER_NO_SHOW = "buyer_no_show"
    PAYMENT_ISSUE = "payment_issue"
    OTHER = "other"


class DisputeStatus(str, Enum):
    """Статус спора"""

    OPEN = "open"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    CLOSED = "closed"
    ESCALATED = "escalated"


class DisputePriority(str, Enum):
    """Приоритет спора"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Ранг приоритета для сортировки (больше = важнее)
PRIORITY_RANK: dict[DisputePriority, int] = {
    DisputePriority.URGENT: 4,
    DisputePriority.HIGH: 3,
    DisputePriority.MEDIUM: 2,
    DisputePriority.LOW: 1,
}


class ResolutionDecision(str, Enum):
    """Решение по спору"""

    BUYER_FAVOR = "buyer_favor"
    SELLER_FAVOR = "seller_favor"
    PARTIAL_REFUND = "partial_refund"
    NO_FAULT = "no_fault"


# =============================================================================
# MODELS
# =============================================================================


class DisputeMessage(BaseModel):
    """Сообщение в треде спора."""

    message_id: str = Field(..., min_length=1)
    sender_id: str = Field(..., min_length=1)
    sender_name: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    timestamp_ms: int = Field(..., ge=0)
    is_internal: bool = False

    model_config = {"frozen": True}


class DisputeResolution(BaseModel):
    """Итог рассмотрения спора."""

    decision: ResolutionDecision
    amount: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    reason: str = Field(..., min_length=1)
    resolved_at_ms: int = Field(..., ge=0)
    resolved_by: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class Dispute(BaseModel):
    """Спор по сделке."""

    dispute_id: str = Field(..., min_length=1)
    transaction_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, allow_inf_nan=False, description="Сумма сделки (USD)")
    dispute_type: DisputeType
    status: DisputeStatus = DisputeStatus.OPEN
    priority: DisputePriority = DisputePriority.MEDIUM
    description: str = ""
    created_by: str = Field(..., min_length=1)
    created_at_ms: int = Field(..., ge=0)
    updated_at_ms: int = Field(..., ge=0)
    assigned_to: str | None = None
    resolution: DisputeResolution | None = None
    messages: tuple[DisputeMessage, ...] = ()

    model_config = {"frozen": True}

    def public_messages(self) -> list[DisputeMessage]:
        """Сообщения, видимые сторонам сделки (без внутренних заметок)."""
        return [m for m in self.messages if not m.is_internal]
