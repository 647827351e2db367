"""Escrow & payment requests — открытие escrow и payload платёжного процессора.

Библиотека не обращается к платёжному процессору: она строит payload
запроса (Stripe-shaped payment intent) и ведёт статус EscrowRecord.

Payment intent:
- amount в целых центах (half-up)
- минимальный платёж 50 центов
- metadata — только строковые значения, плюс source
"""

import random
import string
from dataclasses import dataclass
from typing import Any, Dict, Final, Optional

from src.core.domain.escrow import EscrowRecord, EscrowRequest, EscrowStatus
from src.core.domain.units import dollars_to_cents, round_money
from src.core.log import get_logger
from src.core.math.fees import EscrowFeeBreakdown, EscrowFeePolicy, calculate_escrow_fee

logger = get_logger("escrow")


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_CHARGE_CENTS: Final[int] = 50

MIN_ITEM_PRICE_CENTS: Final[int] = 1

DEFAULT_CURRENCY: Final[str] = "usd"

PAYMENT_SOURCE: Final[str] = "pacmac-mobile"

ESCROW_PAYMENT_TYPE: Final[str] = "escrow_payment"

_ESCROW_ID_SUFFIX_LEN: Final[int] = 9
_BASE36_ALPHABET: Final[str] = string.digits + string.ascii_lowercase


# =============================================================================
# EXCEPTIONS
# =============================================================================


class PaymentAmountError(ValueError):
    """Сумма платежа ниже минимальной или некорректна."""
    pass


class EscrowTransitionError(Exception):
    """Недопустимая смена статуса escrow."""
    pass


@dataclass(frozen=True)
class EscrowOpening:
    """Результат открытия escrow: запись + payload платежа."""

    record: EscrowRecord
    fee: EscrowFeeBreakdown
    payment_request: Dict[str, Any]


# =============================================================================
# PAYMENT INTENT
# =============================================================================


def build_payment_intent_request(
    amount_usd: float,
    currency: str = DEFAULT_CURRENCY,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Payload создания payment intent.

    Args:
        amount_usd: Сумма в USD
        currency: Код валюты (ISO 4217, lower-case)
        metadata: Дополнительные поля (значения приводятся к str)

    Returns:
        dict: amount (центы), currency, metadata, automatic_payment_methods

    Raises:
        PaymentAmountError: Сумма < $0.50 или NaN/Inf/отрицательная
    """
    try:
        amount_cents = dollars_to_cents(amount_usd)
    except ValueError as e:
        raise PaymentAmountError(str(e)) from e

    if amount_cents < MIN_CHARGE_CENTS:
        raise PaymentAmountError(
            f"Invalid amount {amount_usd}. Minimum charge is "
            f"${MIN_CHARGE_CENTS / 100:.2f}."
        )

    meta = {key: str(value) for key, value in (metadata or {}).items()}
    meta["source"] = PAYMENT_SOURCE

    return {
        "amount": amount_cents,
        "currency": currency.lower(),
        "metadata": meta,
        "automatic_payment_methods": {"enabled": True},
    }


# =============================================================================
# ESCROW
# =============================================================================


def generate_escrow_id(now_ms: int, rng: Optional[random.Random] = None) -> str:
    """
    Идентификатор escrow: escrow_<ms>_<9 символов base36>.
    """
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_BASE36_ALPHABET) for _ in range(_ESCROW_ID_SUFFIX_LEN))
    return f"escrow_{now_ms}_{suffix}"


def build_escrow_payment_request(
    request: EscrowRequest,
    escrow_id: str,
    fee: EscrowFeeBreakdown,
) -> Dict[str, Any]:
    """Payment intent на полную сумму escrow (цена + комиссия)."""
    return build_payment_intent_request(
        fee.total_amount,
        metadata={
            "escrowId": escrow_id,
            "auctionId": request.auction_id,
            "buyerId": request.buyer_id,
            "sellerId": request.seller_id,
            "productName": request.product_name,
            "itemPrice": round_money(fee.item_price),
            "escrowFee": round_money(fee.total_escrow_fee),
            "sellerAmount": round_money(fee.seller_amount),
            "type": ESCROW_PAYMENT_TYPE,
        },
    )


def open_escrow(
    request: EscrowRequest,
    now_ms: int,
    policy: Optional[EscrowFeePolicy] = None,
    rng: Optional[random.Random] = None,
) -> EscrowOpening:
    """
    Открытие escrow: расчёт комиссии, запись PENDING, payload платежа.

    Args:
        request: Цена товара и стороны сделки
        now_ms: Текущее время (Unix timestamp ms)
        policy: Параметры комиссии (default: $3 + 3%)
        rng: Источник случайности для escrow_id

    Returns:
        EscrowOpening

    Raises:
        PaymentAmountError: Цена товара меньше одного цента
    """
    if dollars_to_cents(request.item_price) < MIN_ITEM_PRICE_CENTS:
        raise PaymentAmountError(
            f"Invalid item price {request.item_price}. Minimum item price is "
            f"${MIN_ITEM_PRICE_CENTS / 100:.2f}."
        )

    fee = calculate_escrow_fee(request.item_price, policy)
    escrow_id = generate_escrow_id(now_ms, rng)

    record = EscrowRecord(
        escrow_id=escrow_id,
        auction_id=request.auction_id,
        buyer_id=request.buyer_id,
        seller_id=request.seller_id,
        status=EscrowStatus.PENDING,
        item_price=round_money(fee.item_price),
        escrow_fee=round_money(fee.total_escrow_fee),
        total_amount=round_money(fee.total_amount),
        seller_amount=round_money(fee.seller_amount),
        created_at_ms=now_ms,
        updated_at_ms=now_ms,
    )
    payment_request = build_escrow_payment_request(request, escrow_id, fee)

    logger.info(
        f"Escrow created: {escrow_id} auction={request.auction_id} "
        f"item_price={record.item_price:.2f} fee={record.escrow_fee:.2f} "
        f"total={record.total_amount:.2f}"
    )
    return EscrowOpening(record=record, fee=fee, payment_request=payment_request)


def advance_escrow(record: EscrowRecord, status: EscrowStatus, now_ms: int) -> EscrowRecord:
    """
    Смена статуса escrow.

    Raises:
        EscrowTransitionError: Переход недопустим
    """
    if not record.can_transition_to(status):
        raise EscrowTransitionError(
            f"Escrow {record.escrow_id}: cannot move from "
            f"{record.status.value} to {status.value}"
        )

    logger.info(f"Escrow {record.escrow_id}: {record.status.value} → {status.value}")
    return record.model_copy(update={"status": status, "updated_at_ms": now_ms})
