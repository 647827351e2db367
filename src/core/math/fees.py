"""
Fees — escrow комиссия и налог checkout

Две независимые политики:
- Escrow: flat fee + процент от цены товара. Продавец получает полную цену,
  покупатель платит цену + комиссию.
- Checkout (прямая покупка): налог с subtotal.

Суммы в USD (float). Компоненты хранятся без округления; округление до
центов выполняется при конверсии в платёжный запрос (units.dollars_to_cents).
"""

from dataclasses import dataclass
from typing import Final

from src.core.math.numerical_safeguards import validate_in_range, validate_non_negative


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

ESCROW_FLAT_FEE_USD: Final[float] = 3.00
ESCROW_PERCENTAGE_FEE: Final[float] = 0.03

CHECKOUT_TAX_RATE: Final[float] = 0.07


# =============================================================================
# POLICIES
# =============================================================================


@dataclass(frozen=True)
class EscrowFeePolicy:
    """Параметры escrow комиссии."""

    flat_fee_usd: float = ESCROW_FLAT_FEE_USD
    percentage: float = ESCROW_PERCENTAGE_FEE

    def __post_init__(self) -> None:
        validate_non_negative(self.flat_fee_usd, "flat_fee_usd")
        validate_in_range(self.percentage, "percentage", 0.0, 1.0)


@dataclass(frozen=True)
class CheckoutPolicy:
    """Параметры налога прямой покупки."""

    tax_rate: float = CHECKOUT_TAX_RATE

    def __post_init__(self) -> None:
        validate_in_range(self.tax_rate, "tax_rate", 0.0, 1.0)


# =============================================================================
# BREAKDOWNS
# =============================================================================


@dataclass(frozen=True)
class EscrowFeeBreakdown:
    """Разбивка escrow платежа."""

    item_price: float
    flat_fee: float
    percentage_fee: float
    total_escrow_fee: float  # flat_fee + percentage_fee
    total_amount: float  # item_price + total_escrow_fee (платит покупатель)
    seller_amount: float  # item_price (получает продавец)

    def to_dict(self) -> dict:
        return {
            "itemPrice": self.item_price,
            "flatFee": self.flat_fee,
            "percentageFee": self.percentage_fee,
            "totalEscrowFee": self.total_escrow_fee,
            "totalAmount": self.total_amount,
            "sellerAmount": self.seller_amount,
        }


@dataclass(frozen=True)
class CheckoutBreakdown:
    """Разбивка прямой покупки."""

    subtotal: float
    tax: float
    total: float


# =============================================================================
# CALCULATIONS
# =============================================================================


def calculate_escrow_fee(
    item_price: float, policy: EscrowFeePolicy | None = None
) -> EscrowFeeBreakdown:
    """
    Расчёт escrow комиссии.

    total_escrow_fee = flat_fee + item_price * percentage

    Args:
        item_price: Цена товара (USD, >= 0)
        policy: Параметры комиссии (default: $3 + 3%)

    Returns:
        EscrowFeeBreakdown

    Raises:
        ValueError: Если цена отрицательная или NaN/Inf

    Examples:
        >>> calculate_escrow_fee(2.50).total_escrow_fee
        3.075
    """
    policy = policy or EscrowFeePolicy()
    validate_non_negative(item_price, "item_price")

    percentage_fee = item_price * policy.percentage
    total_escrow_fee = policy.flat_fee_usd + percentage_fee

    return EscrowFeeBreakdown(
        item_price=item_price,
        flat_fee=policy.flat_fee_usd,
        percentage_fee=percentage_fee,
        total_escrow_fee=total_escrow_fee,
        total_amount=item_price + total_escrow_fee,
        seller_amount=item_price,
    )


def calculate_checkout_total(
    subtotal: float, policy: CheckoutPolicy | None = None
) -> CheckoutBreakdown:
    """
    Расчёт итога прямой покупки: subtotal + tax.

    Raises:
        ValueError: Если subtotal отрицательный или NaN/Inf
    """
    policy = policy or CheckoutPolicy()
    validate_non_negative(subtotal, "subtotal")

    tax = subtotal * policy.tax_rate
    return CheckoutBreakdown(subtotal=subtotal, tax=tax, total=subtotal + tax)
