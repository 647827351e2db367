"""
Core math modules

Численные примитивы и денежная арифметика. Геодезия импортируется напрямую
из src.core.math.geodesy (зависит от src.core.domain).
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    EPS_MONEY,
    all_valid_floats,
    clamp,
    is_close,
    is_valid_float,
    round_half_up,
    validate_in_range,
    validate_non_negative,
    validate_positive,
)

# Fees
from src.core.math.fees import (
    CHECKOUT_TAX_RATE,
    ESCROW_FLAT_FEE_USD,
    ESCROW_PERCENTAGE_FEE,
    CheckoutBreakdown,
    CheckoutPolicy,
    EscrowFeeBreakdown,
    EscrowFeePolicy,
    calculate_checkout_total,
    calculate_escrow_fee,
)

__all__ = [
    # Numerical Safeguards: constants
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    "EPS_MONEY",
    # Numerical Safeguards: functions
    "all_valid_floats",
    "clamp",
    "is_close",
    "is_valid_float",
    "round_half_up",
    "validate_in_range",
    "validate_non_negative",
    "validate_positive",
    # Fees: constants
    "CHECKOUT_TAX_RATE",
    "ESCROW_FLAT_FEE_USD",
    "ESCROW_PERCENTAGE_FEE",
    # Fees: types
    "CheckoutBreakdown",
    "CheckoutPolicy",
    "EscrowFeeBreakdown",
    "EscrowFeePolicy",
    # Fees: functions
    "calculate_checkout_total",
    "calculate_escrow_fee",
]
