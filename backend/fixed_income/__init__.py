"""
Fixed Income Bond Calculator

A module for fixed-rate bond analytics, featuring:
- Current Yield and approximate Yield to Maturity
- Total interest and Premium / Discount / Par classification
- Cash flows discounted at the periodic yield
- Dated payment schedule with cumulative interest

All calculations use Decimal precision internally.
"""

from .models import (
    BondParameters,
    BondStatus,
    CalculationResult,
    CashflowPeriod,
    CashflowType,
    CouponFrequency,
    ScheduleResult,
    ScheduleRow
)

from .calculations import (
    calculate_periodic_coupon_rate,
    calculate_coupon_payment,
    calculate_total_periods,
    calculate_current_yield,
    calculate_approximate_ytm,
    calculate_total_interest,
    classify_bond_status,
    generate_cashflows,
    generate_payment_schedule,
    calculate_bond,
    calculate_schedule
)

from .exceptions import (
    ErrorKind,
    BondCalculationException,
    InvalidBondDataException,
    BondNotFoundException
)

__version__ = "1.0.0"
__all__ = [
    # Models
    "BondParameters",
    "BondStatus",
    "CalculationResult",
    "CashflowPeriod",
    "CashflowType",
    "CouponFrequency",
    "ScheduleResult",
    "ScheduleRow",
    # Calculations
    "calculate_periodic_coupon_rate",
    "calculate_coupon_payment",
    "calculate_total_periods",
    "calculate_current_yield",
    "calculate_approximate_ytm",
    "calculate_total_interest",
    "classify_bond_status",
    "generate_cashflows",
    "generate_payment_schedule",
    "calculate_bond",
    "calculate_schedule",
    # Errors
    "ErrorKind",
    "BondCalculationException",
    "InvalidBondDataException",
    "BondNotFoundException"
]
