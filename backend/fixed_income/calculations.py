"""
Bond Calculation Engine

Closed-form metrics and schedules for fixed-rate bullet bonds.
Uses Decimal internally; results are converted to floats only when the
result models are built.

Key Calculations:
- Periodic coupon and total number of periods
- Current Yield
- Yield to Maturity (single-step approximation, not an iterative solver)
- Total Interest
- Premium / Discount / Par status
- Cash flows discounted at the periodic yield
- Dated payment schedule with cumulative interest

Every function is pure. Logging is a side channel only and can be switched
off (CALCULATION_LOGGING) or replaced per call without changing any result.
"""

import logging
import math
from decimal import Decimal, ROUND_CEILING, getcontext
from datetime import datetime, timezone
from typing import List, Optional, Union

from dateutil.relativedelta import relativedelta

from config import CALCULATION_LOGGING, DECIMAL_PRECISION
from .exceptions import BondCalculationException
from .models import (
    BondParameters,
    BondStatus,
    CalculationResult,
    CashflowPeriod,
    CashflowType,
    ScheduleResult,
    ScheduleRow
)

getcontext().prec = DECIMAL_PRECISION

logger = logging.getLogger(__name__)
logger.disabled = not CALCULATION_LOGGING

Number = Union[Decimal, float, int]

HUNDRED = Decimal("100")
MONTHS_PER_YEAR = 12


# ==================== HELPER FUNCTIONS ====================

def _dec(value: Number) -> Decimal:
    """Convert to Decimal through str so 0.1 stays 0.1"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(int(value))
    return Decimal(str(value))


def _to_float(name: str, value: Number) -> float:
    """Float for a result model; values outside the float range are a business-rule error"""
    result = float(value)
    if not math.isfinite(result):
        raise BondCalculationException(f"{name} is outside the representable numeric range")
    return result


def _months_offset(period: int, frequency: int) -> int:
    """Whole calendar months from the start date to a period's payment date"""
    return (period * MONTHS_PER_YEAR) // int(frequency)


def _require_positive(**values: Number) -> None:
    """Arithmetic preconditions of the engine (range checks belong to request validation)"""
    for name, value in values.items():
        if value is None or _dec(value) <= 0:
            raise BondCalculationException(f"{name} must be greater than zero, got {value}")


# ==================== COUPON & PERIODS ====================

def calculate_periodic_coupon_rate(coupon_rate: Number, frequency: int) -> Decimal:
    """
    Coupon rate per period as a fraction.

    Formula: couponRate / 100 / frequency  (5% semi-annual -> 0.025)
    """
    return _dec(coupon_rate) / HUNDRED / Decimal(int(frequency))


def calculate_coupon_payment(face_value: Number, periodic_coupon_rate: Number) -> Decimal:
    """Coupon paid each period: faceValue x periodicCouponRate"""
    return _dec(face_value) * _dec(periodic_coupon_rate)


def calculate_total_periods(years_to_maturity: Number, frequency: int) -> int:
    """
    Number of coupon periods: ceil(yearsToMaturity x frequency).

    A partial final period counts as a full one, and there is always at
    least one period (0.1 years annual -> 1 period).
    """
    periods = (_dec(years_to_maturity) * Decimal(int(frequency))).to_integral_value(rounding=ROUND_CEILING)
    return max(1, int(periods))


# ==================== YIELDS ====================

def calculate_current_yield(annual_coupon: Number, market_price: Number) -> Decimal:
    """Current Yield in percentage: annualCoupon / marketPrice x 100"""
    return _dec(annual_coupon) / _dec(market_price) * HUNDRED


def calculate_approximate_ytm(
    face_value: Number,
    market_price: Number,
    annual_coupon: Number,
    years_to_maturity: Number
) -> Decimal:
    """
    Approximate Yield to Maturity in percentage.

    YTM = ((C + (F - P) / n) / ((F + P) / 2)) x 100

    Where:
        C = Annual coupon
        F = Face value
        P = Market price
        n = Years to maturity

    Single pass, no root finding. For a discount bond the result is above
    the current yield, for a premium bond below it, and for a par bond it
    equals the coupon rate.
    """
    face = _dec(face_value)
    price = _dec(market_price)
    annual = _dec(annual_coupon)
    years = _dec(years_to_maturity)

    average_price = (face + price) / Decimal("2")
    return ((annual + (face - price) / years) / average_price) * HUNDRED


def calculate_total_interest(coupon_payment: Number, frequency: int, years_to_maturity: Number) -> Decimal:
    """
    Total coupon interest over the life of the bond: annualCoupon x yearsToMaturity.

    Evaluated as couponPayment x (frequency x years) so that, for maturities
    spanning whole periods, it matches the schedule's cumulative interest
    exactly.
    """
    return _dec(coupon_payment) * (Decimal(int(frequency)) * _dec(years_to_maturity))


def classify_bond_status(face_value: Number, market_price: Number) -> BondStatus:
    """Premium above face value, Discount below, Par when equal"""
    face = _dec(face_value)
    price = _dec(market_price)
    if price > face:
        return BondStatus.PREMIUM
    if price < face:
        return BondStatus.DISCOUNT
    return BondStatus.PAR


# ==================== CASH FLOWS ====================

def generate_cashflows(
    face_value: Number,
    coupon_payment: Number,
    total_periods: int,
    frequency: int,
    yield_to_maturity: Number
) -> List[CashflowPeriod]:
    """
    Generate the per-period cash flows with their present values.

    Periodic yield = YTM / 100 / frequency. Every period pays the coupon;
    the final period pays coupon + face value and is tagged "principal".

    PV(t) = amount / (1 + periodicYield)^t   (end-of-period discounting)
    """
    face = _dec(face_value)
    coupon = _dec(coupon_payment)
    periodic_yield = _dec(yield_to_maturity) / HUNDRED / Decimal(int(frequency))
    growth = Decimal("1") + periodic_yield

    cash_flows = []
    for period in range(1, total_periods + 1):
        if period < total_periods:
            flow_type = CashflowType.COUPON
            amount = coupon
        else:
            # Final payment: coupon + principal
            flow_type = CashflowType.PRINCIPAL
            amount = coupon + face

        present_value = amount / (growth ** period)

        cash_flows.append(CashflowPeriod(
            period=period,
            type=flow_type,
            amount=_to_float("amount", amount),
            present_value=_to_float("presentValue", present_value)
        ))

    return cash_flows


def generate_payment_schedule(
    face_value: Number,
    coupon_payment: Number,
    total_periods: int,
    frequency: int,
    start_date: Optional[datetime] = None
) -> List[ScheduleRow]:
    """
    Generate the dated payment schedule.

    - Payment date of period t is the start date moved forward by
      floor(t x 12 / frequency) calendar months (month-end days clamp,
      e.g. Jan 31 + 1 month -> Feb 28)
    - Cumulative interest after period t is couponPayment x t
    - Remaining principal is the face value until the final period, then 0

    The schedule does not depend on the yield.
    """
    face = _dec(face_value)
    coupon = _dec(coupon_payment)
    start = start_date or datetime.now(timezone.utc)

    schedule = []
    for period in range(1, total_periods + 1):
        payment_date = start + relativedelta(months=_months_offset(period, frequency))
        cumulative_interest = coupon * period
        remaining_principal = Decimal("0") if period == total_periods else face

        schedule.append(ScheduleRow(
            period=period,
            payment_date=payment_date,
            coupon_payment=_to_float("couponPayment", coupon),
            cumulative_interest=_to_float("cumulativeInterest", cumulative_interest),
            remaining_principal=_to_float("remainingPrincipal", remaining_principal)
        ))

    return schedule


# ==================== FULL CALCULATION ====================

def calculate_bond(
    params: BondParameters,
    start_date: Optional[datetime] = None,
    log: Optional[logging.Logger] = None
) -> CalculationResult:
    """
    Calculate current yield, YTM, total interest, status, cash flows and
    payment schedule for a bond.

    Args:
        params: Validated bond terms
        start_date: Date the payment schedule counts from (default: now, UTC)
        log: Logger for diagnostics (default: this module's logger)

    Returns:
        CalculationResult

    Raises:
        BondCalculationException: when the engine's arithmetic preconditions
            do not hold or the generated sequences break their invariants
    """
    log = log or logger
    log.info(f"[calculate_bond] Starting calculation: {params.model_dump(mode='json', by_alias=True)}")

    _require_positive(
        faceValue=params.face_value,
        marketPrice=params.market_price,
        yearsToMaturity=params.years_to_maturity,
        couponFrequency=params.coupon_frequency
    )

    frequency = int(params.coupon_frequency)
    face_value = _dec(params.face_value)
    market_price = _dec(params.market_price)
    years = _dec(params.years_to_maturity)

    periodic_coupon_rate = calculate_periodic_coupon_rate(params.coupon_rate, frequency)
    coupon_payment = calculate_coupon_payment(face_value, periodic_coupon_rate)
    total_periods = calculate_total_periods(years, frequency)
    annual_coupon = coupon_payment * Decimal(frequency)

    log.debug(
        f"[calculate_bond] periodicCouponRate: {periodic_coupon_rate}, couponPayment: {coupon_payment}, "
        f"totalPeriods: {total_periods}, annualCoupon: {annual_coupon}"
    )

    current_yield = calculate_current_yield(annual_coupon, market_price)

    if params.yield_to_maturity is not None:
        yield_to_maturity = _dec(params.yield_to_maturity)
        log.debug(f"[calculate_bond] Using supplied yield to maturity: {yield_to_maturity}")
    else:
        yield_to_maturity = calculate_approximate_ytm(face_value, market_price, annual_coupon, years)
        log.debug(f"[calculate_bond] Approximated yield to maturity: {yield_to_maturity}")

    total_interest = calculate_total_interest(coupon_payment, frequency, years)
    status = classify_bond_status(face_value, market_price)

    log.debug(
        f"[calculate_bond] currentYield: {current_yield}, totalInterest: {total_interest}, status: {status.value}"
    )

    cashflows = generate_cashflows(face_value, coupon_payment, total_periods, frequency, yield_to_maturity)
    schedule = generate_payment_schedule(face_value, coupon_payment, total_periods, frequency, start_date)

    if len(cashflows) != total_periods or len(schedule) != total_periods:
        raise BondCalculationException(
            f"Generated {len(cashflows)} cash flows and {len(schedule)} schedule rows, expected {total_periods}"
        )

    log.info(f"[calculate_bond] Calculation complete: {total_periods} periods, status {status.value}")

    return CalculationResult(
        current_yield=_to_float("currentYield", current_yield),
        yield_to_maturity=_to_float("yieldToMaturity", yield_to_maturity),
        total_interest=_to_float("totalInterest", total_interest),
        status=status,
        cashflows=cashflows,
        schedule=schedule
    )


def calculate_schedule(
    params: BondParameters,
    start_date: Optional[datetime] = None,
    log: Optional[logging.Logger] = None
) -> ScheduleResult:
    """Dated payment schedule only; the yield inputs are not used"""
    log = log or logger
    log.info(f"[calculate_schedule] Starting schedule: {params.model_dump(mode='json', by_alias=True)}")

    _require_positive(
        faceValue=params.face_value,
        yearsToMaturity=params.years_to_maturity,
        couponFrequency=params.coupon_frequency
    )

    frequency = int(params.coupon_frequency)
    periodic_coupon_rate = calculate_periodic_coupon_rate(params.coupon_rate, frequency)
    coupon_payment = calculate_coupon_payment(params.face_value, periodic_coupon_rate)
    total_periods = calculate_total_periods(params.years_to_maturity, frequency)

    schedule = generate_payment_schedule(params.face_value, coupon_payment, total_periods, frequency, start_date)

    if len(schedule) != total_periods:
        raise BondCalculationException(
            f"Generated {len(schedule)} schedule rows, expected {total_periods}"
        )

    log.info(f"[calculate_schedule] Generated {total_periods} schedule rows")

    return ScheduleResult(
        total_periods=total_periods,
        coupon_payment=_to_float("couponPayment", coupon_payment),
        schedule=schedule
    )
