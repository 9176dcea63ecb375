"""
Bond Calculator Data Models

Pydantic models and Enums for bond calculation requests and results.
Field names are snake_case in Python and camelCase on the wire
(faceValue, couponRate, ...).
"""

from datetime import datetime
from enum import Enum, IntEnum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config import BOND_FIELD_RULES


# ==================== ENUMS ====================

class CouponFrequency(IntEnum):
    """Coupon payments per year"""
    ANNUAL = 1
    SEMI_ANNUAL = 2
    QUARTERLY = 4
    MONTHLY = 12


class BondStatus(str, Enum):
    """Price relative to face value"""
    PREMIUM = "Premium"
    DISCOUNT = "Discount"
    PAR = "Par"


class CashflowType(str, Enum):
    """Kind of payment made in a period"""
    COUPON = "coupon"
    PRINCIPAL = "principal"  # Final period: last coupon + principal redemption


def _constraints(field: str) -> dict:
    """Field() bound kwargs for a request field, taken from BOND_FIELD_RULES"""
    rule = BOND_FIELD_RULES[field]
    bounds = {}
    if rule.get("minimum") is not None:
        bounds["ge"] = rule["minimum"]
    if rule.get("maximum") is not None:
        bounds["le"] = rule["maximum"]
    return bounds


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==================== REQUEST MODEL ====================

class BondParameters(CamelModel):
    """Bond terms for one calculation (camelCase names only)"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=False,
        extra="forbid",
        allow_inf_nan=False
    )

    face_value: float = Field(..., **_constraints("faceValue"), description="Face (par) value of the bond")
    coupon_rate: float = Field(..., **_constraints("couponRate"), description="Annual coupon rate in percentage")
    market_price: float = Field(..., **_constraints("marketPrice"), description="Current market price")
    years_to_maturity: float = Field(..., **_constraints("yearsToMaturity"), description="Years until maturity")
    coupon_frequency: CouponFrequency = Field(..., description="Coupon payments per year (1, 2, 4 or 12)")
    yield_to_maturity: Optional[float] = Field(
        None,
        **_constraints("yieldToMaturity"),
        description="Known YTM in percentage; approximated when omitted"
    )


# ==================== RESULT MODELS ====================

class CashflowPeriod(CamelModel):
    """Single period cash flow with its present value"""
    period: int
    type: CashflowType
    amount: float
    present_value: float


class ScheduleRow(CamelModel):
    """Single row of the dated payment schedule"""
    period: int
    payment_date: datetime
    coupon_payment: float
    cumulative_interest: float
    remaining_principal: float


class CalculationResult(CamelModel):
    """Bond metrics with cash flows and payment schedule"""
    current_yield: float = Field(..., description="Annual coupon / market price, in percentage")
    yield_to_maturity: float = Field(..., description="Supplied or approximated YTM, in percentage")
    total_interest: float
    status: BondStatus
    cashflows: List[CashflowPeriod]
    schedule: List[ScheduleRow]


class ScheduleResult(CamelModel):
    """Payment schedule only"""
    total_periods: int
    coupon_payment: float
    schedule: List[ScheduleRow]
