"""
Bond Calculator Router
======================

API endpoints for:
- Full bond calculation (yields, total interest, status, cash flows, schedule)
- Payment schedule only

Status codes:
- 200 OK: Successful calculation
- 400 BAD_REQUEST: Validation errors in request body
- 422 UNPROCESSABLE_ENTITY: Business logic errors
- 500 INTERNAL_SERVER_ERROR: Unexpected server errors
"""

import logging
from fastapi import APIRouter

from .models import BondParameters, CalculationResult, ScheduleResult
from .calculations import calculate_bond, calculate_schedule

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bond", tags=["Bond Calculator"])


@router.post("/calculate", response_model=CalculationResult)
async def calculate_bond_metrics(params: BondParameters):
    """
    Calculate bond metrics for the given terms.

    Returns current yield, yield to maturity (supplied or approximated),
    total interest, Premium/Discount/Par status, the discounted cash flows
    and the dated payment schedule.
    """
    logger.info(f"[calculate] Received request: {params.model_dump(mode='json', by_alias=True)}")

    try:
        result = calculate_bond(params)
    except Exception as e:
        logger.error(f"[calculate] Error during calculation: {e}")
        raise

    logger.info(f"[calculate] Successfully calculated result ({len(result.cashflows)} periods)")
    return result


@router.post("/schedule", response_model=ScheduleResult)
async def calculate_bond_schedule(params: BondParameters):
    """
    Generate the dated payment schedule only.

    Each row carries the payment date, coupon, cumulative interest and
    remaining principal.
    """
    logger.info(f"[schedule] Received request: {params.model_dump(mode='json', by_alias=True)}")

    try:
        result = calculate_schedule(params)
    except Exception as e:
        logger.error(f"[schedule] Error generating schedule: {e}")
        raise

    logger.info(f"[schedule] Generated {result.total_periods} schedule rows")
    return result
