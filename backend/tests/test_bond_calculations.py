"""
Bond Calculation Engine - Unit Tests

Tests for:
- Coupon, period and yield formulas
- Premium / Discount / Par classification
- Cash flow generation and present values
- Dated payment schedule
- Determinism and the logging side channel
"""

import math
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest
from dateutil.relativedelta import relativedelta

from fixed_income.calculations import (
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
from fixed_income.exceptions import BondCalculationException, ErrorKind
from fixed_income.models import BondParameters, BondStatus, CashflowType, CouponFrequency


class TestCouponAndPeriods:
    """Periodic coupon and number of periods"""

    def test_periodic_coupon_rate(self):
        assert calculate_periodic_coupon_rate(5, 2) == Decimal("0.025")
        assert calculate_periodic_coupon_rate(6, 12) == Decimal("0.005")

    def test_coupon_payment(self):
        rate = calculate_periodic_coupon_rate(5, 2)
        assert calculate_coupon_payment(1000, rate) == Decimal("25")

    @pytest.mark.parametrize("years, frequency, expected", [
        (5, 1, 5),
        (5, 2, 10),
        (2.5, 1, 3),
        (0.1, 1, 1),
        (0.1, 12, 2),
        (1.25, 4, 5),
        (100, 12, 1200),
    ])
    def test_total_periods_rounds_up(self, years, frequency, expected):
        """Partial final periods count as full periods"""
        assert calculate_total_periods(years, frequency) == expected
        assert calculate_total_periods(years, frequency) == max(1, math.ceil(Decimal(str(years)) * frequency))

    def test_total_periods_exact_for_decimal_maturities(self):
        """0.3 years monthly is exactly 3.6 periods, not 3.6000000000000005"""
        assert calculate_total_periods(0.3, 12) == 4
        assert calculate_total_periods(0.25, 4) == 1


class TestYields:
    """Current yield and approximate yield to maturity"""

    def test_current_yield(self):
        assert float(calculate_current_yield(50, 950)) == pytest.approx(5.263157894736842)

    def test_approximate_ytm_discount_bond(self):
        ytm = calculate_approximate_ytm(1000, 950, 50, 5)
        assert float(ytm) == pytest.approx(6.153846153846154)

    def test_approximate_ytm_par_bond_equals_coupon_rate(self):
        ytm = calculate_approximate_ytm(1000, 1000, 70, 8)
        assert float(ytm) == pytest.approx(7.0)

    @pytest.mark.parametrize("price", [600, 800, 950, 999.99])
    def test_discount_bond_ytm_above_current_yield(self, price):
        ytm = calculate_approximate_ytm(1000, price, 50, 5)
        assert ytm > calculate_current_yield(50, price)

    @pytest.mark.parametrize("price", [1000.01, 1050, 1200, 1500])
    def test_premium_bond_ytm_below_current_yield(self, price):
        ytm = calculate_approximate_ytm(1000, price, 50, 5)
        assert ytm < calculate_current_yield(50, price)

    def test_total_interest(self):
        assert calculate_total_interest(Decimal("50"), 1, 5) == Decimal("250")
        assert calculate_total_interest(Decimal("25"), 2, 5) == Decimal("250")
        assert calculate_total_interest(Decimal("50"), 1, 2.5) == Decimal("125")


class TestBondStatus:
    """Premium / Discount / Par classification"""

    def test_premium(self):
        assert classify_bond_status(1000, 1000.01) == BondStatus.PREMIUM

    def test_discount(self):
        assert classify_bond_status(1000, 999.99) == BondStatus.DISCOUNT

    def test_par(self):
        assert classify_bond_status(1000, 1000.0) == BondStatus.PAR
        assert classify_bond_status(100.5, 100.5) == BondStatus.PAR


class TestCashflows:
    """Per-period cash flows with present values"""

    def test_periods_are_sequential_and_final_is_principal(self):
        flows = generate_cashflows(1000, Decimal("50"), 5, 1, Decimal("6"))

        assert [f.period for f in flows] == [1, 2, 3, 4, 5]
        assert [f.type for f in flows[:-1]] == [CashflowType.COUPON] * 4
        assert flows[-1].type == CashflowType.PRINCIPAL
        assert [f.amount for f in flows] == [50, 50, 50, 50, 1050]

    def test_present_value_uses_periodic_yield(self):
        """6% semi-annual discounts at 3% per period"""
        flows = generate_cashflows(1000, Decimal("30"), 4, 2, Decimal("6"))

        for flow in flows:
            assert flow.present_value == pytest.approx(flow.amount / 1.03 ** flow.period)

    def test_par_bond_present_values_sum_to_face_value(self):
        """Discounting at the coupon rate prices the bond at par"""
        flows = generate_cashflows(1000, Decimal("25"), 10, 2, Decimal("5"))

        assert sum(f.present_value for f in flows) == pytest.approx(1000, abs=1e-9)

    def test_overflowing_amount_raises(self):
        with pytest.raises(BondCalculationException):
            generate_cashflows(1.7e308, Decimal("1e308"), 1, 1, Decimal("5"))

    def test_single_period_bond(self):
        flows = generate_cashflows(1000, Decimal("5"), 1, 1, Decimal("5"))

        assert len(flows) == 1
        assert flows[0].type == CashflowType.PRINCIPAL
        assert flows[0].amount == 1005
        assert flows[0].present_value == pytest.approx(1005 / 1.05)


class TestPaymentSchedule:
    """Dated payment schedule"""

    def test_cumulative_interest_and_remaining_principal(self, start_date):
        rows = generate_payment_schedule(1000, Decimal("25"), 10, 2, start_date)

        assert len(rows) == 10
        assert [r.period for r in rows] == list(range(1, 11))
        assert [r.cumulative_interest for r in rows] == [25.0 * n for n in range(1, 11)]
        assert all(r.coupon_payment == 25 for r in rows)
        assert all(r.remaining_principal == 1000 for r in rows[:-1])
        assert rows[-1].remaining_principal == 0

    def test_monthly_dates_clamp_to_month_end(self, start_date):
        """Jan 31 + 1 month is Feb 28; each date is computed from the start, not chained"""
        rows = generate_payment_schedule(1000, Decimal("5"), 3, 12, start_date)

        assert rows[0].payment_date == datetime(2025, 2, 28, 12, 0, tzinfo=timezone.utc)
        assert rows[1].payment_date == datetime(2025, 3, 31, 12, 0, tzinfo=timezone.utc)
        assert rows[2].payment_date == datetime(2025, 4, 30, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("frequency, months", [(1, 12), (2, 6), (4, 3), (12, 1)])
    def test_payment_dates_follow_frequency(self, frequency, months):
        start = datetime(2025, 1, 15, tzinfo=timezone.utc)
        rows = generate_payment_schedule(1000, Decimal("10"), 4, frequency, start)

        for row in rows:
            total_months = row.period * months
            expected_year = 2025 + (total_months // 12)
            expected_month = 1 + (total_months % 12)
            assert (row.payment_date.year, row.payment_date.month, row.payment_date.day) == (
                expected_year, expected_month, 15
            )

    def test_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        rows = generate_payment_schedule(1000, Decimal("50"), 1, 1)
        after = datetime.now(timezone.utc)

        assert before + relativedelta(years=1) <= rows[0].payment_date <= after + relativedelta(years=1)


class TestCalculateBond:
    """Full calculation"""

    def test_discount_bond_scenario(self, discount_bond, start_date):
        result = calculate_bond(discount_bond, start_date=start_date)

        assert result.current_yield == pytest.approx(5.26, abs=0.005)
        assert result.yield_to_maturity == pytest.approx(6.15, abs=0.005)
        assert result.total_interest == 250
        assert result.status == BondStatus.DISCOUNT
        assert len(result.cashflows) == 5
        assert len(result.schedule) == 5
        assert all(row.coupon_payment == 50 for row in result.schedule)
        assert result.schedule[-1].remaining_principal == 0

    def test_par_bond_scenario(self, par_bond, start_date):
        result = calculate_bond(par_bond, start_date=start_date)

        assert result.status == BondStatus.PAR
        assert len(result.schedule) == 10
        assert all(row.coupon_payment == 25 for row in result.schedule)
        assert result.yield_to_maturity == pytest.approx(5.0)

    def test_premium_bond(self, premium_bond, start_date):
        result = calculate_bond(premium_bond, start_date=start_date)

        assert result.status == BondStatus.PREMIUM
        assert len(result.cashflows) == 40
        assert result.yield_to_maturity < result.current_yield
        assert result.total_interest == 800

    def test_cumulative_interest_matches_total_interest(self, start_date):
        params = BondParameters(
            faceValue=1000, couponRate=7, marketPrice=980, yearsToMaturity=3, couponFrequency=12
        )
        result = calculate_bond(params, start_date=start_date)

        assert len(result.schedule) == 36
        assert result.schedule[-1].cumulative_interest == result.total_interest

    def test_supplied_ytm_is_used_unchanged(self, discount_bond, start_date):
        params = discount_bond.model_copy(update={"yield_to_maturity": 7.25})
        result = calculate_bond(params, start_date=start_date)

        assert result.yield_to_maturity == 7.25
        # Discounted at 7.25% annual
        assert result.cashflows[0].present_value == pytest.approx(50 / 1.0725)

    def test_fractional_maturity_rounds_up_periods(self, start_date):
        params = BondParameters(
            faceValue=1000, couponRate=4, marketPrice=1000, yearsToMaturity=2.5, couponFrequency=1
        )
        result = calculate_bond(params, start_date=start_date)

        assert len(result.cashflows) == 3
        assert result.total_interest == 100
        assert result.cashflows[-1].amount == 1040

    def test_identical_input_identical_output(self, discount_bond, start_date):
        first = calculate_bond(discount_bond, start_date=start_date)
        second = calculate_bond(discount_bond, start_date=start_date)

        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_invalid_contract_raises_business_rule_error(self):
        params = BondParameters.model_construct(
            face_value=1000,
            coupon_rate=5,
            market_price=0,
            years_to_maturity=5,
            coupon_frequency=CouponFrequency.ANNUAL,
            yield_to_maturity=None
        )

        with pytest.raises(BondCalculationException) as exc_info:
            calculate_bond(params)

        assert exc_info.value.kind == ErrorKind.BUSINESS_RULE
        assert "marketPrice" in exc_info.value.message

    @pytest.mark.parametrize("payload, field", [
        (
            {"faceValue": 1.7e308, "couponRate": 50, "marketPrice": 1.7e308, "yearsToMaturity": 1, "couponFrequency": 1},
            "amount"
        ),
        (
            {"faceValue": 1e304, "couponRate": 100, "marketPrice": 0.01, "yearsToMaturity": 5, "couponFrequency": 1},
            "currentYield"
        ),
    ])
    def test_result_outside_float_range_raises_business_rule_error(self, payload, field):
        """Valid inputs whose results overflow a float are rejected, never returned as inf/null"""
        with pytest.raises(BondCalculationException) as exc_info:
            calculate_bond(BondParameters(**payload))

        assert exc_info.value.kind == ErrorKind.BUSINESS_RULE
        assert field in exc_info.value.message

    def test_injected_logger_does_not_change_results(self, discount_bond, start_date):
        log = Mock()
        with_mock = calculate_bond(discount_bond, start_date=start_date, log=log)
        default = calculate_bond(discount_bond, start_date=start_date)

        assert with_mock == default
        assert log.info.called
        assert log.debug.called


class TestCalculateSchedule:
    """Schedule-only calculation"""

    def test_schedule_only(self, par_bond, start_date):
        result = calculate_schedule(par_bond, start_date=start_date)

        assert result.total_periods == 10
        assert result.coupon_payment == 25
        assert len(result.schedule) == 10
        assert result.schedule[-1].cumulative_interest == 250
        assert result.schedule[-1].remaining_principal == 0

    def test_schedule_ignores_market_price(self, par_bond, start_date):
        cheap = par_bond.model_copy(update={"market_price": 500})

        assert calculate_schedule(cheap, start_date=start_date) == calculate_schedule(par_bond, start_date=start_date)

    def test_maximum_periods(self, start_date):
        params = BondParameters(
            faceValue=1000, couponRate=12, marketPrice=1000, yearsToMaturity=100, couponFrequency=12
        )
        result = calculate_schedule(params, start_date=start_date)

        assert result.total_periods == 1200
        assert result.schedule[-1].payment_date == datetime(2125, 1, 31, 12, 0, tzinfo=timezone.utc)
