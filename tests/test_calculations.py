import math

import pytest

from calculations import (
    BuyerProfile,
    FinancingSource,
    FundsProfile,
    IncomeBasis,
    LoanSettings,
    PropertyClass,
    SaleProfile,
    calculate_adjusted_income,
    calculate_buyer_eligibility,
    calculate_combined_monthly_cpf_oa,
    calculate_cpf_runway,
    calculate_loan_tenure,
    calculate_max_loan,
    calculate_monthly_cpf_oa,
    calculate_monthly_payment,
    calculate_price_row,
    calculate_sale_proceeds,
    calculate_stamp_duty,
    check_buyer_profile,
    evaluate_buying_plan,
    format_currency,
    format_runway,
    generate_affordability_grid,
    generate_plan_grid,
    price_grid,
    summarise_plan,
)

YEAR = 2026


def default_sale():
    return SaleProfile(
        sale_price=2400000,
        outstanding_loan=600000,
        cpf_principal_used=(270000, 250000),
        cpf_accrued_interest=(12500, 12500),
        legal_fees=3000,
        selling_agent_fee_rate=0.02,
    )


def default_funds():
    return FundsProfile(current_cpf_balance=(80000, 50000), cash_savings=500000)


def default_buyers():
    return [
        BuyerProfile(monthly_income=5000, latest_assessable_income=80000,
                     birth_year=1995, existing_monthly_debt=1200),
        BuyerProfile(monthly_income=8000, latest_assessable_income=120000,
                     birth_year=1990),
    ]


# ---------------------------------------------------------------------------
# Stamp duty
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "price, duty",
    [
        (180000, 1800),
        (360000, 5400),
        (1000000, 24600),
        (1500000, 44600),
        (3000000, 119600),
    ],
)
def test_stamp_duty_continuous_at_tier_boundaries(price, duty):
    assert calculate_stamp_duty(price) == pytest.approx(duty)
    # just past the boundary the next tier starts from the same base
    assert calculate_stamp_duty(price + 0.01) == pytest.approx(duty, abs=0.01)


def test_stamp_duty_within_tiers():
    assert calculate_stamp_duty(0) == 0
    assert calculate_stamp_duty(100000) == pytest.approx(1000)
    assert calculate_stamp_duty(500000) == pytest.approx(9600)
    assert calculate_stamp_duty(4000000) == pytest.approx(179600)


def test_stamp_duty_not_rounded():
    assert calculate_stamp_duty(180050) == pytest.approx(1801)
    assert calculate_stamp_duty(123) == pytest.approx(1.23)


# ---------------------------------------------------------------------------
# Amortization
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "budget, tenure, rate",
    [(1000, 10, 0.04), (3666.67, 34, 0.02), (5500, 29, 0.026), (250, 1, 0.08)],
)
def test_max_loan_and_payment_are_inverses(budget, tenure, rate):
    principal = calculate_max_loan(budget, tenure, rate)
    assert calculate_monthly_payment(principal, tenure, rate) == pytest.approx(budget, rel=1e-6)


def test_amortization_degenerate_inputs_return_zero():
    assert calculate_max_loan(0, 10, 0.04) == 0
    assert calculate_max_loan(-100, 10, 0.04) == 0
    assert calculate_max_loan(1000, 0, 0.04) == 0
    assert calculate_max_loan(1000, -5, 0.04) == 0
    assert calculate_max_loan(1000, 10, 0) == 0
    assert calculate_monthly_payment(100000, 0, 0.04) == 0
    assert calculate_monthly_payment(0, 30, 0.04) == 0
    assert calculate_monthly_payment(100000, 30, 0) == 0


def test_monthly_payment_known_value():
    # 4% over 30 years on 250k
    assert calculate_monthly_payment(250000, 30, 0.04) == pytest.approx(1193.54, abs=0.01)


# ---------------------------------------------------------------------------
# Buyer eligibility
# ---------------------------------------------------------------------------

def test_loan_tenure_capped_by_age_and_maximum():
    assert calculate_loan_tenure(0) == 35
    assert calculate_loan_tenure(25) == 35
    assert calculate_loan_tenure(36) == 29
    assert calculate_loan_tenure(65) == 0
    assert calculate_loan_tenure(76) == 0


def test_adjusted_income_fixed_takes_higher():
    profile = BuyerProfile(monthly_income=5000, latest_assessable_income=80000)
    assert calculate_adjusted_income(profile) == pytest.approx(80000 / 12)


def test_adjusted_income_variable_takes_lower():
    profile = BuyerProfile(
        income_basis=IncomeBasis.VARIABLE,
        monthly_income=10000,
        latest_assessable_income=60000,
    )
    assert calculate_adjusted_income(profile) == pytest.approx(5000)


def test_buyer_eligibility_private():
    buyer = default_buyers()[0]
    result = calculate_buyer_eligibility(buyer, LoanSettings(), current_year=YEAR)

    assert result.age == 31
    assert result.tenure_years == 34
    assert result.debt_service_budget == pytest.approx(80000 / 12 * 0.55)
    assert result.usable_budget == pytest.approx(80000 / 12 * 0.55 - 1200)
    assert result.max_loan_with_existing_debt == pytest.approx(
        calculate_max_loan(result.usable_budget, 34, 0.02)
    )
    assert result.max_loan_without_existing_debt > result.max_loan_with_existing_debt
    assert result.max_loan_under_mortgage_service_limit is None
    assert result.effective_max_loan == result.max_loan_with_existing_debt


def test_existing_debt_above_tdsr_leaves_no_loan():
    buyer = BuyerProfile(monthly_income=3000, birth_year=1990, existing_monthly_debt=5000)
    result = calculate_buyer_eligibility(buyer, LoanSettings(), current_year=YEAR)
    assert result.usable_budget == 0
    assert result.max_loan_with_existing_debt == 0


def test_missing_birth_year_assumes_maximum_tenure():
    buyer = BuyerProfile(monthly_income=6000)
    result = calculate_buyer_eligibility(buyer, LoanSettings(), current_year=YEAR)
    assert result.age == 0
    assert result.tenure_years == 35


def test_elderly_buyer_gets_no_loan():
    buyer = BuyerProfile(monthly_income=10000, birth_year=1950)
    result = calculate_buyer_eligibility(buyer, LoanSettings(), current_year=YEAR)
    assert result.tenure_years == 0
    assert result.effective_max_loan == 0


@pytest.mark.parametrize("financing", [FinancingSource.BANK_LOAN, FinancingSource.HDB_LOAN])
def test_hdb_effective_loan_bounded_by_both_limits(financing):
    settings = LoanSettings(
        property_class=PropertyClass.SUBSIDIZED_PUBLIC,
        financing_source=financing,
    )
    for buyer in default_buyers():
        result = calculate_buyer_eligibility(buyer, settings, current_year=YEAR)
        assert result.max_loan_under_mortgage_service_limit is not None
        assert result.effective_max_loan <= min(
            result.max_loan_with_existing_debt,
            result.max_loan_under_mortgage_service_limit,
        )


def test_msr_uses_gross_income_at_its_own_rate():
    buyer = BuyerProfile(monthly_income=8000, latest_assessable_income=120000, birth_year=1990)
    settings = LoanSettings(
        property_class=PropertyClass.SUBSIDIZED_PUBLIC,
        nominal_interest_rate=0.04,
        msr_interest_rate=0.026,
    )
    result = calculate_buyer_eligibility(buyer, settings, current_year=YEAR)
    assert result.mortgage_service_budget == pytest.approx(2400)
    assert result.max_loan_under_mortgage_service_limit == pytest.approx(
        calculate_max_loan(2400, 29, 0.026)
    )


def test_monthly_cpf_oa_by_age_and_wage_ceiling():
    assert calculate_monthly_cpf_oa(5000, 30) == pytest.approx(1150)
    assert calculate_monthly_cpf_oa(5000, 35) == pytest.approx(1150)
    assert calculate_monthly_cpf_oa(5000, 36) == pytest.approx(1050)
    assert calculate_monthly_cpf_oa(5000, 46) == pytest.approx(950)
    assert calculate_monthly_cpf_oa(5000, 51) == pytest.approx(750)
    assert calculate_monthly_cpf_oa(20000, 30) == pytest.approx(8000 * 0.23)


def test_combined_monthly_cpf_oa():
    assert calculate_combined_monthly_cpf_oa(default_buyers(), current_year=YEAR) == pytest.approx(2830)


def test_check_buyer_profile_flags_future_birth_year():
    warnings = check_buyer_profile(BuyerProfile(birth_year=2030), current_year=YEAR)
    assert any("future" in w for w in warnings)
    assert check_buyer_profile(default_buyers()[1], current_year=YEAR) == []


# ---------------------------------------------------------------------------
# Sale proceeds and plan summary
# ---------------------------------------------------------------------------

def test_sale_proceeds_scenario():
    result = calculate_sale_proceeds(default_sale(), default_funds())

    assert result.selling_agent_fee == pytest.approx(52320)
    assert result.cpf_refund == pytest.approx((282500, 262500))
    assert result.cash_from_sale == pytest.approx(1199680)
    assert result.total_cpf == pytest.approx((362500, 312500))
    assert result.total_available == pytest.approx(1199680 + 500000 + 675000)


def test_negative_sale_proceeds_propagate():
    sale = default_sale()
    sale.outstanding_loan = 2500000
    result = calculate_sale_proceeds(sale, default_funds())

    assert result.cash_from_sale < 0
    assert result.total_available == pytest.approx(
        result.cash_from_sale + 500000 + sum(result.total_cpf)
    )


def test_summarise_plan_takes_stronger_borrower():
    plan = summarise_plan(default_buyers(), default_sale(), default_funds(),
                          LoanSettings(), current_year=YEAR)

    assert len(plan.buyers) == 2
    assert plan.eligible_loan == max(b.effective_max_loan for b in plan.buyers)
    assert plan.eligible_loan == plan.buyers[1].effective_max_loan
    assert plan.total_cpf == pytest.approx(675000)
    assert plan.combined_monthly_oa == pytest.approx(2830)


def test_summarise_plan_oa_override():
    plan = summarise_plan(default_buyers(), default_sale(), default_funds(),
                          LoanSettings(), current_year=YEAR, monthly_oa_override=1500)
    assert plan.combined_monthly_oa == 1500


# ---------------------------------------------------------------------------
# Affordability grid
# ---------------------------------------------------------------------------

def test_price_grid_ranges():
    private = price_grid(PropertyClass.PRIVATE)
    hdb = price_grid(PropertyClass.SUBSIDIZED_PUBLIC)

    assert private[0] == 700000 and private[-1] == 4000000 and len(private) == 34
    assert hdb[0] == 300000 and hdb[-1] == 1500000 and len(hdb) == 25
    assert private == sorted(private)


def test_private_row_at_one_million():
    row = calculate_price_row(1000000, 800000, 2000000, LoanSettings(), 0)

    assert row.stamp_duty == pytest.approx(24600)
    assert row.loan_to_value_ratio == 0.75
    assert row.loan_at_ltv_cap == pytest.approx(750000)
    assert row.loan_shortfall == 0
    assert row.pledge_amount == 0
    assert row.show_fund_amount == 0
    assert row.shortfall_service_equivalent == 0
    assert row.buyer_agent_fee == 0
    assert row.cash_deposit == pytest.approx(50000)
    assert row.cpf_deposit == pytest.approx(200000 + 24600 + 3000)
    assert row.upfront_required == pytest.approx(277600)
    assert row.affordable is True


def test_hdb_loan_row_uses_80_percent_ltv_and_no_cash():
    settings = LoanSettings(
        property_class=PropertyClass.SUBSIDIZED_PUBLIC,
        financing_source=FinancingSource.HDB_LOAN,
        nominal_interest_rate=0.026,
    )
    row = calculate_price_row(500000, 1000000, 1000000, settings, 0)

    assert row.loan_to_value_ratio == 0.80
    assert row.buyer_agent_fee == pytest.approx(5450)
    assert row.cash_deposit == pytest.approx(5450)
    assert row.cpf_deposit == pytest.approx(100000 + 9600 + 3000)


def test_hdb_bank_loan_row_keeps_cash_minimum():
    settings = LoanSettings(property_class=PropertyClass.SUBSIDIZED_PUBLIC)
    row = calculate_price_row(500000, 1000000, 1000000, settings, 0)

    assert row.loan_to_value_ratio == 0.75
    assert row.cash_deposit == pytest.approx(25000 + 5450)


def test_shortfall_financing_amounts():
    row = calculate_price_row(1000000, 500000, 5000000, LoanSettings(), 0)

    assert row.actual_loan == pytest.approx(500000)
    assert row.loan_shortfall == pytest.approx(250000)
    assert row.shortfall_service_equivalent == pytest.approx(
        calculate_monthly_payment(250000, 30, 0.04)
    )
    assert row.pledge_amount == pytest.approx(250000 * 5 / 12)
    assert row.show_fund_amount == pytest.approx(250000 * 25 / 18)
    assert row.affordable is False


def test_grant_can_make_price_affordable():
    settings = LoanSettings(property_class=PropertyClass.SUBSIDIZED_PUBLIC)
    upfront = calculate_price_row(500000, 1000000, 0, settings, 0).upfront_required

    without_grant = calculate_price_row(500000, 1000000, upfront - 10000, settings, 0)
    with_grant = calculate_price_row(500000, 1000000, upfront - 10000, settings, 20000)

    assert without_grant.affordable is False
    assert with_grant.affordable is True


def test_shortfall_non_decreasing_with_price():
    rows = generate_affordability_grid(1200000, 2000000, LoanSettings())
    shortfalls = [row.loan_shortfall for row in rows]

    assert shortfalls == sorted(shortfalls)
    assert shortfalls[0] == 0
    assert shortfalls[-1] > 0


def test_runway_unbounded_when_oa_covers_instalment():
    row = calculate_price_row(1000000, 750000, 2000000, LoanSettings(), 0,
                              combined_monthly_oa=100000, total_cpf=500000)

    assert row.monthly_cash_top_up == 0
    assert math.isinf(row.cpf_runway_years)
    assert format_runway(row.cpf_runway_years) == "> 50 years"


def test_runway_finite_with_top_up():
    row = calculate_price_row(1000000, 750000, 2000000, LoanSettings(), 0,
                              combined_monthly_oa=1000, total_cpf=500000)

    assert row.monthly_cash_top_up == pytest.approx(row.monthly_instalment - 1000)
    assert row.remaining_cpf == pytest.approx(500000 - row.cpf_deposit)
    assert row.cpf_runway_years == pytest.approx(
        row.remaining_cpf / (row.monthly_cash_top_up * 12)
    )


def test_remaining_cpf_never_negative():
    row = calculate_price_row(3000000, 0, 0, LoanSettings(), 0, total_cpf=1000)
    assert row.remaining_cpf == 0
    assert calculate_cpf_runway(0, 500) == 0


def test_grid_grant_defaults_to_loan_settings():
    settings = LoanSettings(property_class=PropertyClass.SUBSIDIZED_PUBLIC, grant_amount=80000)
    upfront = calculate_price_row(300000, 1000000, 0, settings, 0).upfront_required

    rows = generate_affordability_grid(1000000, upfront - 50000, settings)
    assert rows[0].affordable is True

    rows = generate_affordability_grid(1000000, upfront - 50000, settings, 0)
    assert rows[0].affordable is False


def test_plan_grid_end_to_end():
    settings = LoanSettings()
    plan = summarise_plan(default_buyers(), default_sale(), default_funds(),
                          settings, current_year=YEAR)
    rows = generate_plan_grid(plan, settings)

    assert len(rows) == 34
    assert all(row.monthly_oa_contribution == pytest.approx(2830) for row in rows)
    assert rows[0].affordable is True
    # eligible loan is capped well below the 4M LTV loan
    assert rows[-1].loan_shortfall > 0
    assert rows[-1].affordable is False


# ---------------------------------------------------------------------------
# Buying plan
# ---------------------------------------------------------------------------

def test_buying_plan_default_scenario():
    settings = LoanSettings()
    plan = summarise_plan(default_buyers(), default_sale(), default_funds(),
                          settings, current_year=YEAR)
    result = evaluate_buying_plan(1000000, 250000, (100000, 50000), plan, settings)

    assert result.stamp_duty == pytest.approx(24600)
    assert result.total_fees == pytest.approx(27600)
    assert result.total_initial_cost == pytest.approx(1027600)
    assert result.loan_required == pytest.approx(600000)
    assert result.max_ltv_loan == pytest.approx(750000)
    assert result.ltv_exceeded is False
    assert result.eligibility_exceeded == (600000 > plan.eligible_loan)
    assert result.monthly_instalment == pytest.approx(calculate_monthly_payment(600000, 30, 0.02))
    assert result.remaining_cpf == pytest.approx(675000 - 150000)
    assert result.warnings == []


def test_buying_plan_flags_ltv_breach():
    settings = LoanSettings()
    plan = summarise_plan(default_buyers(), default_sale(), default_funds(),
                          settings, current_year=YEAR)
    result = evaluate_buying_plan(1000000, 50000, (0, 0), plan, settings)

    assert result.loan_required == pytest.approx(950000)
    assert result.ltv_exceeded is True


def test_buying_plan_warns_when_cpf_overdrawn():
    settings = LoanSettings()
    plan = summarise_plan(default_buyers(), default_sale(), default_funds(),
                          settings, current_year=YEAR)
    result = evaluate_buying_plan(1000000, 0, (500000, 500000), plan, settings)

    assert result.remaining_cpf == 0
    assert result.warnings


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def test_format_currency():
    assert format_currency(1199680) == "$1,199,680"
    assert format_currency(-52320.4) == "-$52,320"


def test_format_runway():
    assert format_runway(12.345) == "12.3 years"
    assert format_runway(50) == "50.0 years"
    assert format_runway(math.inf) == "> 50 years"
