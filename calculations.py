"""
Singapore Property Transition Planner - Calculations

Core financial calculations for selling the current home and buying the
next one: sale proceeds, per-buyer loan eligibility (TDSR / MSR), and an
affordability table across a grid of purchase prices.

Every function here is pure. Callers pass in the current inputs and get
fresh result records back; nothing is cached or mutated.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from constants import (
    TDSR_LIMIT,
    MSR_LIMIT,
    LOAN_MATURITY_AGE,
    MAX_TENURE_YEARS,
    HDB_INTEREST_RATE,
    DEFAULT_INTEREST_RATE,
    DEFAULT_LOAN_TENURE_YEARS,
    LTV_LIMIT,
    HDB_LOAN_LTV_LIMIT,
    MIN_CASH_DOWNPAYMENT,
    HDB_LOAN_MIN_CASH_DOWNPAYMENT,
    CPF_ORDINARY_WAGE_CEILING,
    BSD_TIERS,
    ABSD_RATE,
    GST_RATE,
    PURCHASE_LEGAL_FEE,
    BUYER_AGENT_FEE_RATE,
    OPTION_FEE_RATE,
    EXERCISE_FEE_RATE,
    RENTAL_YIELD,
    SELLING_AGENT_FEE_RATE,
    SHORTFALL_BENCHMARK_RATE,
    SHORTFALL_BENCHMARK_TENURE_YEARS,
    PLEDGE_FRACTION,
    SHOW_FUND_FRACTION,
    PRIVATE_PRICE_GRID,
    HDB_PRICE_GRID,
    RUNWAY_DISPLAY_CAP_YEARS,
    get_cpf_oa_rate,
)

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================

class Citizenship(str, Enum):
    CITIZEN = "SC"
    PERMANENT_RESIDENT = "PR"
    FOREIGNER = "Foreigner"


class IncomeBasis(str, Enum):
    FIXED = "Fixed"
    VARIABLE = "Variable"


class PropertyClass(str, Enum):
    PRIVATE = "Private"
    SUBSIDIZED_PUBLIC = "HDB"


class FinancingSource(str, Enum):
    BANK_LOAN = "Bank"
    HDB_LOAN = "HDB"


# =============================================================================
# INPUT RECORDS
# =============================================================================

@dataclass
class BuyerProfile:
    """One co-buyer's income position. birth_year of 0 means not entered."""
    citizenship: Citizenship = Citizenship.CITIZEN
    income_basis: IncomeBasis = IncomeBasis.FIXED
    monthly_income: float = 0.0
    latest_assessable_income: float = 0.0  # annual, from the latest NOA
    birth_year: int = 0
    existing_monthly_debt: float = 0.0


@dataclass
class SaleProfile:
    """The home being sold, and the CPF each buyer put into it."""
    sale_price: float = 0.0
    outstanding_loan: float = 0.0
    cpf_principal_used: tuple[float, float] = (0.0, 0.0)
    cpf_accrued_interest: tuple[float, float] = (0.0, 0.0)
    legal_fees: float = 0.0
    selling_agent_fee_rate: float = SELLING_AGENT_FEE_RATE


@dataclass
class FundsProfile:
    """Funds held outside the home being sold."""
    current_cpf_balance: tuple[float, float] = (0.0, 0.0)
    cash_savings: float = 0.0


@dataclass
class LoanSettings:
    """Financing assumptions for the purchase."""
    property_class: PropertyClass = PropertyClass.PRIVATE
    financing_source: FinancingSource = FinancingSource.BANK_LOAN
    nominal_interest_rate: float = DEFAULT_INTEREST_RATE
    amortization_tenure_years: int = DEFAULT_LOAN_TENURE_YEARS
    grant_amount: float = 0.0
    msr_interest_rate: float = HDB_INTEREST_RATE

    @property
    def uses_hdb_loan(self) -> bool:
        return (
            self.property_class == PropertyClass.SUBSIDIZED_PUBLIC
            and self.financing_source == FinancingSource.HDB_LOAN
        )


# =============================================================================
# RESULT RECORDS
# =============================================================================

@dataclass(frozen=True)
class BuyerEligibilityResult:
    """Loan capacity of a single buyer."""
    age: int
    tenure_years: int
    adjusted_income: float
    debt_service_budget: float  # TDSR: 55% of adjusted income
    usable_budget: float  # TDSR less existing debt
    max_loan_with_existing_debt: float
    max_loan_without_existing_debt: float
    mortgage_service_budget: float  # MSR: 30% of gross income
    max_loan_under_mortgage_service_limit: Optional[float]  # None unless MSR applies
    effective_max_loan: float
    monthly_oa_contribution: float


@dataclass(frozen=True)
class SaleProceedsResult:
    """Cash and CPF released by selling the current home."""
    selling_agent_fee: float
    cpf_refund: tuple[float, float]
    cash_from_sale: float  # negative when debts exceed the sale price
    total_cpf: tuple[float, float]
    total_available: float


@dataclass(frozen=True)
class PlanSummary:
    """Combined borrowing capacity and funds, as consumed by the price grid."""
    buyers: tuple[BuyerEligibilityResult, ...]
    sale: SaleProceedsResult
    eligible_loan: float
    total_available: float
    total_cpf: float
    combined_monthly_oa: float


@dataclass(frozen=True)
class PriceGridRow:
    """Affordability of one candidate purchase price."""
    price: float
    stamp_duty: float
    additional_stamp_duty: float
    option_fee: float
    exercise_fee: float
    legal_fee: float
    buyer_agent_fee: float
    cash_deposit: float
    cpf_deposit: float
    loan_to_value_ratio: float
    upfront_required: float
    loan_at_ltv_cap: float
    actual_loan: float
    loan_shortfall: float
    shortfall_service_equivalent: float
    pledge_amount: float
    show_fund_amount: float
    monthly_instalment: float
    monthly_oa_contribution: float
    monthly_cash_top_up: float
    remaining_cpf: float
    cpf_runway_years: float  # math.inf when OA covers the instalment
    estimated_monthly_rent: float
    affordable: bool


@dataclass(frozen=True)
class BuyingPlanResult:
    """Check of a specific target price against a chosen cash/CPF split."""
    target_price: float
    stamp_duty: float
    buyer_agent_fee: float
    legal_fee: float
    total_fees: float
    total_initial_cost: float
    loan_required: float
    loan_to_value_ratio: float
    max_ltv_loan: float
    ltv_exceeded: bool
    eligible_loan: float
    eligibility_exceeded: bool
    monthly_instalment: float
    monthly_cash_top_up: float
    remaining_cpf: float
    cpf_runway_years: float
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# STAMP DUTY
# =============================================================================

def calculate_stamp_duty(price: float) -> float:
    """
    Calculate Buyer's Stamp Duty (BSD) on a residential purchase.

    Each tier's marginal rate applies only to the part of the price inside
    that tier:
    - First $180,000: 1%
    - Next $180,000: 2%
    - Next $640,000: 3%
    - Next $500,000: 4%
    - Next $1,500,000: 5%
    - Remaining amount: 6%

    The result is not rounded.
    """
    if price <= 0:
        return 0.0

    previous_bound = 0.0
    for upper_bound, rate, base in BSD_TIERS[:-1]:
        if price <= upper_bound:
            return base + (price - previous_bound) * rate
        previous_bound = upper_bound

    _, top_rate, top_base = BSD_TIERS[-1]
    return top_base + (price - previous_bound) * top_rate


# =============================================================================
# LOAN CALCULATIONS
# =============================================================================

def calculate_monthly_payment(
    loan_amount: float,
    tenure_years: float = DEFAULT_LOAN_TENURE_YEARS,
    annual_rate: float = DEFAULT_INTEREST_RATE
) -> float:
    """
    Calculate monthly mortgage payment using PMT formula.

    PMT = P * [r(1+r)^n] / [(1+r)^n - 1]
    where:
        P = Principal (loan amount)
        r = Monthly interest rate
        n = Number of months

    Returns 0 for a non-positive principal, rate or tenure.
    """
    r = annual_rate / 12
    n = tenure_years * 12

    if loan_amount <= 0 or n <= 0 or r <= 0:
        return 0.0

    growth = (1 + r) ** n
    return loan_amount * (r * growth) / (growth - 1)


def calculate_max_loan(
    monthly_budget: float,
    tenure_years: float = DEFAULT_LOAN_TENURE_YEARS,
    annual_rate: float = DEFAULT_INTEREST_RATE
) -> float:
    """
    Calculate maximum loan amount given a monthly payment budget.

    This is the inverse of PMT - Present Value of Annuity.
    PV = PMT * [1 - (1+r)^-n] / r

    Returns 0 for a non-positive budget, rate or tenure.
    """
    r = annual_rate / 12
    n = tenure_years * 12

    if monthly_budget <= 0 or n <= 0 or r <= 0:
        return 0.0

    return monthly_budget * (1 - (1 + r) ** (-n)) / r


# =============================================================================
# BUYER ELIGIBILITY
# =============================================================================

def _current_year(current_year: Optional[int]) -> int:
    return current_year if current_year is not None else date.today().year


def calculate_age(birth_year: int, current_year: Optional[int] = None) -> int:
    """Age this year, or 0 when no birth year has been entered."""
    if not birth_year:
        return 0
    return _current_year(current_year) - birth_year


def calculate_loan_tenure(age: int) -> int:
    """Longest tenure that still matures by age 65, capped at 35 years."""
    return max(0, min(LOAN_MATURITY_AGE - age, MAX_TENURE_YEARS))


def calculate_adjusted_income(profile: BuyerProfile) -> float:
    """
    Monthly income recognised for TDSR.

    Fixed earners are credited with the higher of their monthly pay and
    NOA / 12; variable earners get the lower of the two.
    """
    noa_monthly = profile.latest_assessable_income / 12
    if profile.income_basis == IncomeBasis.VARIABLE:
        return min(profile.monthly_income, noa_monthly)
    return max(profile.monthly_income, noa_monthly)


def calculate_monthly_cpf_oa(monthly_income: float, age: int) -> float:
    """
    Calculate monthly CPF OA contribution based on income and age.

    Wages above the ordinary wage ceiling attract no contribution.
    """
    capped_income = min(monthly_income, CPF_ORDINARY_WAGE_CEILING)
    return capped_income * get_cpf_oa_rate(age)


def calculate_combined_monthly_cpf_oa(
    profiles: list[BuyerProfile],
    current_year: Optional[int] = None
) -> float:
    """Calculate combined monthly CPF OA contribution for all buyers."""
    return sum(
        calculate_monthly_cpf_oa(
            profile.monthly_income,
            calculate_age(profile.birth_year, current_year),
        )
        for profile in profiles
    )


def calculate_buyer_eligibility(
    profile: BuyerProfile,
    loan_settings: LoanSettings,
    current_year: Optional[int] = None
) -> BuyerEligibilityResult:
    """
    Calculate one buyer's maximum loan.

    Takes into account:
    - TDSR limit (55% of adjusted income), less existing monthly debt
    - Tenure capped at 35 years and at age 65
    - For HDB / EC purchases, the MSR limit (30% of gross income) at the
      concessionary rate; the lower of the two ceilings binds
    """
    age = calculate_age(profile.birth_year, current_year)
    tenure = calculate_loan_tenure(age)
    rate = loan_settings.nominal_interest_rate

    adjusted_income = calculate_adjusted_income(profile)
    debt_service_budget = adjusted_income * TDSR_LIMIT
    usable_budget = max(0.0, debt_service_budget - profile.existing_monthly_debt)

    max_loan_with_debt = calculate_max_loan(usable_budget, tenure, rate)
    max_loan_without_debt = calculate_max_loan(debt_service_budget, tenure, rate)

    mortgage_service_budget = profile.monthly_income * MSR_LIMIT
    max_loan_msr = None
    effective_max = max_loan_with_debt

    if loan_settings.property_class == PropertyClass.SUBSIDIZED_PUBLIC:
        max_loan_msr = calculate_max_loan(
            mortgage_service_budget, tenure, loan_settings.msr_interest_rate
        )
        effective_max = min(max_loan_with_debt, max_loan_msr)

    return BuyerEligibilityResult(
        age=age,
        tenure_years=tenure,
        adjusted_income=adjusted_income,
        debt_service_budget=debt_service_budget,
        usable_budget=usable_budget,
        max_loan_with_existing_debt=max_loan_with_debt,
        max_loan_without_existing_debt=max_loan_without_debt,
        mortgage_service_budget=mortgage_service_budget,
        max_loan_under_mortgage_service_limit=max_loan_msr,
        effective_max_loan=effective_max,
        monthly_oa_contribution=calculate_monthly_cpf_oa(profile.monthly_income, age),
    )


def check_buyer_profile(
    profile: BuyerProfile,
    current_year: Optional[int] = None
) -> list[str]:
    """Return warnings for inputs the engine will accept but likely mistyped."""
    warnings = []
    year = _current_year(current_year)

    if profile.birth_year and profile.birth_year > year:
        warnings.append(f"Birth year {profile.birth_year} is in the future.")
    if not profile.birth_year:
        warnings.append(
            f"No birth year entered - assuming the maximum {MAX_TENURE_YEARS}-year tenure."
        )
    if profile.monthly_income < 0 or profile.latest_assessable_income < 0:
        warnings.append("Income cannot be negative.")
    if profile.existing_monthly_debt < 0:
        warnings.append("Existing monthly debt cannot be negative.")

    return warnings


# =============================================================================
# SALE PROCEEDS
# =============================================================================

def calculate_sale_proceeds(sale: SaleProfile, funds: FundsProfile) -> SaleProceedsResult:
    """
    Calculate cash and CPF available after selling the current home.

    On sale, the CPF principal used plus accrued interest goes back into each
    buyer's CPF account before any cash is released. Cash from sale is not
    clamped; a negative figure means the sale does not clear its debts.
    """
    selling_agent_fee = sale.sale_price * sale.selling_agent_fee_rate * (1 + GST_RATE)

    cpf_refund = tuple(
        used + interest
        for used, interest in zip(sale.cpf_principal_used, sale.cpf_accrued_interest)
    )

    cash_from_sale = (
        sale.sale_price
        - sale.outstanding_loan
        - sum(cpf_refund)
        - sale.legal_fees
        - selling_agent_fee
    )
    if cash_from_sale < 0:
        logger.warning("Sale leaves a cash gap of %.2f", -cash_from_sale)

    total_cpf = tuple(
        balance + refund
        for balance, refund in zip(funds.current_cpf_balance, cpf_refund)
    )
    total_available = cash_from_sale + funds.cash_savings + sum(total_cpf)

    return SaleProceedsResult(
        selling_agent_fee=selling_agent_fee,
        cpf_refund=cpf_refund,
        cash_from_sale=cash_from_sale,
        total_cpf=total_cpf,
        total_available=total_available,
    )


# =============================================================================
# PLAN SUMMARY
# =============================================================================

def summarise_plan(
    buyers: list[BuyerProfile],
    sale: SaleProfile,
    funds: FundsProfile,
    loan_settings: LoanSettings,
    current_year: Optional[int] = None,
    monthly_oa_override: Optional[float] = None
) -> PlanSummary:
    """
    Combine both buyers' eligibility with the sale proceeds.

    Only the stronger single borrower's capacity is counted as the eligible
    loan; incomes are not pooled.
    """
    results = tuple(
        calculate_buyer_eligibility(profile, loan_settings, current_year)
        for profile in buyers
    )
    eligible_loan = max((r.effective_max_loan for r in results), default=0.0)

    proceeds = calculate_sale_proceeds(sale, funds)

    if monthly_oa_override is not None:
        combined_oa = monthly_oa_override
    else:
        combined_oa = sum(r.monthly_oa_contribution for r in results)

    logger.debug(
        "Plan summary: eligible loan %.2f, total available %.2f, monthly OA %.2f",
        eligible_loan, proceeds.total_available, combined_oa,
    )

    return PlanSummary(
        buyers=results,
        sale=proceeds,
        eligible_loan=eligible_loan,
        total_available=proceeds.total_available,
        total_cpf=sum(proceeds.total_cpf),
        combined_monthly_oa=combined_oa,
    )


# =============================================================================
# AFFORDABILITY GRID
# =============================================================================

def price_grid(property_class: PropertyClass) -> list[float]:
    """Candidate purchase prices for a property class, ascending."""
    if property_class == PropertyClass.SUBSIDIZED_PUBLIC:
        start, end, step = HDB_PRICE_GRID
    else:
        start, end, step = PRIVATE_PRICE_GRID
    return [float(price) for price in range(start, end + 1, step)]


def get_ltv_limit(loan_settings: LoanSettings) -> float:
    """Loan-to-value cap: 80% for an HDB loan on an HDB flat, else 75%."""
    return HDB_LOAN_LTV_LIMIT if loan_settings.uses_hdb_loan else LTV_LIMIT


def get_min_cash_downpayment(loan_settings: LoanSettings) -> float:
    """Minimum cash share of the price: none with an HDB loan, else 5%."""
    if loan_settings.uses_hdb_loan:
        return HDB_LOAN_MIN_CASH_DOWNPAYMENT
    return MIN_CASH_DOWNPAYMENT


def calculate_buyer_agent_fee(price: float, property_class: PropertyClass) -> float:
    """Buyer's agent commission incl. GST; only charged on HDB purchases."""
    if property_class == PropertyClass.SUBSIDIZED_PUBLIC:
        return price * BUYER_AGENT_FEE_RATE * (1 + GST_RATE)
    return 0.0


def calculate_cpf_runway(remaining_cpf: float, monthly_cash_top_up: float) -> float:
    """
    Years the remaining CPF can fund the monthly top-up.

    Returns math.inf when there is no top-up to fund.
    """
    if monthly_cash_top_up <= 0:
        return math.inf
    return remaining_cpf / (monthly_cash_top_up * 12)


def calculate_price_row(
    price: float,
    eligible_loan: float,
    total_available: float,
    loan_settings: LoanSettings,
    grant_amount: float,
    combined_monthly_oa: float = 0.0,
    total_cpf: float = 0.0
) -> PriceGridRow:
    """
    Work out a single row of the affordability grid.

    The cash deposit is the minimum cash share plus the buyer's agent fee.
    The rest of the downpayment, stamp duty and legal fees are assumed
    payable from CPF.
    """
    ltv = get_ltv_limit(loan_settings)
    min_cash_percent = get_min_cash_downpayment(loan_settings)

    stamp_duty = calculate_stamp_duty(price)
    additional_stamp_duty = price * ABSD_RATE
    buyer_agent_fee = calculate_buyer_agent_fee(price, loan_settings.property_class)
    legal_fee = PURCHASE_LEGAL_FEE

    min_downpayment = price * (1 - ltv)
    min_cash_down = price * min_cash_percent

    cash_deposit = min_cash_down + buyer_agent_fee
    cpf_deposit = (min_downpayment - min_cash_down) + stamp_duty + additional_stamp_duty + legal_fee
    upfront_required = cash_deposit + cpf_deposit

    loan_at_ltv_cap = price * ltv
    actual_loan = min(loan_at_ltv_cap, eligible_loan)
    loan_shortfall = max(0.0, loan_at_ltv_cap - actual_loan)

    monthly_instalment = calculate_monthly_payment(
        actual_loan,
        loan_settings.amortization_tenure_years,
        loan_settings.nominal_interest_rate,
    )

    shortfall_service_equivalent = 0.0
    pledge_amount = 0.0
    show_fund_amount = 0.0
    if loan_shortfall > 0:
        shortfall_service_equivalent = calculate_monthly_payment(
            loan_shortfall,
            SHORTFALL_BENCHMARK_TENURE_YEARS,
            SHORTFALL_BENCHMARK_RATE,
        )
        pledge_amount = loan_shortfall * PLEDGE_FRACTION
        show_fund_amount = loan_shortfall * SHOW_FUND_FRACTION

    monthly_cash_top_up = max(0.0, monthly_instalment - combined_monthly_oa)
    remaining_cpf = max(0.0, total_cpf - cpf_deposit)

    return PriceGridRow(
        price=price,
        stamp_duty=stamp_duty,
        additional_stamp_duty=additional_stamp_duty,
        option_fee=price * OPTION_FEE_RATE,
        exercise_fee=price * EXERCISE_FEE_RATE,
        legal_fee=legal_fee,
        buyer_agent_fee=buyer_agent_fee,
        cash_deposit=cash_deposit,
        cpf_deposit=cpf_deposit,
        loan_to_value_ratio=ltv,
        upfront_required=upfront_required,
        loan_at_ltv_cap=loan_at_ltv_cap,
        actual_loan=actual_loan,
        loan_shortfall=loan_shortfall,
        shortfall_service_equivalent=shortfall_service_equivalent,
        pledge_amount=pledge_amount,
        show_fund_amount=show_fund_amount,
        monthly_instalment=monthly_instalment,
        monthly_oa_contribution=combined_monthly_oa,
        monthly_cash_top_up=monthly_cash_top_up,
        remaining_cpf=remaining_cpf,
        cpf_runway_years=calculate_cpf_runway(remaining_cpf, monthly_cash_top_up),
        estimated_monthly_rent=price * RENTAL_YIELD / 12,
        affordable=(
            upfront_required <= total_available + grant_amount
            and loan_shortfall == 0
        ),
    )


def generate_affordability_grid(
    eligible_loan: float,
    total_available: float,
    loan_settings: LoanSettings,
    grant_amount: Optional[float] = None,
    *,
    combined_monthly_oa: float = 0.0,
    total_cpf: float = 0.0
) -> list[PriceGridRow]:
    """
    Generate the affordability table for every price on the grid.

    Rows are independent of each other and returned in ascending price
    order. grant_amount defaults to the grant in loan_settings.
    """
    if grant_amount is None:
        grant_amount = loan_settings.grant_amount

    prices = price_grid(loan_settings.property_class)
    logger.debug(
        "Generating %d grid rows for %s (eligible loan %.2f)",
        len(prices), loan_settings.property_class.value, eligible_loan,
    )

    return [
        calculate_price_row(
            price,
            eligible_loan,
            total_available,
            loan_settings,
            grant_amount,
            combined_monthly_oa,
            total_cpf,
        )
        for price in prices
    ]


def generate_plan_grid(plan: PlanSummary, loan_settings: LoanSettings) -> list[PriceGridRow]:
    """Generate the affordability grid straight from a plan summary."""
    return generate_affordability_grid(
        plan.eligible_loan,
        plan.total_available,
        loan_settings,
        combined_monthly_oa=plan.combined_monthly_oa,
        total_cpf=plan.total_cpf,
    )


# =============================================================================
# BUYING PLAN
# =============================================================================

def evaluate_buying_plan(
    target_price: float,
    cash_downpayment: float,
    cpf_usage: tuple[float, float],
    plan: PlanSummary,
    loan_settings: LoanSettings
) -> BuyingPlanResult:
    """
    Check a specific purchase against the buyers' chosen cash and CPF split.

    The loan required is whatever the cash and CPF do not cover. It is
    tested against both the LTV cap and the eligible loan.
    """
    stamp_duty = calculate_stamp_duty(target_price)
    buyer_agent_fee = calculate_buyer_agent_fee(target_price, loan_settings.property_class)
    legal_fee = PURCHASE_LEGAL_FEE
    total_fees = stamp_duty + legal_fee + buyer_agent_fee

    cpf_total = sum(cpf_usage)
    loan_required = max(0.0, target_price - cash_downpayment - cpf_total)

    ltv = get_ltv_limit(loan_settings)
    max_ltv_loan = target_price * ltv

    monthly_instalment = calculate_monthly_payment(
        loan_required,
        loan_settings.amortization_tenure_years,
        loan_settings.nominal_interest_rate,
    )
    monthly_cash_top_up = max(0.0, monthly_instalment - plan.combined_monthly_oa)
    remaining_cpf = max(0.0, plan.total_cpf - cpf_total)

    warnings = []
    if cpf_total > plan.total_cpf:
        warnings.append("Planned CPF usage exceeds the CPF available after the sale.")
    cash_after_sale = plan.total_available - plan.total_cpf
    if cash_downpayment > cash_after_sale:
        warnings.append("Planned cash downpayment exceeds the cash available after the sale.")

    return BuyingPlanResult(
        target_price=target_price,
        stamp_duty=stamp_duty,
        buyer_agent_fee=buyer_agent_fee,
        legal_fee=legal_fee,
        total_fees=total_fees,
        total_initial_cost=target_price + total_fees,
        loan_required=loan_required,
        loan_to_value_ratio=ltv,
        max_ltv_loan=max_ltv_loan,
        ltv_exceeded=loan_required > max_ltv_loan,
        eligible_loan=plan.eligible_loan,
        eligibility_exceeded=loan_required > plan.eligible_loan,
        monthly_instalment=monthly_instalment,
        monthly_cash_top_up=monthly_cash_top_up,
        remaining_cpf=remaining_cpf,
        cpf_runway_years=calculate_cpf_runway(remaining_cpf, monthly_cash_top_up),
        warnings=warnings,
    )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_currency(amount: float) -> str:
    """Format amount as Singapore dollars."""
    if amount >= 0:
        return f"${amount:,.0f}"
    else:
        return f"-${abs(amount):,.0f}"


def format_runway(years: float) -> str:
    """Format a CPF runway, showing anything past the display cap as open-ended."""
    if years > RUNWAY_DISPLAY_CAP_YEARS:
        return f"> {RUNWAY_DISPLAY_CAP_YEARS} years"
    return f"{years:.1f} years"
