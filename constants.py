"""
Singapore Property Transition Planner - Constants

Regulatory limits, stamp duty tiers and CPF allocation rates used when
planning a sale of the current home and the purchase of the next one.
Last updated: October 2026
"""

# =============================================================================
# DEBT SERVICING LIMITS
# =============================================================================

# Total Debt Servicing Ratio - max % of adjusted income for all debts
TDSR_LIMIT = 0.55  # 55%

# Mortgage Servicing Ratio - HDB / EC only, applied to gross monthly income
MSR_LIMIT = 0.30  # 30%

# Loan must be fully repaid by this age
LOAN_MATURITY_AGE = 65

# Hard cap on tenure regardless of age
MAX_TENURE_YEARS = 35


# =============================================================================
# LOAN DEFAULTS
# =============================================================================

# HDB concessionary rate: CPF OA rate (2.5%) + 0.1%
HDB_INTEREST_RATE = 0.026  # 2.6% per annum

# Default bank loan assumptions
DEFAULT_INTEREST_RATE = 0.02  # 2.0% per annum
DEFAULT_LOAN_TENURE_YEARS = 30

# Loan-to-Value limits
LTV_LIMIT = 0.75  # bank loans, and HDB flats bought with a bank loan
HDB_LOAN_LTV_LIMIT = 0.80  # HDB flats bought with an HDB loan

# Minimum cash component of the downpayment
MIN_CASH_DOWNPAYMENT = 0.05  # 5%
HDB_LOAN_MIN_CASH_DOWNPAYMENT = 0.0  # HDB loan: downpayment can be fully CPF


# =============================================================================
# CPF CONTRIBUTIONS (Ordinary Account allocation)
# =============================================================================

# Ordinary wage ceiling for contributions
CPF_ORDINARY_WAGE_CEILING = 8000

# OA allocation as % of gross wages, by age bracket (inclusive)
CPF_OA_RATES_BY_AGE = {
    (0, 35): 0.23,
    (36, 45): 0.21,
    (46, 50): 0.19,
    (51, 999): 0.15,
}


def get_cpf_oa_rate(age: int) -> float:
    """Get the CPF OA allocation rate for a given age."""
    for (min_age, max_age), rate in CPF_OA_RATES_BY_AGE.items():
        if min_age <= age <= max_age:
            return rate
    # Negative ages only happen with a future birth year
    return CPF_OA_RATES_BY_AGE[(0, 35)]


# =============================================================================
# STAMP DUTY
# =============================================================================

# Buyer's Stamp Duty (BSD) for residential property
# Format: (upper bound of tier, marginal rate, cumulative duty at tier start)
BSD_TIERS = [
    (180000, 0.01, 0),
    (360000, 0.02, 1800),
    (1000000, 0.03, 5400),
    (1500000, 0.04, 24600),
    (3000000, 0.05, 44600),
    (float('inf'), 0.06, 119600),
]

# Additional Buyer's Stamp Duty - Singapore Citizen buying a first property
ABSD_RATE = 0.0

GST_RATE = 0.09  # 9% GST on agent fees


# =============================================================================
# TRANSACTION COSTS
# =============================================================================

# Flat legal fee assumed on every purchase
PURCHASE_LEGAL_FEE = 3000

# Buyer's agent commission on HDB resale (before GST); private buyers pay none
BUYER_AGENT_FEE_RATE = 0.01

# Option to Purchase and exercise fees, as % of price
OPTION_FEE_RATE = 0.01
EXERCISE_FEE_RATE = 0.04

# Gross rental yield used for the rent estimate column
RENTAL_YIELD = 0.03

# Seller's agent commission default (before GST)
SELLING_AGENT_FEE_RATE = 0.02


# =============================================================================
# LOAN SHORTFALL POLICY
# =============================================================================

# A shortfall against the LTV cap is expressed as the instalment of a
# notional benchmark loan, and as the pledge / show fund needed to cover it.
# These multiples are awaiting confirmation from a mortgage specialist.
SHORTFALL_BENCHMARK_RATE = 0.04
SHORTFALL_BENCHMARK_TENURE_YEARS = 30
PLEDGE_FRACTION = 5 / 12
SHOW_FUND_FRACTION = 25 / 18


# =============================================================================
# PRICE GRID
# =============================================================================

# Format: (start, end inclusive, step)
PRIVATE_PRICE_GRID = (700000, 4000000, 100000)
HDB_PRICE_GRID = (300000, 1500000, 50000)

# Runway above this is displayed as open-ended
RUNWAY_DISPLAY_CAP_YEARS = 50


# =============================================================================
# DEFAULT VALUES FOR UI
# =============================================================================

DEFAULTS = {
    # Current home
    "sale_price": 2400000,
    "outstanding_loan": 600000,
    "buyer_1_cpf_used": 270000,
    "buyer_1_accrued_interest": 12500,
    "buyer_2_cpf_used": 250000,
    "buyer_2_accrued_interest": 12500,
    "sale_legal_fees": 3000,
    "selling_agent_fee_rate": SELLING_AGENT_FEE_RATE,
    # Funds after sale
    "buyer_1_cpf_balance": 80000,
    "buyer_2_cpf_balance": 50000,
    "cash_savings": 500000,
    # Buyers
    "buyer_1_monthly_income": 5000,
    "buyer_1_noa": 80000,
    "buyer_1_birth_year": 1995,
    "buyer_1_existing_debt": 1200,
    "buyer_2_monthly_income": 8000,
    "buyer_2_noa": 120000,
    "buyer_2_birth_year": 1990,
    "buyer_2_existing_debt": 0,
    # Buying plan
    "target_price": 1000000,
    "target_cash": 250000,
    "target_cpf_1": 100000,
    "target_cpf_2": 50000,
}

# Input ranges for the sidebar
INCOME_MIN = 0
INCOME_MAX = 100000
INCOME_STEP = 100
