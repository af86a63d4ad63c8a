"""
Singapore Property Transition Planner

A Streamlit app to help a couple plan selling their current home and
buying the next one.

Features:
- Sale proceeds after loan, CPF refund and fees
- Per-buyer loan eligibility (55% TDSR, 30% MSR for HDB / EC)
- Buying plan check for a target price
- Affordability table across a grid of purchase prices

Run with: streamlit run main.py
"""

import logging
from datetime import date

import pandas as pd
import streamlit as st

from constants import (
    DEFAULTS,
    INCOME_MIN,
    INCOME_MAX,
    INCOME_STEP,
    DEFAULT_INTEREST_RATE,
    DEFAULT_LOAN_TENURE_YEARS,
    HDB_INTEREST_RATE,
    TDSR_LIMIT,
    MSR_LIMIT,
)

from calculations import (
    BuyerProfile,
    Citizenship,
    FinancingSource,
    FundsProfile,
    IncomeBasis,
    LoanSettings,
    PropertyClass,
    SaleProfile,
    check_buyer_profile,
    evaluate_buying_plan,
    format_currency,
    format_runway,
    generate_affordability_grid,
    summarise_plan,
)

from charts import (
    create_affordability_grid_chart,
    create_cash_flow_chart,
    create_grid_table_data,
    create_loan_capacity_chart,
    create_sale_proceeds_chart,
)

logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)


# =============================================================================
# PAGE CONFIG
# =============================================================================

st.set_page_config(
    page_title="Property Financial Plan",
    page_icon="🏠",
    layout="wide",
    initial_sidebar_state="expanded",
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

@st.cache_data
def cached_affordability_grid(
    eligible_loan: float,
    total_available: float,
    property_class: str,
    financing_source: str,
    interest_rate: float,
    tenure_years: int,
    grant_amount: float,
    combined_monthly_oa: float,
    total_cpf: float,
):
    """Memoize the whole grid on the inputs that affect it."""
    loan_settings = LoanSettings(
        property_class=PropertyClass(property_class),
        financing_source=FinancingSource(financing_source),
        nominal_interest_rate=interest_rate,
        amortization_tenure_years=tenure_years,
        grant_amount=grant_amount,
    )
    return generate_affordability_grid(
        eligible_loan,
        total_available,
        loan_settings,
        combined_monthly_oa=combined_monthly_oa,
        total_cpf=total_cpf,
    )


def money_input(label: str, value: float, key: str, step: int = 1000, **kwargs) -> float:
    return float(st.number_input(
        label,
        min_value=0,
        value=int(value),
        step=step,
        key=key,
        **kwargs,
    ))


def render_buyer_inputs(buyer_num: int) -> BuyerProfile:
    """Inputs for one buyer; both buyers share this form."""
    prefix = f"buyer_{buyer_num}"
    current_year = date.today().year

    citizenship = st.selectbox(
        "Citizenship",
        options=[c.value for c in Citizenship],
        key=f"{prefix}_citizenship",
    )
    income_basis = st.selectbox(
        "Income Type",
        options=[b.value for b in IncomeBasis],
        key=f"{prefix}_income_basis",
        help="Fixed: higher of monthly pay and NOA/12. Variable: the lower of the two.",
    )
    monthly_income = st.number_input(
        "Monthly Income",
        min_value=INCOME_MIN,
        max_value=INCOME_MAX,
        value=DEFAULTS[f"{prefix}_monthly_income"],
        step=INCOME_STEP,
        key=f"{prefix}_income",
    )
    noa = money_input(f"NOA {current_year}", DEFAULTS[f"{prefix}_noa"], key=f"{prefix}_noa")
    birth_year = st.number_input(
        "Birth Year",
        min_value=0,
        max_value=current_year,
        value=DEFAULTS[f"{prefix}_birth_year"],
        step=1,
        key=f"{prefix}_birth_year",
        help="Leave at 0 if unknown - tenure then defaults to 35 years",
    )
    existing_debt = money_input(
        "Current Loan Payment",
        DEFAULTS[f"{prefix}_existing_debt"],
        key=f"{prefix}_debt",
        step=50,
    )

    return BuyerProfile(
        citizenship=Citizenship(citizenship),
        income_basis=IncomeBasis(income_basis),
        monthly_income=float(monthly_income),
        latest_assessable_income=noa,
        birth_year=int(birth_year),
        existing_monthly_debt=existing_debt,
    )


# =============================================================================
# SIDEBAR - CONFIGURATION
# =============================================================================

def render_sidebar():
    """Render the configuration sidebar."""
    st.sidebar.title("🏠 Property Plan")
    st.sidebar.markdown("---")

    # =========================================================================
    # Section 1: Property Type & Loan
    # =========================================================================
    st.sidebar.header("🏢 Property & Loan")

    property_class = PropertyClass(st.sidebar.radio(
        "Property Type",
        options=[PropertyClass.PRIVATE.value, PropertyClass.SUBSIDIZED_PUBLIC.value],
        format_func=lambda v: "HDB / EC" if v == PropertyClass.SUBSIDIZED_PUBLIC.value else v,
        horizontal=True,
    ))

    financing_source = FinancingSource.BANK_LOAN
    grant_amount = 0.0
    if property_class == PropertyClass.SUBSIDIZED_PUBLIC:
        financing_source = FinancingSource(st.sidebar.radio(
            "Loan Type",
            options=[FinancingSource.BANK_LOAN.value, FinancingSource.HDB_LOAN.value],
            format_func=lambda v: f"{v} Loan",
            horizontal=True,
        ))
        grant_amount = float(st.sidebar.number_input(
            "Grants",
            min_value=0,
            value=0,
            step=5000,
        ))

    uses_hdb_loan = (
        property_class == PropertyClass.SUBSIDIZED_PUBLIC
        and financing_source == FinancingSource.HDB_LOAN
    )

    if uses_hdb_loan:
        interest_rate_pct = HDB_INTEREST_RATE * 100
        st.sidebar.caption(f"HDB loan rate fixed at {interest_rate_pct:.1f}% p.a.")
    else:
        interest_rate_pct = st.sidebar.number_input(
            "Interest Rate (%)",
            min_value=0.0,
            max_value=15.0,
            value=DEFAULT_INTEREST_RATE * 100,
            step=0.1,
        )

    tenure_years = st.sidebar.number_input(
        "Loan Tenure (years)",
        min_value=1,
        max_value=35,
        value=DEFAULT_LOAN_TENURE_YEARS,
        step=1,
    )

    loan_settings = LoanSettings(
        property_class=property_class,
        financing_source=financing_source,
        nominal_interest_rate=interest_rate_pct / 100,
        amortization_tenure_years=int(tenure_years),
        grant_amount=grant_amount,
    )

    # =========================================================================
    # Section 2: Current Home
    # =========================================================================
    st.sidebar.markdown("---")
    st.sidebar.header("🏡 Current Home")

    with st.sidebar.expander("Selling Details", expanded=True):
        sale_price = money_input("Selling Price", DEFAULTS["sale_price"], key="sale_price", step=10000)
        outstanding_loan = money_input("Outstanding Loan", DEFAULTS["outstanding_loan"], key="outstanding", step=10000)
        legal_fees = money_input("Legal Fees", DEFAULTS["sale_legal_fees"], key="sale_legal", step=100)
        agent_fee_pct = st.number_input(
            "Selling Agent Fee (%)",
            min_value=0.0,
            max_value=5.0,
            value=DEFAULTS["selling_agent_fee_rate"] * 100,
            step=0.25,
            help="Charged on the selling price, plus GST",
        )

    with st.sidebar.expander("CPF Used on Current Home"):
        cpf_used_1 = money_input("CPF Used (Buyer 1)", DEFAULTS["buyer_1_cpf_used"], key="cpf_used_1")
        interest_1 = money_input("Accrued Interest (Buyer 1)", DEFAULTS["buyer_1_accrued_interest"], key="interest_1", step=500)
        cpf_used_2 = money_input("CPF Used (Buyer 2)", DEFAULTS["buyer_2_cpf_used"], key="cpf_used_2")
        interest_2 = money_input("Accrued Interest (Buyer 2)", DEFAULTS["buyer_2_accrued_interest"], key="interest_2", step=500)

    sale = SaleProfile(
        sale_price=sale_price,
        outstanding_loan=outstanding_loan,
        cpf_principal_used=(cpf_used_1, cpf_used_2),
        cpf_accrued_interest=(interest_1, interest_2),
        legal_fees=legal_fees,
        selling_agent_fee_rate=agent_fee_pct / 100,
    )

    # =========================================================================
    # Section 3: Other Funds
    # =========================================================================
    st.sidebar.markdown("---")
    st.sidebar.header("💰 Funds After Sale")

    cpf_balance_1 = money_input("Buyer 1 CPF", DEFAULTS["buyer_1_cpf_balance"], key="cpf_balance_1")
    cpf_balance_2 = money_input("Buyer 2 CPF", DEFAULTS["buyer_2_cpf_balance"], key="cpf_balance_2")
    cash_savings = money_input("Cash from Savings", DEFAULTS["cash_savings"], key="cash_savings", step=10000)

    funds = FundsProfile(
        current_cpf_balance=(cpf_balance_1, cpf_balance_2),
        cash_savings=cash_savings,
    )

    return {
        "loan_settings": loan_settings,
        "sale": sale,
        "funds": funds,
    }


# =============================================================================
# MAIN CONTENT - TABS
# =============================================================================

def render_selling_tab(config: dict, plan):
    """Tab 1: Selling Financial Plan"""
    st.header("🏡 Selling Financial Plan")

    proceeds = plan.sale
    col1, col2, col3 = st.columns(3)

    with col1:
        st.metric(
            "Cash from Sale",
            format_currency(proceeds.cash_from_sale),
            help="Selling price less loan, CPF refund, legal and agent fees",
        )
    with col2:
        st.metric(
            "CPF After Refund",
            format_currency(sum(proceeds.total_cpf)),
            help="Current CPF plus principal and accrued interest refunded on sale",
        )
    with col3:
        st.metric("Total Available", format_currency(proceeds.total_available))

    if proceeds.cash_from_sale < 0:
        st.error(
            "⚠️ The sale does not cover the outstanding loan, CPF refund and fees. "
            f"The gap of {format_currency(-proceeds.cash_from_sale)} must come from savings."
        )

    fig = create_sale_proceeds_chart(config["sale"], proceeds)
    st.plotly_chart(fig, use_container_width=True)

    with st.expander("📝 After Sale Position", expanded=True):
        st.write(f"- Cash from Sale: {format_currency(proceeds.cash_from_sale)}")
        st.write(f"- Cash from Savings: {format_currency(config['funds'].cash_savings)}")
        for i, total in enumerate(proceeds.total_cpf, start=1):
            st.write(f"- CPF (Buyer {i}) w/ Refund: {format_currency(total)}")
        st.write(f"- **Total Available:** {format_currency(proceeds.total_available)}")


def render_buyers_tab(buyers: list, plan):
    """Tab 2: Buyer Profiles"""
    st.header(f"👥 Buyer Profiles (TDSR at {TDSR_LIMIT * 100:.0f}%)")

    columns = st.columns(len(plan.buyers))
    for i, (col, profile, result) in enumerate(zip(columns, buyers, plan.buyers), start=1):
        with col:
            st.subheader(f"Buyer {i}")
            for warning in check_buyer_profile(profile):
                st.warning(warning)
            st.write(f"- Age: {result.age} years")
            st.write(f"- Adjusted Income: {format_currency(result.adjusted_income)}")
            st.write(f"- TDSR ({TDSR_LIMIT * 100:.0f}%): {format_currency(result.debt_service_budget)}")
            st.write(f"- Usable TDSR: {format_currency(result.usable_budget)}")
            st.write(f"- Loan Tenure: {result.tenure_years} years")
            st.write(f"- **Max Loan (w/ other loans):** {format_currency(result.max_loan_with_existing_debt)}")
            st.write(f"- Max Loan (w/o other loans): {format_currency(result.max_loan_without_existing_debt)}")
            if result.max_loan_under_mortgage_service_limit is not None:
                st.write(
                    f"- Max Loan (MSR {MSR_LIMIT * 100:.0f}%): "
                    f"{format_currency(result.max_loan_under_mortgage_service_limit)}"
                )
            st.write(f"- Monthly OA: {format_currency(result.monthly_oa_contribution)}")

    st.markdown("---")
    st.metric(
        "Max Eligible Loan",
        format_currency(plan.eligible_loan),
        help="The stronger single borrower's capacity; incomes are not pooled",
    )

    fig = create_loan_capacity_chart(plan)
    st.plotly_chart(fig, use_container_width=True)


def render_buying_plan_tab(config: dict, plan):
    """Tab 3: Buying Plan Calculator"""
    st.header("🎯 Buying Plan Calculator")

    col1, col2 = st.columns(2)

    with col1:
        target_price = money_input("Target Purchase Price", DEFAULTS["target_price"], key="target_price", step=10000)
        target_cash = money_input("Cash Downpayment", DEFAULTS["target_cash"], key="target_cash", step=5000)
        target_cpf_1 = money_input("CPF Usage (Buyer 1)", DEFAULTS["target_cpf_1"], key="target_cpf_1", step=5000)
        target_cpf_2 = money_input("CPF Usage (Buyer 2)", DEFAULTS["target_cpf_2"], key="target_cpf_2", step=5000)

    result = evaluate_buying_plan(
        target_price,
        target_cash,
        (target_cpf_1, target_cpf_2),
        plan,
        config["loan_settings"],
    )

    with col2:
        st.write(f"- Est. Fees (BSD + Legal + Agent): {format_currency(result.total_fees)}")
        st.write(f"- Total Initial Cost (Price + Fees): {format_currency(result.total_initial_cost)}")
        st.metric("Loan Required", format_currency(result.loan_required))

        ltv_status = "❌ Exceeded" if result.ltv_exceeded else "✅ Pass"
        st.write(
            f"- LTV Limit ({result.loan_to_value_ratio * 100:.0f}%): "
            f"{ltv_status} ({format_currency(result.max_ltv_loan)})"
        )
        eligibility_status = "❌ Exceeded" if result.eligibility_exceeded else "✅ Pass"
        st.write(
            f"- Max Eligible Loan (Inc. MSR/TDSR): "
            f"{eligibility_status} ({format_currency(result.eligible_loan)})"
        )

    st.markdown("---")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Monthly Instalment", format_currency(result.monthly_instalment))
    with col2:
        st.metric("Combined Monthly OA", format_currency(plan.combined_monthly_oa))
    with col3:
        st.metric("Cash Top-up Required", format_currency(result.monthly_cash_top_up))

    if result.monthly_cash_top_up > 0:
        runway = format_runway(result.cpf_runway_years)
        if result.cpf_runway_years < 5:
            st.error(f"⚠️ Remaining CPF covers the top-up for only {runway}.")
        else:
            st.success(f"Remaining CPF covers the top-up for {runway}.")

    for warning in result.warnings:
        st.warning(warning)


def render_grid_tab(config: dict, plan):
    """Tab 4: Affordability across purchase prices"""
    st.header("📊 Purchase Price Analysis")

    loan_settings = config["loan_settings"]
    rows = cached_affordability_grid(
        plan.eligible_loan,
        plan.total_available,
        loan_settings.property_class.value,
        loan_settings.financing_source.value,
        loan_settings.nominal_interest_rate,
        loan_settings.amortization_tenure_years,
        loan_settings.grant_amount,
        plan.combined_monthly_oa,
        plan.total_cpf,
    )

    affordable = [row for row in rows if row.affordable]
    if affordable:
        st.success(f"Highest affordable price on the grid: **{format_currency(affordable[-1].price)}**")
    else:
        st.error("❌ No price on the grid is affordable with the current inputs.")

    df = pd.DataFrame(create_grid_table_data(rows))
    st.dataframe(df, hide_index=True, use_container_width=True)

    fig = create_affordability_grid_chart(rows, plan.total_available, loan_settings.grant_amount)
    st.plotly_chart(fig, use_container_width=True)

    fig2 = create_cash_flow_chart(rows)
    st.plotly_chart(fig2, use_container_width=True)


# =============================================================================
# MAIN APP
# =============================================================================

def main():
    """Main application entry point."""

    config = render_sidebar()

    st.title("🏠 Property Financial Plan")
    st.caption(
        "Plan the sale of your current home and the purchase of the next one. "
        "See your sale proceeds, loan eligibility and what you can afford."
    )

    tabs = st.tabs([
        "🏡 Selling Plan",
        "👥 Buyer Profiles",
        "🎯 Buying Plan",
        "📊 Price Analysis",
    ])

    # Buyer inputs live in their tab but every other tab needs the plan
    with tabs[1]:
        with st.expander("✏️ Edit Buyer Details", expanded=True):
            col1, col2 = st.columns(2)
            with col1:
                buyer_1 = render_buyer_inputs(1)
            with col2:
                buyer_2 = render_buyer_inputs(2)

    buyers = [buyer_1, buyer_2]

    oa_override = None
    with st.sidebar.expander("⚙️ Monthly OA Override"):
        if st.checkbox("Enter combined OA manually"):
            oa_override = float(st.number_input("Combined Monthly OA", min_value=0, value=0, step=50))

    plan = summarise_plan(
        buyers,
        config["sale"],
        config["funds"],
        config["loan_settings"],
        monthly_oa_override=oa_override,
    )
    logger.info(
        "Recomputed plan: eligible loan %s, total available %s",
        format_currency(plan.eligible_loan),
        format_currency(plan.total_available),
    )

    with tabs[0]:
        render_selling_tab(config, plan)

    with tabs[1]:
        render_buyers_tab(buyers, plan)

    with tabs[2]:
        render_buying_plan_tab(config, plan)

    with tabs[3]:
        render_grid_tab(config, plan)

    # Footer
    st.markdown("---")
    st.caption(
        "**Disclaimer:** This calculator provides estimates only and should not be considered financial advice. "
        "Actual loan eligibility, stamp duty and CPF usage are assessed by banks, HDB, IRAS and CPF Board. "
        "Please consult them or a financial advisor for official assessments."
    )
    st.caption(
        f"TDSR: {TDSR_LIMIT * 100:.0f}% | "
        f"MSR: {MSR_LIMIT * 100:.0f}% | "
        f"Interest Rate: {config['loan_settings'].nominal_interest_rate * 100:.1f}% p.a. | "
        f"Tenure: {config['loan_settings'].amortization_tenure_years} years"
    )


if __name__ == "__main__":
    main()
