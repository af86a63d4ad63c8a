"""
Singapore Property Transition Planner - Charts

Plotly chart generators for visualizing sale proceeds, loan capacity
and the affordability grid.
"""

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from calculations import (
    PlanSummary,
    PriceGridRow,
    SaleProfile,
    SaleProceedsResult,
    format_currency,
    format_runway,
)
from constants import RUNWAY_DISPLAY_CAP_YEARS


# =============================================================================
# COLOR SCHEME
# =============================================================================

COLORS = {
    "primary": "#1f77b4",      # Blue
    "secondary": "#ff7f0e",    # Orange
    "success": "#2ca02c",      # Green
    "danger": "#d62728",       # Red
    "warning": "#ffbb33",      # Yellow
    "info": "#17becf",         # Cyan
    "cpf": "#9467bd",          # Purple (for CPF)
    "cash": "#8c564b",         # Brown (for Cash)
    "loan": "#1f77b4",         # Blue (for Loan)
    "affordable": "rgba(44, 160, 44, 0.6)",
    "unaffordable": "rgba(214, 39, 40, 0.6)",
}


# =============================================================================
# SALE PROCEEDS WATERFALL
# =============================================================================

def create_sale_proceeds_chart(sale: SaleProfile, proceeds: SaleProceedsResult) -> go.Figure:
    """
    Create a waterfall from selling price down to cash from sale.

    Shows:
    - Selling price
    - Outstanding loan, CPF refunds, legal and agent fees as deductions
    - Cash from sale as the closing total
    """
    labels = ["Selling Price", "Outstanding Loan"]
    values = [sale.sale_price, -sale.outstanding_loan]

    for i, refund in enumerate(proceeds.cpf_refund, start=1):
        labels.append(f"CPF Refund (Buyer {i})")
        values.append(-refund)

    labels += ["Legal Fees", "Agent Fee (incl. GST)", "Cash from Sale"]
    values += [-sale.legal_fees, -proceeds.selling_agent_fee, proceeds.cash_from_sale]

    measures = ["absolute"] + ["relative"] * (len(values) - 2) + ["total"]

    fig = go.Figure(go.Waterfall(
        x=labels,
        y=values,
        measure=measures,
        text=[format_currency(v) for v in values],
        textposition="outside",
        increasing=dict(marker=dict(color=COLORS["success"])),
        decreasing=dict(marker=dict(color=COLORS["danger"])),
        totals=dict(marker=dict(color=COLORS["primary"])),
        hovertemplate="%{x}<br>$%{y:,.0f}<extra></extra>",
    ))

    fig.update_layout(
        title="Selling Financial Plan",
        yaxis_title="Amount ($)",
        height=400,
        showlegend=False,
    )

    fig.update_yaxes(tickformat="$,.0f")

    return fig


# =============================================================================
# LOAN CAPACITY CHART
# =============================================================================

def create_loan_capacity_chart(plan: PlanSummary) -> go.Figure:
    """
    Create a grouped bar chart of each buyer's loan ceilings.

    The MSR bar only appears when the MSR limit applies.
    """
    buyers = [f"Buyer {i}" for i in range(1, len(plan.buyers) + 1)]

    fig = go.Figure()

    fig.add_trace(go.Bar(
        x=buyers,
        y=[b.max_loan_without_existing_debt for b in plan.buyers],
        name="TDSR (w/o other loans)",
        marker_color=COLORS["info"],
        hovertemplate="%{x}<br>$%{y:,.0f}<extra></extra>",
    ))

    fig.add_trace(go.Bar(
        x=buyers,
        y=[b.max_loan_with_existing_debt for b in plan.buyers],
        name="TDSR (w/ other loans)",
        marker_color=COLORS["primary"],
        hovertemplate="%{x}<br>$%{y:,.0f}<extra></extra>",
    ))

    if any(b.max_loan_under_mortgage_service_limit is not None for b in plan.buyers):
        fig.add_trace(go.Bar(
            x=buyers,
            y=[b.max_loan_under_mortgage_service_limit or 0 for b in plan.buyers],
            name="MSR",
            marker_color=COLORS["secondary"],
            hovertemplate="%{x}<br>$%{y:,.0f}<extra></extra>",
        ))

    fig.add_hline(
        y=plan.eligible_loan,
        line=dict(color=COLORS["success"], width=2, dash="dash"),
        annotation_text=f"Eligible Loan: {format_currency(plan.eligible_loan)}",
        annotation_position="right",
    )

    fig.update_layout(
        title="Maximum Loan by Buyer",
        barmode="group",
        yaxis_title="Loan Amount ($)",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        height=400,
    )

    fig.update_yaxes(tickformat="$,.0f")

    return fig


# =============================================================================
# AFFORDABILITY GRID CHART
# =============================================================================

def create_affordability_grid_chart(
    rows: list[PriceGridRow],
    total_available: float,
    grant_amount: float = 0
) -> go.Figure:
    """
    Create a bar chart of upfront cash + CPF required at each price.

    Bars are green where the price is affordable and red otherwise, with
    the funds available drawn as a reference line.
    """
    prices = [row.price for row in rows]

    fig = go.Figure()

    fig.add_trace(go.Bar(
        x=prices,
        y=[row.cash_deposit for row in rows],
        name="Cash Deposit",
        marker_color=COLORS["cash"],
        hovertemplate="Price $%{x:,.0f}<br>Cash: $%{y:,.0f}<extra></extra>",
    ))

    fig.add_trace(go.Bar(
        x=prices,
        y=[row.cpf_deposit for row in rows],
        name="CPF Deposit",
        marker_color=[
            COLORS["affordable"] if row.affordable else COLORS["unaffordable"]
            for row in rows
        ],
        hovertemplate="Price $%{x:,.0f}<br>CPF: $%{y:,.0f}<extra></extra>",
    ))

    funds = total_available + grant_amount
    fig.add_hline(
        y=funds,
        line=dict(color=COLORS["primary"], width=2, dash="dash"),
        annotation_text=f"Available: {format_currency(funds)}",
        annotation_position="right",
    )

    fig.update_layout(
        title="Upfront Required by Purchase Price",
        barmode="stack",
        xaxis_title="Purchase Price ($)",
        yaxis_title="Upfront Required ($)",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        height=450,
    )

    fig.update_xaxes(tickformat="$,.0f")
    fig.update_yaxes(tickformat="$,.0f")

    return fig


# =============================================================================
# MONTHLY CASH FLOW CHART
# =============================================================================

def create_cash_flow_chart(rows: list[PriceGridRow]) -> go.Figure:
    """
    Create a dual-axis chart of monthly instalment against CPF runway.

    Runway is clipped at the display cap so an open-ended runway plots as
    a flat line rather than off the chart.
    """
    prices = [row.price for row in rows]
    runways = [min(row.cpf_runway_years, RUNWAY_DISPLAY_CAP_YEARS) for row in rows]

    fig = make_subplots(specs=[[{"secondary_y": True}]])

    fig.add_trace(
        go.Scatter(
            x=prices,
            y=[row.monthly_instalment for row in rows],
            name="Monthly Instalment",
            line=dict(color=COLORS["primary"], width=3),
            hovertemplate="Price $%{x:,.0f}<br>Instalment: $%{y:,.0f}<extra></extra>",
        ),
        secondary_y=False,
    )

    fig.add_trace(
        go.Scatter(
            x=prices,
            y=[row.monthly_cash_top_up for row in rows],
            name="Cash Top-up",
            line=dict(color=COLORS["danger"], width=2),
            hovertemplate="Price $%{x:,.0f}<br>Top-up: $%{y:,.0f}<extra></extra>",
        ),
        secondary_y=False,
    )

    fig.add_trace(
        go.Scatter(
            x=prices,
            y=runways,
            name="CPF Runway",
            line=dict(color=COLORS["cpf"], width=2, dash="dot"),
            customdata=[format_runway(row.cpf_runway_years) for row in rows],
            hovertemplate="Price $%{x:,.0f}<br>Runway: %{customdata}<extra></extra>",
        ),
        secondary_y=True,
    )

    if rows:
        fig.add_hline(
            y=rows[0].monthly_oa_contribution,
            line=dict(color=COLORS["success"], width=2, dash="dash"),
            annotation_text=f"Monthly OA: {format_currency(rows[0].monthly_oa_contribution)}",
            annotation_position="right",
            secondary_y=False,
        )

    fig.update_layout(
        title="Monthly Cash Flow by Purchase Price",
        xaxis_title="Purchase Price ($)",
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        height=450,
    )

    fig.update_xaxes(tickformat="$,.0f")
    fig.update_yaxes(title_text="Monthly Amount ($)", tickformat="$,.0f", secondary_y=False)
    fig.update_yaxes(title_text="Runway (Years)", range=[0, RUNWAY_DISPLAY_CAP_YEARS + 5], secondary_y=True)

    return fig


# =============================================================================
# AFFORDABILITY TABLE (for display)
# =============================================================================

def create_grid_table_data(rows: list[PriceGridRow]) -> list[dict]:
    """
    Generate data for the affordability table.

    Returns list of dicts with formatted values, one per price.
    """
    table_data = []
    for row in rows:
        table_data.append({
            "Price": format_currency(row.price),
            "BSD": format_currency(row.stamp_duty),
            "Agent Fee": format_currency(row.buyer_agent_fee),
            "Cash Deposit": format_currency(row.cash_deposit),
            "CPF Deposit": format_currency(row.cpf_deposit),
            "Upfront": format_currency(row.upfront_required),
            f"{row.loan_to_value_ratio * 100:.0f}% Loan": format_currency(row.loan_at_ltv_cap),
            "Shortfall": format_currency(row.loan_shortfall),
            "Add. TDSR": format_currency(row.shortfall_service_equivalent),
            "Pledge": format_currency(row.pledge_amount),
            "Show Fund": format_currency(row.show_fund_amount),
            "Instalment": format_currency(row.monthly_instalment),
            "Monthly OA": format_currency(row.monthly_oa_contribution),
            "Cash Top-up": format_currency(row.monthly_cash_top_up),
            "Runway": format_runway(row.cpf_runway_years),
            "Affordable": "✅" if row.affordable else "❌",
        })

    return table_data
