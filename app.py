# app.py
import streamlit as st
import pandas as pd

from config import APP_NAME, DEFAULTS, MAX_AGE, MONTHS_PER_YEAR, STATE_PENSION_ANNUAL, STATE_PENSION_MONTHLY, configure_logging
from ui import inject_css, header, helptext, show_errors
from fund_presets import FUNDS, FUND_NAMES, MAX_DECUMULATION_FUNDS
from plan import DRAWDOWN_TYPES, STATE_PENSION_OPTIONS, MAX_INFLATION
from projection import compute_full_projection
from charts import accumulation_figure, decumulation_figure, income_figure
from scenarios import compare
from exporters import export_accumulation, export_decumulation, export_plan

configure_logging()

# ------------- Page setup -------------
st.set_page_config(page_title=APP_NAME, page_icon="📈", layout="wide")
inject_css()
header(APP_NAME, "A demonstration tool. Not financial advice.")

with st.expander("How this app works (30 seconds)"):
    st.write("""
**Plain English version:**
- We simulate **1,000 possible futures** for your pension pot up to retirement, paying in a share of your salary each year.
- Your salary rises with inflation, and each year's fund return wobbles randomly around the fund's long-run average.
- The **median** pot at retirement is then split across your chosen retirement funds and drawn down month by month.
- Income is always paid from your low-risk fund. The other funds top it up when it runs low, and everything moves to low risk at the age you pick.
    """)

# ------------- Sidebar (inputs) -------------
st.sidebar.header("Accumulation")
age = st.sidebar.number_input("Current age", min_value=0, max_value=99, value=DEFAULTS["age"], step=1)
salary = st.sidebar.number_input("Current salary (£/yr)", min_value=0, value=DEFAULTS["salary"], step=1000)
current_pot = st.sidebar.number_input("Current pot (£)", min_value=0, value=DEFAULTS["current_pot"], step=1000)
contribution_rate = st.sidebar.number_input(
    "Contribution rate (% of salary)", value=DEFAULTS["contribution_rate"], step=0.5,
    help="Employee + employer, as a share of your salary.",
)
retirement_age = st.sidebar.number_input("Retirement age", min_value=1, max_value=MAX_AGE - 1, value=DEFAULTS["retirement_age"], step=1)
inflation_rate = st.sidebar.slider(
    "Inflation (%/yr)", 0.0, MAX_INFLATION, DEFAULTS["inflation_rate"], 0.1,
    help="Salary, fixed drawdowns and the state pension all rise by this rate.",
)
fund = st.sidebar.selectbox("Fund until retirement", FUND_NAMES, index=FUND_NAMES.index(DEFAULTS["fund"]))

st.sidebar.header("Decumulation")
num_funds = st.sidebar.slider("Number of retirement funds", 1, MAX_DECUMULATION_FUNDS, len(DEFAULTS["decumulation_funds"]))
decumulation_funds = []
for i in range(num_funds):
    default = DEFAULTS["decumulation_funds"][i] if i < len(DEFAULTS["decumulation_funds"]) else FUND_NAMES[-1]
    label = "Low risk, drawdown fund" if i == 0 else f"Fund {i + 1}"
    decumulation_funds.append(
        st.sidebar.selectbox(label, FUND_NAMES, index=FUND_NAMES.index(default), key=f"dec_fund_{i}")
    )
age_to_low_risk_fund = st.sidebar.number_input(
    "Age to move to low risk fund", min_value=1, max_value=100, value=DEFAULTS["age_to_low_risk_fund"], step=1,
)
drawdown_type = st.sidebar.selectbox(
    "Drawdown rule", list(DRAWDOWN_TYPES), format_func=DRAWDOWN_TYPES.get,
    help="Percentage of pot is recalculated monthly; the other two rise with inflation each year.",
)
if drawdown_type == "fixed":
    drawdown_input = {"fixed_drawdown_amount": st.sidebar.number_input(
        "Fixed monthly drawdown (£)", min_value=0, value=DEFAULTS["fixed_drawdown_amount"], step=50)}
else:
    drawdown_input = {"drawdown_percentage": st.sidebar.number_input(
        "Drawdown percentage (%/yr)", value=DEFAULTS["drawdown_percentage"], step=0.25)}

state_pension = st.sidebar.selectbox(
    "State pension", list(STATE_PENSION_OPTIONS), index=list(STATE_PENSION_OPTIONS).index(DEFAULTS["state_pension"]),
    format_func=STATE_PENSION_OPTIONS.get,
)
custom_state_pension = None
if state_pension == "custom":
    custom_state_pension = st.sidebar.number_input(
        "State pension (£/yr)", min_value=0, value=DEFAULTS["custom_state_pension"], step=100)

st.sidebar.header("Simulation")
seed = st.sidebar.number_input("Random seed (-1 = random)", value=DEFAULTS["seed"])

raw = {
    "age": age,
    "salary": salary,
    "current_pot": current_pot,
    "contribution_rate": contribution_rate,
    "retirement_age": retirement_age,
    "inflation_rate": inflation_rate,
    "fund": fund,
    "decumulation_funds": decumulation_funds,
    "age_to_low_risk_fund": age_to_low_risk_fund,
    "drawdown_type": drawdown_type,
    **drawdown_input,
    "state_pension": state_pension,
    "custom_state_pension": custom_state_pension,
}

# ------------- Fund assumptions -------------
with st.expander("Fund return assumptions"):
    st.dataframe(pd.DataFrame({
        "Fund": list(FUNDS),
        "Annual return (%)": [f.mean_return * 100 for f in FUNDS.values()],
        "Volatility (%)": [f.volatility * 100 for f in FUNDS.values()],
    }), hide_index=True, use_container_width=True)


@st.cache_data(show_spinner=False)
def run_cached(raw_dict, seed_value, num_paths):
    return compute_full_projection(raw_dict, seed=seed_value, num_paths=num_paths)


if st.sidebar.button("Run simulation", type="primary", use_container_width=True):
    st.session_state["ran"] = True
if not st.session_state.get("ran"):
    helptext("Fill in your details on the left and press **Run simulation**.")
    st.stop()

with st.spinner("Simulating futures…"):
    result, errors = run_cached(raw, None if seed == -1 else int(seed), DEFAULTS["num_paths"])

if errors:
    show_errors(errors)
    st.stop()

plan = result.plan

# ------------- Accumulation -------------
st.markdown("### 1) Accumulation phase")
helptext("Each line is a percentile across all simulated futures: a quarter of outcomes end below the red line, a quarter above the green.")
st.plotly_chart(accumulation_figure(result.accumulation_chart, plan.retirement_age), use_container_width=True)

st.markdown("**Final pot at retirement**")
st.dataframe(
    result.summary_table.rename(columns={"percentile": "Percentile", "final_pot": "Final pot at retirement (£)"}),
    hide_index=True, use_container_width=True,
    column_config={"Final pot at retirement (£)": st.column_config.NumberColumn(format="£%.0f")},
)

# ------------- Decumulation -------------
st.markdown("### 2) Decumulation phase")
helptext(f"Starting from the median pot of £{result.pot_at_retirement:,.0f}, split evenly across {len(plan.decumulation_funds)} fund(s).")
st.plotly_chart(decumulation_figure(result.decumulation_chart, plan.age_to_low_risk_fund), use_container_width=True)

dec = result.decumulation
years_funded = dec.months / MONTHS_PER_YEAR
if dec.months >= (MAX_AGE - plan.retirement_age) * MONTHS_PER_YEAR:
    st.success(f"Your pot lasts to age {MAX_AGE} ({years_funded:.0f} years of drawdown).")
else:
    st.warning(f"Your pot runs out after about {years_funded:.1f} years, at age {plan.retirement_age + dec.months // MONTHS_PER_YEAR}.")

st.markdown("### 3) Income in retirement")
if plan.state_pension == "standard":
    st.caption(f"State Pension is £{STATE_PENSION_ANNUAL:,} per year (£{STATE_PENSION_MONTHLY:,.2f} per month), rising with inflation.")
elif plan.state_pension == "custom":
    st.caption(f"State Pension is £{plan.custom_state_pension:,.0f} per year, rising with inflation.")
st.plotly_chart(income_figure(result.monthly_income_chart, "Monthly income", "£ per month"), use_container_width=True)
st.plotly_chart(income_figure(result.annual_income_chart, "Annual income", "£ per year"), use_container_width=True)

# ------------- Quick what-ifs -------------
st.markdown("### 4) Quick what-ifs")
a, b, c = st.columns(3)
extra_contrib = a.slider("Add to contribution rate (% pts)", 0.0, 10.0, 2.0, 0.5)
retire_later = b.slider("Retire later (years)", 0, 10, 2, 1)
lower_drawdown = c.slider("Draw less each month (%)", 0, 50, 10, 5)

if st.button("Run what-ifs"):
    variants = [
        ("Pay in more", {"contribution_rate": min(100.0, plan.contribution_rate + extra_contrib)}),
        ("Retire later", {
            "retirement_age": min(MAX_AGE - 1, plan.retirement_age + retire_later),
            "age_to_low_risk_fund": max(plan.age_to_low_risk_fund, min(MAX_AGE - 1, plan.retirement_age + retire_later)),
        }),
        ("Draw less", {"drawdown_value": plan.drawdown_value * (1 - lower_drawdown / 100.0)}),
    ]
    with st.spinner("Simulating what-ifs…"):
        results = compare(plan, variants, seed=None if seed == -1 else int(seed))
    st.dataframe(pd.DataFrame(results).T.rename(columns={
        "pot_at_retirement": "Median pot at retirement (£)",
        "months_funded": "Months of income",
        "first_year_income": "First-year drawdown (£)",
        "lasts_to_max_age": f"Lasts to {MAX_AGE}",
    }), use_container_width=True)

# ------------- Export -------------
st.markdown("### 5) Export")
name_acc, data_acc = export_accumulation(result.accumulation_chart)
st.download_button("⬇️ Download accumulation percentiles (CSV)", data_acc, file_name=name_acc, mime="text/csv")
name_dec, data_dec = export_decumulation(result.decumulation_chart, result.monthly_income_chart)
st.download_button("⬇️ Download monthly drawdown (CSV)", data_dec, file_name=name_dec, mime="text/csv")
name_plan, data_plan = export_plan(plan)
st.download_button("⬇️ Download your inputs (JSON)", data_plan, file_name=name_plan, mime="application/json")

st.markdown("---")
st.caption("Returns are drawn from a simple uniform band around each fund's average, not a full market model. It's a planning illustration, not personal advice.")
