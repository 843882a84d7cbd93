# charts.py
import numpy as np
import pandas as pd
import plotly.graph_objects as go

from config import MONTHS_PER_YEAR
from drawdown import DecumulationResult
from simulation import AccumulationResult

FUND_COLOURS = ["purple", "orange", "teal", "steelblue", "olive"]
_LAYOUT = dict(hovermode="x unified", margin=dict(l=30, r=20, t=60, b=30))


def fund_label(position: int, name: str) -> str:
    if position == 0:
        return f"Low risk: {name}"
    return f"Fund {position + 1}: {name}"


def monthly_ages(base_age: int, n: int) -> np.ndarray:
    return base_age + np.arange(n) // MONTHS_PER_YEAR


def yearly_ages(base_age: int, n: int) -> np.ndarray:
    return base_age + np.arange(n)


# ---------- Frames ----------
def accumulation_frame(result: AccumulationResult, age: int) -> pd.DataFrame:
    return pd.DataFrame({
        "age": yearly_ages(age, result.years),
        "p25": result.p25,
        "p50": result.p50,
        "p75": result.p75,
    })


def summary_table(result: AccumulationResult) -> pd.DataFrame:
    final = result.final or {"p25": 0.0, "p50": 0.0, "p75": 0.0}
    return pd.DataFrame({
        "percentile": ["25th", "50th", "75th"],
        "final_pot": [final["p25"], final["p50"], final["p75"]],
    })


def decumulation_frame(result: DecumulationResult, retirement_age: int) -> pd.DataFrame:
    months = result.fund_balances.shape[1]
    df = pd.DataFrame({
        "month": np.arange(months),
        "age": monthly_ages(retirement_age, months),
    })
    for i, name in enumerate(result.fund_names):
        df[fund_label(i, name)] = result.fund_balances[i]
    return df


def monthly_income_frame(result: DecumulationResult, retirement_age: int) -> pd.DataFrame:
    n = result.months
    pension = result.state_pension_monthly if result.state_pension_monthly is not None else np.zeros(n)
    return pd.DataFrame({
        "month": np.arange(n),
        "age": monthly_ages(retirement_age, n),
        "state_pension": pension,
        "drawdown_income": result.withdrawals,
    })


def annual_income_frame(result: DecumulationResult, retirement_age: int) -> pd.DataFrame:
    n = len(result.annual_withdrawals)
    pension = np.zeros(n)
    series = result.state_pension_annual
    if series is not None and len(series):
        # running annual value at the first month of each year
        idx = np.minimum(np.arange(n) * MONTHS_PER_YEAR, len(series) - 1)
        pension = series[idx]
    return pd.DataFrame({
        "age": yearly_ages(retirement_age, n),
        "state_pension": pension,
        "drawdown_income": result.annual_withdrawals,
    })


# ---------- Figures ----------
def accumulation_figure(df: pd.DataFrame, retire_age: int = None) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=df["age"], y=df["p75"], mode="lines", name="75th percentile", line=dict(color="green")))
    fig.add_trace(go.Scatter(x=df["age"], y=df["p50"], mode="lines", name="50th percentile", line=dict(color="blue")))
    fig.add_trace(go.Scatter(x=df["age"], y=df["p25"], mode="lines", name="25th percentile", line=dict(color="red")))
    if retire_age is not None:
        fig.add_vline(x=retire_age, line_dash="dash", line_color="grey")
    fig.update_layout(title="Pot value up to retirement", xaxis_title="Age", yaxis_title="Pot value (£)", **_LAYOUT)
    return fig


def _stacked(fig: go.Figure, x, y, name: str, colour: str):
    fig.add_trace(go.Scatter(
        x=x, y=y, name=name, mode="lines", stackgroup="one",
        line=dict(color=colour, width=1),
    ))


def decumulation_figure(df: pd.DataFrame, switch_age: int = None) -> go.Figure:
    fig = go.Figure()
    fund_cols = [c for c in df.columns if c not in ("month", "age")]
    x = df["month"] / MONTHS_PER_YEAR + df["age"].iloc[0] if len(df) else df["age"]
    for i, col in enumerate(fund_cols):
        _stacked(fig, x, df[col], col, FUND_COLOURS[i % len(FUND_COLOURS)])
    if switch_age is not None:
        fig.add_vline(x=switch_age, line_dash="dash", line_color="green")
    fig.update_layout(title="Pot value in retirement, by fund", xaxis_title="Age", yaxis_title="Pot value (£)", **_LAYOUT)
    return fig


def income_figure(df: pd.DataFrame, title: str, yaxis_title: str) -> go.Figure:
    fig = go.Figure()
    if "month" in df.columns and len(df):
        x = df["month"] / MONTHS_PER_YEAR + df["age"].iloc[0]
    else:
        x = df["age"]
    _stacked(fig, x, df["state_pension"], "State pension", "green")
    _stacked(fig, x, df["drawdown_income"], "Drawdown income", "red")
    fig.update_layout(title=title, xaxis_title="Age", yaxis_title=yaxis_title, **_LAYOUT)
    return fig
