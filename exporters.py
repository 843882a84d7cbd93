# exporters.py
import pandas as pd

from plan import PlanInput


def export_accumulation(df: pd.DataFrame) -> tuple[str, bytes]:
    return "accumulation_percentiles.csv", df.to_csv(index=False).encode()


def export_decumulation(balances: pd.DataFrame, income: pd.DataFrame) -> tuple[str, bytes]:
    """Monthly fund balances joined with the monthly income split."""
    df = balances.merge(income[["month", "state_pension", "drawdown_income"]], on="month", how="left")
    return "decumulation_monthly.csv", df.to_csv(index=False).encode()


def export_plan(plan: PlanInput) -> tuple[str, bytes]:
    return "plan.json", plan.model_dump_json(indent=2).encode()
