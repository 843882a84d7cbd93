import io
import json

import pandas as pd

from exporters import export_accumulation, export_decumulation, export_plan
from projection import run_projection


def test_plan_json_round_trips_fund_list(plan):
    name, blob = export_plan(plan)
    assert name == "plan.json"
    data = json.loads(blob)
    assert data["decumulation_funds"] == list(plan.decumulation_funds)
    assert data["drawdown_type"] == "percentage"


def test_csv_exports(plan):
    result = run_projection(plan, seed=2, num_paths=100)

    name, blob = export_accumulation(result.accumulation_chart)
    assert name.endswith(".csv")
    assert len(pd.read_csv(io.BytesIO(blob))) == 35

    name, blob = export_decumulation(result.decumulation_chart, result.monthly_income_chart)
    df = pd.read_csv(io.BytesIO(blob))
    assert len(df) == result.decumulation.months
    assert {"age", "state_pension", "drawdown_income"} <= set(df.columns)
