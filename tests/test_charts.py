import numpy as np
import plotly.graph_objects as go

import charts
from drawdown import DecumulationResult
from simulation import AccumulationResult


def make_dec(months=26, with_pension=True):
    annual = np.array([12.0, 12.0, 2.0])[: -(-months // 12)]
    return DecumulationResult(
        fund_names=["Future Advantage 1", "Future Advantage 4"],
        fund_balances=np.vstack([np.arange(months, dtype=float), np.zeros(months)]),
        withdrawals=np.ones(months),
        annual_withdrawals=annual,
        state_pension_monthly=np.full(months, 100.0) if with_pension else None,
        state_pension_annual=np.repeat([1200.0, 1224.0, 1248.0], 12)[:months] if with_pension else None,
    )


def test_accumulation_frame_labels_each_year_from_current_age():
    acc = AccumulationResult(p25=np.array([1.0, 2.0]), p50=np.array([2.0, 3.0]), p75=np.array([3.0, 4.0]))
    df = charts.accumulation_frame(acc, age=30)
    assert list(df["age"]) == [30, 31]
    assert list(df.columns) == ["age", "p25", "p50", "p75"]


def test_summary_table_reads_final_year():
    acc = AccumulationResult(p25=np.array([1.0, 2.0]), p50=np.array([2.0, 3.0]), p75=np.array([3.0, 4.0]))
    table = charts.summary_table(acc)
    assert list(table["final_pot"]) == [2.0, 3.0, 4.0]

    empty = AccumulationResult(p25=np.zeros(0), p50=np.zeros(0), p75=np.zeros(0))
    assert list(charts.summary_table(empty)["final_pot"]) == [0.0, 0.0, 0.0]


def test_monthly_frames_label_by_whole_years_of_age():
    dec = make_dec(months=26)
    df = charts.decumulation_frame(dec, retirement_age=65)
    assert list(df["age"][:13]) == [65] * 12 + [66]
    assert df["age"].iloc[-1] == 67
    assert "Low risk: Future Advantage 1" in df.columns
    assert "Fund 2: Future Advantage 4" in df.columns

    income = charts.monthly_income_frame(dec, retirement_age=65)
    assert list(income["age"]) == list(df["age"])
    assert (income["state_pension"] == 100.0).all()


def test_annual_income_frame_samples_pension_at_start_of_each_year():
    df = charts.annual_income_frame(make_dec(months=26), retirement_age=65)
    assert list(df["age"]) == [65, 66, 67]
    assert list(df["state_pension"]) == [1200.0, 1224.0, 1248.0]
    assert list(df["drawdown_income"]) == [12.0, 12.0, 2.0]


def test_no_pension_gives_zero_column():
    dec = make_dec(months=24, with_pension=False)
    assert (charts.monthly_income_frame(dec, 65)["state_pension"] == 0).all()
    assert (charts.annual_income_frame(dec, 65)["state_pension"] == 0).all()


def test_figures_have_one_trace_per_series():
    dec = make_dec()
    assert len(charts.decumulation_figure(charts.decumulation_frame(dec, 65), switch_age=75).data) == 2
    fig = charts.income_figure(charts.annual_income_frame(dec, 65), "Annual income", "£")
    assert isinstance(fig, go.Figure)
    assert [t.name for t in fig.data] == ["State pension", "Drawdown income"]

    acc = AccumulationResult(p25=np.array([1.0]), p50=np.array([2.0]), p75=np.array([3.0]))
    assert len(charts.accumulation_figure(charts.accumulation_frame(acc, 30), retire_age=31).data) == 3
