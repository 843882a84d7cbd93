import numpy as np

from projection import compute_full_projection, run_projection


def test_end_to_end_scenario(raw_plan):
    result, errors = compute_full_projection(raw_plan, seed=42)
    assert errors == {}

    acc = result.accumulation
    assert acc.years == 35
    assert np.all(acc.p25 <= acc.p50) and np.all(acc.p50 <= acc.p75)
    assert result.pot_at_retirement == acc.p50[-1]

    dec = result.decumulation
    assert 0 < dec.months <= 420
    assert dec.fund_balances.shape[0] == 3
    assert dec.withdrawals[0] <= result.pot_at_retirement / 3
    # low-risk switch at 75 = month 120
    assert not dec.fund_balances[1:, 120:].any()


def test_frames_line_up_with_results(raw_plan):
    result, _ = compute_full_projection(raw_plan, seed=1, num_paths=200)
    assert len(result.accumulation_chart) == 35
    assert result.accumulation_chart["age"].iloc[0] == 30
    assert len(result.decumulation_chart) == result.decumulation.months
    assert result.decumulation_chart["age"].iloc[0] == 65
    assert len(result.annual_income_chart) == len(result.decumulation.annual_withdrawals)
    assert list(result.summary_table["final_pot"]) == [
        result.accumulation.p25[-1], result.accumulation.p50[-1], result.accumulation.p75[-1],
    ]


def test_invalid_input_runs_nothing(raw_plan, monkeypatch):
    import projection

    def boom(*args, **kwargs):
        raise AssertionError("simulation should not run")

    monkeypatch.setattr(projection, "run_accumulation", boom)
    raw_plan["age"] = "thirty"
    result, errors = compute_full_projection(raw_plan)
    assert result is None
    assert errors == {"age": "Current Age must be a valid number."}


def test_seeded_runs_are_repeatable(plan):
    a = run_projection(plan, seed=9, num_paths=100)
    b = run_projection(plan, seed=9, num_paths=100)
    np.testing.assert_array_equal(a.decumulation.withdrawals, b.decumulation.withdrawals)


def test_pot_under_a_pound_is_spent_in_one_month(raw_plan):
    raw_plan.update(current_pot="0", contribution_rate="0.0000001", salary="0.0000001")
    result, errors = compute_full_projection(raw_plan, seed=3, num_paths=50)
    assert errors == {}
    assert 0 < result.pot_at_retirement < 1
    assert result.decumulation.months == 1
    assert len(result.decumulation.annual_withdrawals) == 1
