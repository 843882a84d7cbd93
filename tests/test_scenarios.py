from scenarios import clone_plan, compare


def test_clone_plan_applies_overrides_only(plan):
    later = clone_plan(plan, retirement_age=67, age_to_low_risk_fund=77)
    assert later.retirement_age == 67
    assert later.age_to_low_risk_fund == 77
    assert later.decumulation_funds == plan.decumulation_funds
    assert plan.retirement_age == 65


def test_compare_reports_each_variant(plan):
    res = compare(plan, [("Pay in more", {"contribution_rate": 15.0})], seed=5, num_paths=200)
    assert set(res) == {"Your plan", "Pay in more"}
    assert res["Pay in more"]["pot_at_retirement"] > res["Your plan"]["pot_at_retirement"]
    assert res["Your plan"]["months_funded"] <= 420
    assert res["Your plan"]["first_year_income"] > 0


def test_plan_lasting_to_max_age_is_flagged(plan):
    res = compare(plan, [("Draw less", {"drawdown_value": 1.0})], seed=5, num_paths=200)
    assert res["Draw less"]["months_funded"] == (100 - 65) * 12
    assert res["Draw less"]["lasts_to_max_age"] is True
