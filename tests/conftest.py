import pytest

from plan import validate_plan


@pytest.fixture
def raw_plan():
    """Form values as the browser sends them (strings)."""
    return {
        "age": "30",
        "retirement_age": "65",
        "salary": "30000",
        "current_pot": "10000",
        "contribution_rate": "10",
        "inflation_rate": "2",
        "fund": "Future Advantage 5",
        "decumulation_funds": ["Future Advantage 1", "Future Advantage 3", "Future Advantage 5"],
        "age_to_low_risk_fund": "75",
        "drawdown_type": "percentage",
        "drawdown_percentage": "4",
        "state_pension": "standard",
    }


@pytest.fixture
def plan(raw_plan):
    parsed, errors = validate_plan(raw_plan)
    assert errors == {}
    return parsed
