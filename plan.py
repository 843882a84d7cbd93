"""
Plan inputs and their validation.

The form hands us raw values (strings from text boxes, or numbers from
number widgets). `validate_plan` turns them into a `PlanInput` or a mapping of
field name -> message for the form to show next to each field. It never raises.

Validation runs in two stages. `PlanForm` first checks that every required
field is present and parses as a number (or is a known choice). Only if that
passes does `PlanInput` check ranges and relationships between fields, so a
blank age never turns into a confusing "retirement age must be greater than
current age".
"""

from typing import Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator, model_validator

from config import MAX_AGE
from fund_presets import FUNDS, MAX_DECUMULATION_FUNDS

DRAWDOWN_TYPES = {
    "percentage": "Percentage of pot",
    "fixed": "Fixed monthly amount",
    "initial_percentage": "Percentage of initial pot",
}

STATE_PENSION_OPTIONS = {
    "none": "No state pension",
    "standard": "Standard state pension",
    "custom": "Custom amount",
}

DrawdownType = Literal["percentage", "fixed", "initial_percentage"]
StatePension = Literal["none", "standard", "custom"]

MAX_INFLATION = 20.0

LABELS = {
    "age": "Current Age",
    "salary": "Salary",
    "current_pot": "Current Pot",
    "contribution_rate": "Contribution Rate",
    "retirement_age": "Retirement Age",
    "age_to_low_risk_fund": "Age to Low Risk Fund",
    "inflation_rate": "Inflation Rate",
    "drawdown_percentage": "Drawdown Percentage",
    "fixed_drawdown_amount": "Fixed Drawdown Amount",
    "custom_state_pension": "Custom State Pension",
    "fund": "Fund Selection",
    "decumulation_funds": "Decumulation Funds",
    "drawdown_type": "Drawdown Type",
    "state_pension": "State Pension",
}

NUMERIC_FIELDS = (
    "age", "salary", "current_pot", "contribution_rate", "retirement_age",
    "age_to_low_risk_fund", "inflation_rate",
)
CONDITIONAL_FIELDS = ("drawdown_percentage", "fixed_drawdown_amount", "custom_state_pension")

# Shown for any range failure on the field, whichever constraint tripped
RANGE_MESSAGES = {
    "age": "Current Age must be positive.",
    "salary": "Salary must be positive.",
    "current_pot": "Current Pot cannot be negative.",
    "contribution_rate": "Contribution Rate must be between 0 and 100%.",
    "inflation_rate": f"Inflation Rate must be between 0 and {MAX_INFLATION:g}%.",
    "drawdown_percentage": "Drawdown Percentage must be between 0 and 100%.",
    "fixed_drawdown_amount": "Fixed Drawdown Amount must be positive.",
    "custom_state_pension": "Custom State Pension must be positive.",
    "decumulation_funds": f"Choose between 1 and {MAX_DECUMULATION_FUNDS} decumulation funds.",
}


def drawdown_field(drawdown_type: str) -> str:
    """Form field that carries the drawdown parameter for a policy."""
    return "fixed_drawdown_amount" if drawdown_type == "fixed" else "drawdown_percentage"


def _used(field_name: str, data: dict) -> bool:
    if field_name == "custom_state_pension":
        return data.get("state_pension") == "custom"
    drawdown_type = data.get("drawdown_type")
    return drawdown_type in DRAWDOWN_TYPES and drawdown_field(drawdown_type) == field_name


def _blank_to_none(value):
    if isinstance(value, bool):
        raise ValueError("expected a number")
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _known_funds(names, label: str):
    if any(name not in FUNDS for name in names):
        raise ValueError(f"{label} must be one of the listed funds.")
    return names


class PlanForm(BaseModel):
    """Raw form values, parsed but not yet range-checked."""
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    # choices first: the conditional fields below look them up
    drawdown_type: DrawdownType
    state_pension: StatePension = "none"
    fund: str
    decumulation_funds: List[str]

    age: float
    salary: float
    current_pot: float
    contribution_rate: float
    retirement_age: float
    age_to_low_risk_fund: float
    inflation_rate: float

    drawdown_percentage: Optional[float] = Field(None, validate_default=True)
    fixed_drawdown_amount: Optional[float] = Field(None, validate_default=True)
    custom_state_pension: Optional[float] = Field(None, validate_default=True)

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def _clean_number(cls, v):
        return _blank_to_none(v)

    @field_validator(*CONDITIONAL_FIELDS, mode="before")
    @classmethod
    def _clean_if_used(cls, v, info: ValidationInfo):
        # a stale value in a field the chosen policy doesn't use is ignored
        return _blank_to_none(v) if _used(info.field_name, info.data) else None

    @field_validator(*CONDITIONAL_FIELDS)
    @classmethod
    def _required_if_used(cls, v, info: ValidationInfo):
        if v is None and _used(info.field_name, info.data):
            raise ValueError("required by the chosen option")
        return v

    @field_validator("fund")
    @classmethod
    def _fund_known(cls, v):
        return _known_funds([v], LABELS["fund"])[0]

    @field_validator("decumulation_funds")
    @classmethod
    def _funds_known(cls, v):
        return _known_funds(v, LABELS["decumulation_funds"])


def plan_rule_errors(values: Mapping) -> Dict[str, str]:
    """Checks that relate one field to another, keyed by the field to blame."""
    errors = {}
    if values["retirement_age"] <= values["age"]:
        errors["retirement_age"] = "Retirement Age must be greater than Current Age."
    elif values["retirement_age"] >= MAX_AGE:
        errors["retirement_age"] = f"Retirement Age must be below {MAX_AGE}."
    if values["age_to_low_risk_fund"] < values["retirement_age"]:
        errors["age_to_low_risk_fund"] = "Age to Low Risk Fund must be at least the Retirement Age."
    if values["drawdown_type"] != "fixed" and values["drawdown_value"] > 100:
        errors["drawdown_percentage"] = RANGE_MESSAGES["drawdown_percentage"]
    if values["state_pension"] == "custom" and values["custom_state_pension"] is None:
        errors["custom_state_pension"] = "Custom State Pension must be a valid number."
    return errors


class PlanInput(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    age: int = Field(gt=0)
    retirement_age: int
    salary: float = Field(gt=0)
    current_pot: float = Field(ge=0)
    contribution_rate: float = Field(gt=0, le=100)          # % of salary
    inflation_rate: float = Field(ge=0, le=MAX_INFLATION)   # % per year
    fund: str
    decumulation_funds: Tuple[str, ...] = Field(min_length=1, max_length=MAX_DECUMULATION_FUNDS)
    age_to_low_risk_fund: int
    drawdown_type: DrawdownType
    drawdown_value: float = Field(gt=0)     # % for the percentage rules, £/month for "fixed"
    state_pension: StatePension = "none"
    custom_state_pension: Optional[float] = Field(None, gt=0)

    @field_validator("fund")
    @classmethod
    def _fund_known(cls, v):
        return _known_funds([v], LABELS["fund"])[0]

    @field_validator("decumulation_funds")
    @classmethod
    def _funds_known(cls, v):
        return _known_funds(v, LABELS["decumulation_funds"])

    @model_validator(mode="after")
    def _check_rules(self) -> "PlanInput":
        errors = plan_rule_errors(self.model_dump())
        if errors:
            raise ValueError(" ".join(errors.values()))
        return self

    @property
    def years_to_retirement(self) -> int:
        return self.retirement_age - self.age


def _parse_message(name: str, err: dict) -> str:
    label = LABELS.get(name, name)
    if name in NUMERIC_FIELDS or name in CONDITIONAL_FIELDS:
        return f"{label} must be a valid number."
    if name == "drawdown_type":
        return f"{label} must be one of: {', '.join(DRAWDOWN_TYPES)}."
    if name == "state_pension":
        return f"{label} must be one of: {', '.join(STATE_PENSION_OPTIONS)}."
    if name == "decumulation_funds" and err["type"] == "list_type":
        return f"{label} must be a list of funds."
    return f"{label} must be one of the listed funds."


def _parse_form(raw: Mapping) -> Tuple[Optional[PlanForm], Dict[str, str]]:
    try:
        return PlanForm.model_validate(dict(raw)), {}
    except ValidationError as exc:
        errors = {}
        for err in exc.errors():
            name = str(err["loc"][0])
            errors.setdefault(name, _parse_message(name, err))
        return None, errors


def validate_plan(raw: Mapping) -> Tuple[Optional[PlanInput], Dict[str, str]]:
    """
    Parse and range-check raw form values.
    Returns (plan, {}) when everything is valid, otherwise (None, errors).
    """
    form, errors = _parse_form(raw)
    if errors:
        return None, errors

    custom = form.state_pension == "custom"
    values = {
        "age": int(form.age),
        "retirement_age": int(form.retirement_age),
        "salary": form.salary,
        "current_pot": form.current_pot,
        "contribution_rate": form.contribution_rate,
        "inflation_rate": form.inflation_rate,
        "fund": form.fund,
        "decumulation_funds": tuple(form.decumulation_funds),
        "age_to_low_risk_fund": int(form.age_to_low_risk_fund),
        "drawdown_type": form.drawdown_type,
        "drawdown_value": getattr(form, drawdown_field(form.drawdown_type)),
        "state_pension": form.state_pension,
        "custom_state_pension": form.custom_state_pension if custom else None,
    }
    try:
        return PlanInput(**values), {}
    except ValidationError as exc:
        errors = {}
        for err in exc.errors():
            if not err["loc"]:
                continue  # cross-field rules, collected in full below
            name = str(err["loc"][0])
            if name == "drawdown_value":
                name = drawdown_field(form.drawdown_type)
            errors.setdefault(name, RANGE_MESSAGES.get(name, err["msg"]))
        for name, message in plan_rule_errors(values).items():
            errors.setdefault(name, message)
        return None, errors
