import logging

APP_NAME = "Future Advantage: Retirement Planner"

# Simulation constants
NUM_PATHS = 1000
PERCENTILES = (0.25, 0.50, 0.75)
MAX_AGE = 100                      # decumulation runs to this age or depletion
MONTHS_PER_YEAR = 12
DEPLETED_BELOW = 1.0               # pot under £1 counts as exhausted

# UK full new state pension (annual, today's money)
STATE_PENSION_ANNUAL = 11_960
STATE_PENSION_MONTHLY = STATE_PENSION_ANNUAL / 12

# Default form values (raw, as the form shows them)
DEFAULTS = {
    "age": 30,
    "retirement_age": 65,
    "salary": 30_000,
    "current_pot": 10_000,
    "contribution_rate": 10.0,        # % of salary
    "inflation_rate": 2.0,            # % per year, caps at 20
    "fund": "Future Advantage 5",

    # Decumulation
    "decumulation_funds": [
        "Future Advantage 1",          # low risk, drawdown fund
        "Future Advantage 3",
        "Future Advantage 5",
    ],
    "age_to_low_risk_fund": 75,
    "drawdown_type": "percentage",
    "drawdown_percentage": 4.0,
    "fixed_drawdown_amount": 1_000,
    "state_pension": "standard",
    "custom_state_pension": STATE_PENSION_ANNUAL,

    # Sims
    "num_paths": NUM_PATHS,
    "seed": -1,                       # -1 = fresh random run
}

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
