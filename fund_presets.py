# Future Advantage fund range. Long-run nominal return estimates.
# Vol = annualized volatility, used as the half-width of the uniform return band.
# These are illustrations, not promises.
from dataclasses import dataclass


@dataclass(frozen=True)
class FundProfile:
    name: str
    mean_return: float
    volatility: float


FUNDS = {
    p.name: p for p in (
        FundProfile("Future Advantage 1", 0.025, 0.05),
        FundProfile("Future Advantage 2", 0.03, 0.0556),
        FundProfile("Future Advantage 3", 0.035, 0.0799),
        FundProfile("Future Advantage 4", 0.045, 0.1151),
        FundProfile("Future Advantage 5", 0.053, 0.1464),
    )
}

FUND_NAMES = list(FUNDS.keys())
MAX_DECUMULATION_FUNDS = 5
