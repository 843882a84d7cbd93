import logging
import math
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

import numpy as np

from config import DEPLETED_BELOW, MAX_AGE, MONTHS_PER_YEAR, STATE_PENSION_ANNUAL
from fund_presets import FUNDS, FundProfile

logger = logging.getLogger(__name__)


@dataclass
class DrawdownConfig:
    starting_pot: Optional[float]
    fund_names: Sequence[str]          # position 0 = low risk, drawdown fund
    drawdown_type: str                 # "percentage" | "fixed" | "initial_percentage"
    drawdown_value: float
    inflation_pct: float
    age_to_low_risk_fund: int
    retirement_age: int
    state_pension: str = "none"        # "none" | "standard" | "custom"
    custom_state_pension: Optional[float] = None
    max_age: int = MAX_AGE
    funds: Mapping[str, FundProfile] = field(default_factory=lambda: FUNDS)
    standard_state_pension: float = STATE_PENSION_ANNUAL


@dataclass
class DecumulationResult:
    fund_names: list
    fund_balances: np.ndarray              # (num_funds, months)
    withdrawals: np.ndarray                # per month
    annual_withdrawals: np.ndarray         # per year (last one may be partial)
    state_pension_monthly: Optional[np.ndarray] = None
    state_pension_annual: Optional[np.ndarray] = None

    @property
    def months(self) -> int:
        return len(self.withdrawals)

    @property
    def total_balance(self) -> np.ndarray:
        return self.fund_balances.sum(axis=0)


def _valid_start(pot) -> bool:
    if pot is None or isinstance(pot, bool):
        return False
    try:
        pot = float(pot)
    except (TypeError, ValueError):
        return False
    return math.isfinite(pot) and pot > 0


def _pension_start(cfg: DrawdownConfig) -> Optional[float]:
    if cfg.state_pension == "standard":
        return float(cfg.standard_state_pension)
    if cfg.state_pension == "custom":
        return float(cfg.custom_state_pension or 0.0)
    if cfg.state_pension == "none":
        return None
    raise ValueError(f"Unknown state pension option: {cfg.state_pension!r}")


def empty_result(cfg: DrawdownConfig) -> DecumulationResult:
    with_pension = cfg.state_pension != "none"
    return DecumulationResult(
        fund_names=list(cfg.fund_names),
        fund_balances=np.zeros((len(cfg.fund_names), 1)),
        withdrawals=np.zeros(1),
        annual_withdrawals=np.zeros(1),
        state_pension_monthly=np.zeros(1) if with_pension else None,
        state_pension_annual=np.zeros(1) if with_pension else None,
    )


def rebalance_active(pots: list) -> None:
    """Spread the combined pot evenly over funds that still hold money."""
    active = [i for i, p in enumerate(pots) if p > 0]
    if len(active) > 1:
        share = sum(pots) / len(active)
        for i in active:
            pots[i] = share


def consolidate_next(pots: list, moved: list, withdrawal: float) -> Optional[int]:
    """
    Merge the first unmoved fund with money into fund 0 when fund 0 holds less
    than a year of withdrawals. At most one fund per call. Returns the merged index.
    """
    for i in range(1, len(pots)):
        if moved[i] or pots[i] <= 0:
            continue
        if pots[0] < MONTHS_PER_YEAR * withdrawal:
            pots[0] += pots[i]
            pots[i] = 0.0
            moved[i] = True
            return i
        return None
    return None


def derisk_all(pots: list, moved: list) -> None:
    for i in range(1, len(pots)):
        pots[0] += pots[i]
        pots[i] = 0.0
        moved[i] = True


def run_decumulation(cfg: DrawdownConfig) -> DecumulationResult:
    """
    Month-by-month drawdown from retirement to `max_age` or until the pot runs dry.

    Income is always paid from fund 0. The other funds stay invested, get
    rebalanced with fund 0 at each year end, feed fund 0 one at a time when it
    drops below a year's income, and are swept into it entirely once the
    low-risk switch age is reached.
    """
    if not _valid_start(cfg.starting_pot):
        logger.warning("Decumulation skipped: starting pot %r is not a positive number", cfg.starting_pot)
        return empty_result(cfg)

    n = len(cfg.fund_names)
    start = float(cfg.starting_pot)
    pots = [start / n] * n
    # Linear monthly rate; not (1 + r) ** (1/12) - 1.
    monthly_returns = [cfg.funds[name].mean_return / MONTHS_PER_YEAR for name in cfg.fund_names]
    moved = [False] * n
    inflation = 1 + cfg.inflation_pct / 100.0

    if cfg.drawdown_type == "percentage":
        monthly_rate = cfg.drawdown_value / 100.0 / MONTHS_PER_YEAR
        fixed_monthly = None
    elif cfg.drawdown_type == "fixed":
        monthly_rate = None
        fixed_monthly = float(cfg.drawdown_value)
    elif cfg.drawdown_type == "initial_percentage":
        monthly_rate = None
        fixed_monthly = start * cfg.drawdown_value / 100.0 / MONTHS_PER_YEAR
    else:
        raise ValueError(f"Unknown drawdown type: {cfg.drawdown_type!r}")

    pension_annual = _pension_start(cfg)
    pension_monthly = None if pension_annual is None else pension_annual / MONTHS_PER_YEAR

    max_months = (cfg.max_age - cfg.retirement_age) * MONTHS_PER_YEAR
    balances = [[] for _ in range(n)]
    withdrawals, annual_withdrawals = [], []
    pension_m_series, pension_a_series = [], []
    year_total = 0.0
    months = 0
    age = cfg.retirement_age

    while sum(pots) > 0 and months < max_months:
        total = sum(pots)
        wanted = total * monthly_rate if monthly_rate is not None else fixed_monthly
        withdrawal = max(0.0, min(wanted, pots[0]))

        pots[0] -= withdrawal
        year_total += withdrawal

        pots = [max(0.0, p * (1 + r)) for p, r in zip(pots, monthly_returns)]

        year_end = months % MONTHS_PER_YEAR == MONTHS_PER_YEAR - 1
        if year_end:
            rebalance_active(pots)

        if n > 1:
            if age >= cfg.age_to_low_risk_fund:
                derisk_all(pots, moved)
            else:
                consolidate_next(pots, moved, withdrawal)

        if year_end:
            annual_withdrawals.append(year_total)
            year_total = 0.0
            if fixed_monthly is not None:
                fixed_monthly *= inflation
            if pension_annual is not None:
                pension_monthly *= inflation
                pension_annual *= inflation

        for i in range(n):
            balances[i].append(pots[i])
        withdrawals.append(withdrawal)
        if pension_annual is not None:
            pension_m_series.append(pension_monthly)
            pension_a_series.append(pension_annual)

        if sum(pots) < DEPLETED_BELOW:
            logger.debug("Pot exhausted after %d months (age %d)", months + 1, age)
            break
        months += 1
        age = cfg.retirement_age + months // MONTHS_PER_YEAR

    if year_total > 0:
        annual_withdrawals.append(year_total)

    logger.debug(
        "Decumulation: %d funds, %d months, total drawn %.0f",
        n, len(withdrawals), sum(withdrawals),
    )
    return DecumulationResult(
        fund_names=list(cfg.fund_names),
        fund_balances=np.array(balances, dtype=float).reshape(n, len(withdrawals)),
        withdrawals=np.array(withdrawals, dtype=float),
        annual_withdrawals=np.array(annual_withdrawals, dtype=float),
        state_pension_monthly=None if pension_annual is None else np.array(pension_m_series, dtype=float),
        state_pension_annual=None if pension_annual is None else np.array(pension_a_series, dtype=float),
    )
