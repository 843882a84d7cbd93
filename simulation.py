import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from config import NUM_PATHS, PERCENTILES

logger = logging.getLogger(__name__)


@dataclass
class AccumulationConfig:
    current_pot: float
    salary: float
    contribution_pct: float        # % of salary paid in each year
    inflation_pct: float           # salary growth, % per year
    mean_return: float
    volatility: float
    years: int
    num_paths: int = NUM_PATHS
    seed: Optional[int] = None


@dataclass
class AccumulationResult:
    p25: np.ndarray
    p50: np.ndarray
    p75: np.ndarray

    @property
    def years(self) -> int:
        return len(self.p50)

    @property
    def final(self):
        if self.years == 0:
            return None
        return {"p25": float(self.p25[-1]), "p50": float(self.p50[-1]), "p75": float(self.p75[-1])}


def nearest_rank_percentile(sorted_values: np.ndarray, q: float, axis: int = 0):
    """
    Value at index floor(q * n) of an ascending sample (no interpolation).
    With 1000 paths the median is the 501st smallest value, not the midpoint average.
    """
    n = sorted_values.shape[axis]
    idx = min(int(math.floor(q * n)), n - 1)
    return np.take(sorted_values, idx, axis=axis)


def _draw_returns(mu: float, vol: float, shape, rng) -> np.ndarray:
    # Uniform band of half-width `vol` around the mean. Not a normal model:
    # kept as-is so runs stay comparable with earlier versions of the tool.
    return mu + vol * rng.uniform(-1.0, 1.0, size=shape)


def simulate_pots(cfg: AccumulationConfig) -> np.ndarray:
    """
    Year-end pot values for every path, shape (num_paths, years).
    Contribution goes in first, the year's return applies to pot + contribution,
    then salary rises with inflation for the following year.
    """
    years = max(0, int(cfg.years))
    rng = np.random.default_rng(cfg.seed)
    returns = _draw_returns(cfg.mean_return, cfg.volatility, (cfg.num_paths, years), rng)

    pots = np.zeros((cfg.num_paths, years))
    pot = np.full(cfg.num_paths, float(cfg.current_pot))
    salary = float(cfg.salary)
    contrib_rate = cfg.contribution_pct / 100.0
    salary_growth = 1 + cfg.inflation_pct / 100.0

    for year in range(years):
        contribution = salary * contrib_rate
        pot = (pot + contribution) * (1 + returns[:, year])
        pots[:, year] = pot
        salary *= salary_growth
    return pots


def run_accumulation(cfg: AccumulationConfig) -> AccumulationResult:
    pots = simulate_pots(cfg)
    if pots.shape[1] == 0:
        logger.debug("No years to retirement; accumulation skipped")
        empty = np.zeros(0)
        return AccumulationResult(p25=empty, p50=empty.copy(), p75=empty.copy())

    ranked = np.sort(pots, axis=0)
    p25, p50, p75 = (nearest_rank_percentile(ranked, q) for q in PERCENTILES)

    logger.debug(
        "Accumulation: %d paths x %d years, final p25/p50/p75 = %.0f / %.0f / %.0f",
        cfg.num_paths, pots.shape[1], p25[-1], p50[-1], p75[-1],
    )
    return AccumulationResult(p25=p25, p50=p50, p75=p75)
