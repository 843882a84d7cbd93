"""
One call from raw form values to everything the result pages draw.

`compute_full_projection` validates, runs the accumulation Monte Carlo, hands
the median pot at retirement to the drawdown simulation and builds the chart
frames. Every output comes back on the `ProjectionResult`; nothing is stored
between runs.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

import pandas as pd

import charts
from config import NUM_PATHS
from drawdown import DecumulationResult, DrawdownConfig, run_decumulation
from fund_presets import FUNDS
from plan import PlanInput, validate_plan
from simulation import AccumulationConfig, AccumulationResult, run_accumulation

logger = logging.getLogger(__name__)


@dataclass
class ProjectionResult:
    plan: PlanInput
    accumulation: AccumulationResult
    decumulation: DecumulationResult
    accumulation_chart: pd.DataFrame
    summary_table: pd.DataFrame
    decumulation_chart: pd.DataFrame
    monthly_income_chart: pd.DataFrame
    annual_income_chart: pd.DataFrame

    @property
    def pot_at_retirement(self) -> Optional[float]:
        final = self.accumulation.final
        return None if final is None else final["p50"]


def accumulation_config(plan: PlanInput, num_paths: int = NUM_PATHS, seed: Optional[int] = None,
                        funds=FUNDS) -> AccumulationConfig:
    fund = funds[plan.fund]
    return AccumulationConfig(
        current_pot=plan.current_pot,
        salary=plan.salary,
        contribution_pct=plan.contribution_rate,
        inflation_pct=plan.inflation_rate,
        mean_return=fund.mean_return,
        volatility=fund.volatility,
        years=plan.years_to_retirement,
        num_paths=num_paths,
        seed=seed,
    )


def drawdown_config(plan: PlanInput, starting_pot: Optional[float], funds=FUNDS) -> DrawdownConfig:
    return DrawdownConfig(
        starting_pot=starting_pot,
        fund_names=list(plan.decumulation_funds),
        drawdown_type=plan.drawdown_type,
        drawdown_value=plan.drawdown_value,
        inflation_pct=plan.inflation_rate,
        age_to_low_risk_fund=plan.age_to_low_risk_fund,
        retirement_age=plan.retirement_age,
        state_pension=plan.state_pension,
        custom_state_pension=plan.custom_state_pension,
        funds=funds,
    )


def run_projection(plan: PlanInput, seed: Optional[int] = None, num_paths: int = NUM_PATHS) -> ProjectionResult:
    acc = run_accumulation(accumulation_config(plan, num_paths=num_paths, seed=seed))
    start_pot = None if acc.final is None else acc.final["p50"]
    dec = run_decumulation(drawdown_config(plan, start_pot))

    logger.info(
        "Projection: age %d -> %d, median pot %s, drawdown lasts %d months",
        plan.age, plan.retirement_age,
        "n/a" if start_pot is None else f"£{start_pot:,.0f}", dec.months,
    )
    return ProjectionResult(
        plan=plan,
        accumulation=acc,
        decumulation=dec,
        accumulation_chart=charts.accumulation_frame(acc, plan.age),
        summary_table=charts.summary_table(acc),
        decumulation_chart=charts.decumulation_frame(dec, plan.retirement_age),
        monthly_income_chart=charts.monthly_income_frame(dec, plan.retirement_age),
        annual_income_chart=charts.annual_income_frame(dec, plan.retirement_age),
    )


def compute_full_projection(raw: Mapping, seed: Optional[int] = None,
                            num_paths: int = NUM_PATHS) -> Tuple[Optional[ProjectionResult], Dict[str, str]]:
    plan, errors = validate_plan(raw)
    if errors:
        logger.info("Projection not run: %d invalid field(s): %s", len(errors), ", ".join(sorted(errors)))
        return None, errors
    return run_projection(plan, seed=seed, num_paths=num_paths), {}
