from config import MAX_AGE, MONTHS_PER_YEAR, NUM_PATHS
from plan import PlanInput
from projection import ProjectionResult, run_projection


def clone_plan(plan: PlanInput, **overrides) -> PlanInput:
    base = plan.model_dump()
    base.update(overrides)
    return PlanInput(**base)


def summarise(result: ProjectionResult) -> dict:
    dec = result.decumulation
    months_funded = dec.months if dec.withdrawals.sum() > 0 else 0
    return {
        "pot_at_retirement": result.pot_at_retirement or 0.0,
        "months_funded": months_funded,
        "first_year_income": float(dec.annual_withdrawals[0]) if len(dec.annual_withdrawals) else 0.0,
        "lasts_to_max_age": months_funded >= (MAX_AGE - result.plan.retirement_age) * MONTHS_PER_YEAR,
    }


def compare(plan: PlanInput, variants: list[tuple[str, dict]], seed=None, num_paths: int = NUM_PATHS):
    """
    variants: list of (name, overrides-dict)
    returns: dict name -> summary, with the unedited plan under "Your plan"
    """
    res = {"Your plan": summarise(run_projection(plan, seed=seed, num_paths=num_paths))}
    for name, edits in variants:
        plan_v = clone_plan(plan, **edits)
        res[name] = summarise(run_projection(plan_v, seed=seed, num_paths=num_paths))
    return res
