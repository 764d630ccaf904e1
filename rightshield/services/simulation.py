import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from rightshield.core.errors import InvalidInputError
from rightshield.models.schemas import (
    ChangeImpact,
    ChangeProposal,
    ScoreSet,
    SimulationResult,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# 1. CATEGORY MAP
# ---------------------------------------------------------

OVERALL_FIELD = "rights_shield_score"

CATEGORY_FIELDS: Dict[str, str] = {
    "financial": "financial_fairness_score",
    "termination": "termination_flexibility_score",
    "privacy": "privacy_data_score",
    "liability": "legal_liability_score",
    "ethics": "ethics_fairness_score",
}

# Each proposal kind touches exactly one category.
KIND_CATEGORY: Dict[str, str] = {
    "notice_period": "termination",
    "auto_renewal": "termination",
    "penalty_amount": "financial",
    "liability_cap": "liability",
}

NO_IMPACT_EXPLANATION = "No significant impact on overall fairness."

# ---------------------------------------------------------
# 2. Helpers
# ---------------------------------------------------------

def clamp(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def _tidy(value: float):
    # 80.0 -> 80 so the wire format stays integral where it can
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value

def _as_number(value: Any, kind: str, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{kind}: {field} must be a number, got {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        raise InvalidInputError(f"{kind}: {field} is out of range") from None
    if not finite:
        raise InvalidInputError(f"{kind}: {field} must be finite")
    return float(value)

def _as_bool(value: Any, kind: str, field: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidInputError(f"{kind}: {field} must be true or false, got {value!r}")
    return value

def _fmt(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

# ---------------------------------------------------------
# 3. Impact Estimator
# ---------------------------------------------------------

def estimate_impact(proposal: ChangeProposal) -> float:
    """
    Signed score delta for one proposed change, bounded per kind:
      notice_period   [-20, 20]  half a point per day of notice removed
      penalty_amount  [-25, 25]  30 points per 100% of penalty removed
      auto_renewal    +/-15      removing renewal helps, adding it hurts
      liability_cap   +/-10      only a raised cap counts as an improvement
    Unknown kinds have no impact.
    """
    kind = proposal.type

    if kind == "notice_period":
        old = _as_number(proposal.old_value, kind, "oldValue")
        new = _as_number(proposal.new_value, kind, "newValue")
        return clamp(-20, 20, (old - new) * 0.5)

    if kind == "penalty_amount":
        old = _as_number(proposal.old_value, kind, "oldValue")
        new = _as_number(proposal.new_value, kind, "newValue")
        if old == 0:
            logger.warning("[SIM] penalty_amount with oldValue=0; relative change undefined, delta set to 0")
            return 0.0
        return clamp(-25, 25, ((old - new) / old) * 30)

    if kind == "auto_renewal":
        old = _as_bool(proposal.old_value, kind, "oldValue")
        new = _as_bool(proposal.new_value, kind, "newValue")
        if old and not new:
            return 15.0
        if new and not old:
            return -15.0
        return 0.0

    if kind == "liability_cap":
        old = _as_number(proposal.old_value, kind, "oldValue")
        new = _as_number(proposal.new_value, kind, "newValue")
        # An unchanged cap scores the same as a lowered one.
        return 10.0 if new > old else -10.0

    return 0.0

def category_for(proposal: ChangeProposal) -> Optional[str]:
    return KIND_CATEGORY.get(proposal.type)

# ---------------------------------------------------------
# 4. Explanation
# ---------------------------------------------------------

def describe_change(proposal: ChangeProposal, positive: bool) -> str:
    kind = proposal.type
    new = _fmt(proposal.new_value)

    if kind == "notice_period":
        return (f"Reducing notice period to {new} days increases flexibility" if positive
                else f"Increasing notice period to {new} days reduces flexibility")
    if kind == "penalty_amount":
        return (f"Lowering penalty to ${new} improves financial protection" if positive
                else f"Raising penalty to ${new} increases financial risk")
    if kind == "auto_renewal":
        return ("Removing auto-renewal gives you more control" if positive
                else "Adding auto-renewal reduces your control")

    return f"{kind} changed from {_fmt(proposal.old_value)} to {new}"

def build_explanation(scored: List[Tuple[ChangeProposal, float]]) -> str:
    improvements = [describe_change(p, True) for p, delta in scored if delta > 0]
    concerns = [describe_change(p, False) for p, delta in scored if delta < 0]

    if not improvements and not concerns:
        return NO_IMPACT_EXPLANATION

    sections = []
    if improvements:
        sections.append("Improvements: " + ", ".join(improvements))
    if concerns:
        sections.append("Concerns: " + ", ".join(concerns))
    return ". ".join(sections)

# ---------------------------------------------------------
# 5. Score Aggregator
# ---------------------------------------------------------

def recompute_overall(scores: Dict[str, Any]) -> int:
    values = [scores[f] for f in CATEGORY_FIELDS.values()]
    return round_half_up(sum(values) / len(values))

def apply_changes(baseline: ScoreSet, proposals: List[ChangeProposal]) -> SimulationResult:
    """
    Applies proposals in order to a copy of `baseline`. Each delta lands on
    its kind's category and that category is clamped to [0, 100]; the overall
    score is then re-derived from the five categories. `baseline` is never
    modified. Invalid proposal values fail the whole call before any result
    is built.
    """
    if baseline is None:
        raise InvalidInputError("originalScores is required")
    if proposals is None:
        raise InvalidInputError("changes is required")

    # Validate everything first so failures are all-or-nothing.
    scored = [(p, estimate_impact(p)) for p in proposals]

    scores = baseline.model_dump()
    total_impact = 0.0
    impacts: List[ChangeImpact] = []

    for proposal, delta in scored:
        category = category_for(proposal)
        if category is not None:
            field = CATEGORY_FIELDS[category]
            scores[field] = _tidy(clamp(0, 100, scores[field] + delta))
        else:
            logger.info("[SIM] ignoring unknown change type %r", proposal.type)
        total_impact += abs(delta)
        impacts.append(ChangeImpact(type=proposal.type, category=category, delta=delta))

    scores[OVERALL_FIELD] = recompute_overall(scores)

    logger.info("[SIM] applied %d change(s), total impact %.1f", len(scored), total_impact)

    return SimulationResult(
        simulated_scores=ScoreSet(**scores),
        total_impact=total_impact,
        explanation=build_explanation(scored),
        impacts=impacts,
    )
