from fastapi import APIRouter, Request

from rightshield.core.errors import error_response
from rightshield.models.schemas import SimulationRequest
from rightshield.routers.deps import read_model
from rightshield.services.simulation import apply_changes, round_half_up

router = APIRouter()

@router.post("/simulate")
async def simulate_changes(request: Request):
    """
    What-if scoring: applies proposed contract-term changes to a document's
    scores and returns the simulated scores with an explanation.
    """
    try:
        req = await read_model(request, SimulationRequest)
        result = apply_changes(req.original_scores, req.changes)
    except Exception as e:
        return error_response(e)

    return {
        "success": True,
        "simulatedScores": result.simulated_scores.model_dump(),
        "explanation": result.explanation,
        "totalImpact": round_half_up(result.total_impact),
        "impacts": [i.model_dump() for i in result.impacts],
    }
