from fastapi import APIRouter, Depends, Request

from rightshield.core.config import Settings, get_settings
from rightshield.core.errors import error_response
from rightshield.models.schemas import AnalyzeRequest
from rightshield.routers.deps import bearer_token, read_model
from rightshield.services.analysis import analyze_document

router = APIRouter()

@router.post("/analyze")
async def analyze_route(request: Request, config: Settings = Depends(get_settings)):
    """
    Scores a document with the LLM and stores the result when persistence
    is configured.
    """
    try:
        req = await read_model(request, AnalyzeRequest)
        return await analyze_document(config, req.document_id, req.content, bearer_token(request))
    except Exception as e:
        return error_response(e)
