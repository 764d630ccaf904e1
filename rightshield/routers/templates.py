from typing import Optional

from fastapi import APIRouter, Depends, Query

from rightshield.core.config import Settings, get_settings
from rightshield.core.errors import error_response
from rightshield.services.templates import fetch_templates

router = APIRouter()

@router.get("/templates")
async def templates_route(
    document_type: Optional[str] = Query(None, alias="documentType"),
    config: Settings = Depends(get_settings),
):
    try:
        templates = await fetch_templates(config, document_type)
    except Exception as e:
        return error_response(e)
    return {"success": True, "templates": [t.model_dump() for t in templates]}
