from typing import Optional

from fastapi import APIRouter, Depends, Query

from rightshield.core.config import Settings, get_settings
from rightshield.core.errors import error_response
from rightshield.services.benchmarks import fetch_benchmarks, summarize_benchmarks

router = APIRouter()

@router.get("/benchmarks")
async def benchmarks_route(
    document_type: Optional[str] = Query(None, alias="documentType"),
    value: Optional[float] = Query(None),
    metric: Optional[str] = Query(None),
    config: Settings = Depends(get_settings),
):
    try:
        rows = await fetch_benchmarks(config, document_type)
    except Exception as e:
        return error_response(e)
    return summarize_benchmarks(rows, value=value, metric=metric)
