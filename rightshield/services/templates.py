import logging
from typing import Any, Dict, List, Optional

from rightshield.core.config import Settings
from rightshield.models.schemas import ContractTemplate
from rightshield.utils.store_client import select_rows, store_enabled

logger = logging.getLogger(__name__)

async def fetch_templates(config: Settings, document_type: Optional[str] = None) -> List[ContractTemplate]:
    """Verified templates, fairest first, optionally limited to one category."""
    if not store_enabled(config):
        logger.info("[TEMPLATES] store not configured; no templates available")
        return []
    match: Dict[str, Any] = {"category": document_type} if document_type else {}
    match["is_verified"] = True
    rows = await select_rows(config, "contract_templates", match=match, order="fairness_score", desc=True)
    return [ContractTemplate.model_validate(r) for r in rows]
