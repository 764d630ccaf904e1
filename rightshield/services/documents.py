import logging
import time
from typing import Any, Dict, Optional

from rightshield.core.config import Settings
from rightshield.core.errors import StoreError
from rightshield.utils.store_client import get_user_id, insert_row, upload_file

logger = logging.getLogger(__name__)

DOCUMENTS_BUCKET = "documents"

def storage_name(filename: str, now: Optional[float] = None) -> str:
    # millisecond prefix keeps repeated uploads of one file apart
    stamp = int((time.time() if now is None else now) * 1000)
    return f"{stamp}-{filename}"

async def register_document(
    config: Settings,
    filename: str,
    content_type: Optional[str],
    data: bytes,
    token: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Stores the uploaded file and creates its `documents` row in the
    "processing" state. The returned row's id is what /analyze updates.
    """
    user_id = await get_user_id(config, token)
    path = await upload_file(config, DOCUMENTS_BUCKET, storage_name(filename), data, content_type)
    row = await insert_row(config, "documents", {
        "file_name": filename,
        "path": path,
        "size": len(data),
        "user_id": user_id,
        "processing_status": "processing",
    })
    if not row or row.get("id") is None:
        raise StoreError("Document row was not returned by the database")
    logger.info("[DOCS] registered document %s (%s, %d bytes)", row["id"], filename, len(data))
    return row
