from fastapi import APIRouter, Depends, File, Request, UploadFile

from rightshield.core.config import Settings, get_settings
from rightshield.core.errors import error_response
from rightshield.routers.deps import bearer_token
from rightshield.services.analysis import count_words
from rightshield.services.documents import register_document
from rightshield.utils.file_parsing import extract_document_text

router = APIRouter()

@router.post("/documents/parse")
async def parse_upload(file: UploadFile = File(...), config: Settings = Depends(get_settings)):
    """
    Turns an uploaded file into text for the analysis step.
    """
    try:
        data = await file.read()
        content = extract_document_text(file.filename or "", file.content_type, data, config.MAX_UPLOAD_BYTES)
    except Exception as e:
        return error_response(e)

    return {
        "success": True,
        "fileName": file.filename,
        "content": content,
        "wordCount": count_words(content),
    }

@router.post("/documents")
async def upload_document(
    request: Request,
    file: UploadFile = File(...),
    config: Settings = Depends(get_settings),
):
    """
    Stores an upload and registers it as a document awaiting analysis.
    The returned documentId is the one to send to /analyze.
    """
    try:
        data = await file.read()
        filename = file.filename or "upload"
        content = extract_document_text(filename, file.content_type, data, config.MAX_UPLOAD_BYTES)
        row = await register_document(config, filename, file.content_type, data, bearer_token(request))
    except Exception as e:
        return error_response(e)

    return {
        "success": True,
        "documentId": row["id"],
        "fileName": filename,
        "path": row.get("path"),
        "processingStatus": row.get("processing_status", "processing"),
        "content": content,
        "wordCount": count_words(content),
    }
