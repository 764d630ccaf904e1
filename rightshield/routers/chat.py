from fastapi import APIRouter, Depends, Request

from rightshield.core.config import Settings, get_settings
from rightshield.core.errors import error_response
from rightshield.models.schemas import ChatRequest, ChatSessionRequest
from rightshield.routers.deps import bearer_token, read_model
from rightshield.services.chat import chat_reply, get_personalities, start_session

router = APIRouter()

@router.get("/chat/personalities")
async def list_personalities():
    return get_personalities()

@router.post("/chat")
async def chat_route(request: Request, config: Settings = Depends(get_settings)):
    try:
        req = await read_model(request, ChatRequest)
        return await chat_reply(
            config,
            message=req.message,
            personality=req.personality,
            document_content=req.document_content,
            session_id=req.session_id,
            token=bearer_token(request),
        )
    except Exception as e:
        return error_response(e)

@router.post("/chat/sessions")
async def start_session_route(request: Request, config: Settings = Depends(get_settings)):
    try:
        req = await read_model(request, ChatSessionRequest)
        return await start_session(
            config,
            personality=req.personality,
            token=bearer_token(request),
            document_id=req.document_id,
            document_type=req.document_type,
        )
    except Exception as e:
        return error_response(e)
