import logging
from typing import Any, Dict, List, Optional

from rightshield.core.config import Settings
from rightshield.core.errors import StoreError
from rightshield.utils.llm_client import call_chat_completion
from rightshield.utils.store_client import get_user_id, insert_row, store_enabled

logger = logging.getLogger(__name__)

DEFAULT_PERSONALITY = "teacher"

PERSONALITIES: Dict[str, Dict[str, str]] = {
    "teacher": {
        "label": "Legal Teacher",
        "system": (
            "You are a friendly AI legal teacher. Explain legal concepts simply and clearly. "
            "Use analogies and examples. Always be encouraging and supportive."
        ),
    },
    "negotiator": {
        "label": "Negotiation Coach",
        "system": (
            "You are an expert negotiation coach. Help users understand how to negotiate better terms. "
            "Provide specific language they can use and negotiation strategies."
        ),
    },
    "risk_detector": {
        "label": "Risk Detector",
        "system": (
            "You are a risk analysis expert. Focus on identifying potential dangers and risks in legal documents. "
            "Be thorough but not alarmist. Provide actionable advice."
        ),
    },
}

def get_personalities() -> List[Dict[str, str]]:
    return [{"name": k, "label": v["label"]} for k, v in PERSONALITIES.items()]

def resolve_personality(name: Optional[str]) -> str:
    return name if name in PERSONALITIES else DEFAULT_PERSONALITY

def build_system_prompt(personality: str, document_content: Optional[str], context_chars: int) -> str:
    prompt = PERSONALITIES[resolve_personality(personality)]["system"]
    if document_content:
        prompt += f"\n\nDocument context:\n{document_content[:context_chars]}..."
    return prompt

async def save_transcript(
    config: Settings,
    session_id: str,
    message: str,
    reply: str,
    personality: str,
    token: Optional[str],
) -> bool:
    user_id = await get_user_id(config, token)
    if not user_id:
        return False
    await insert_row(config, "chat_messages", {
        "session_id": session_id,
        "role": "user",
        "content": message,
        "message_type": "text",
    })
    await insert_row(config, "chat_messages", {
        "session_id": session_id,
        "role": "assistant",
        "content": reply,
        "message_type": "text",
        "metadata": {"personality": personality},
    })
    return True

async def chat_reply(
    config: Settings,
    message: str,
    personality: Optional[str] = None,
    document_content: Optional[str] = None,
    session_id: Optional[str] = None,
    token: Optional[str] = None,
) -> Dict[str, Any]:
    personality = resolve_personality(personality)
    logger.info("[CHAT] session=%s personality=%s message_len=%d", session_id, personality, len(message))

    messages = [
        {"role": "system", "content": build_system_prompt(personality, document_content, config.CHAT_CONTEXT_CHARS)},
        {"role": "user", "content": message},
    ]
    reply = await call_chat_completion(config, messages, max_tokens=800, temperature=0.7)

    if session_id and store_enabled(config):
        await save_transcript(config, session_id, message, reply, personality, token)

    return {"success": True, "response": reply, "personality": personality}

async def start_session(
    config: Settings,
    personality: Optional[str] = None,
    token: Optional[str] = None,
    document_id: Optional[Any] = None,
    document_type: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Opens a `chat_sessions` row for the signed-in user. Without persistence
    or a known user the chat still works; sessionId is then null and no
    transcript is kept.
    """
    personality = resolve_personality(personality)
    if not store_enabled(config):
        return {"success": True, "sessionId": None, "personality": personality}

    user_id = await get_user_id(config, token)
    if not user_id:
        logger.info("[CHAT] no signed-in user; session not recorded")
        return {"success": True, "sessionId": None, "personality": personality}

    row = {
        "user_id": user_id,
        "personality_mode": personality,
        "session_data": {
            "document_analyzed": bool(document_type),
            "document_type": document_type,
        },
    }
    if document_id is not None:
        row["document_id"] = document_id
    created = await insert_row(config, "chat_sessions", row)
    if not created or created.get("id") is None:
        raise StoreError("Chat session row was not returned by the database")
    logger.info("[CHAT] started session %s personality=%s", created["id"], personality)
    return {"success": True, "sessionId": created["id"], "personality": personality}
