import logging
from typing import Dict, List, Optional

import httpx

from rightshield.core.config import Settings
from rightshield.core.errors import LLMError, LLMNotConfiguredError

logger = logging.getLogger(__name__)

async def call_chat_completion(
    config: Settings,
    messages: List[Dict[str, str]],
    max_tokens: int = 800,
    temperature: float = 0.7,
    json_mode: bool = False,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    if not config.OPENAI_API_KEY:
        raise LLMNotConfiguredError("LLM is not configured (set OPENAI_API_KEY)")

    url = f"{config.OPENAI_BASE_URL.rstrip('/')}/chat/completions"
    payload = {
        "model": config.OPENAI_MODEL,
        "messages": messages,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    if json_mode:
        payload["response_format"] = {"type": "json_object"}
    headers = {"Authorization": f"Bearer {config.OPENAI_API_KEY}"}

    try:
        async with httpx.AsyncClient(timeout=config.LLM_TIMEOUT, transport=transport) as client:
            resp = await client.post(url, json=payload, headers=headers)
            resp.raise_for_status()
            data = resp.json()
    except httpx.HTTPStatusError as e:
        logger.error("[LLM] API error %s: %s", e.response.status_code, e.response.text[:500])
        raise LLMError("Failed to get AI response") from e
    except httpx.HTTPError as e:
        logger.error("[LLM] request failed: %s", e)
        raise LLMError("Failed to reach AI service") from e
    except ValueError as e:
        raise LLMError("AI service returned a non-JSON body") from e

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise LLMError("AI service returned an unexpected response shape") from e

    return (content or "").strip()
