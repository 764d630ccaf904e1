from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from rightshield.core.errors import InvalidInputError, describe_validation_error

M = TypeVar("M", bound=BaseModel)

def bearer_token(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return None

async def read_model(request: Request, model: Type[M]) -> M:
    """
    Reads the JSON body into `model`, reporting any problem as InvalidInput
    so routes can answer with the success/error envelope instead of a 422.
    """
    try:
        body: Dict[str, Any] = await request.json()
    except ValueError as e:
        raise InvalidInputError("Request body must be valid JSON") from e
    if not isinstance(body, dict):
        raise InvalidInputError("Request body must be a JSON object")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise InvalidInputError(describe_validation_error(e)) from e
