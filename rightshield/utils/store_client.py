"""
Access to the managed database (tables + auth) through supabase-py.

One async client is kept per (url, key) pair. Every call maps failures
onto StoreError so routes can report them uniformly.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AuthApiError, StorageException, acreate_client

from rightshield.core.config import Settings
from rightshield.core.errors import StoreError

logger = logging.getLogger(__name__)

_clients: Dict[Tuple[str, str], AsyncClient] = {}
_client_lock = asyncio.Lock()


def store_enabled(config: Settings) -> bool:
    return bool(config.SUPABASE_URL and config.SUPABASE_SERVICE_ROLE_KEY)


async def get_client(config: Settings) -> AsyncClient:
    if not store_enabled(config):
        raise StoreError("Database is not configured (set SUPABASE_URL)")
    key = (config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY)
    client = _clients.get(key)
    if client is None:
        async with _client_lock:
            client = _clients.get(key)
            if client is None:
                client = await acreate_client(*key)
                _clients[key] = client
    return client


async def _execute(query, what: str):
    try:
        return await query.execute()
    except APIError as e:
        logger.error("[STORE] %s failed: %s", what, e.message)
        raise StoreError(f"Database request failed ({what})") from e
    except httpx.HTTPError as e:
        logger.error("[STORE] %s failed: %s", what, e)
        raise StoreError("Database unreachable") from e


async def select_rows(
    config: Settings,
    table: str,
    match: Optional[Dict[str, Any]] = None,
    order: Optional[str] = None,
    desc: bool = False,
) -> List[Dict[str, Any]]:
    client = await get_client(config)
    query = client.table(table).select("*")
    for col, val in (match or {}).items():
        query = query.eq(col, val)
    if order:
        query = query.order(order, desc=desc)
    resp = await _execute(query, f"select {table}")
    return resp.data or []


async def insert_row(config: Settings, table: str, row: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Inserts one row and returns it as stored (with generated columns such as id)."""
    client = await get_client(config)
    resp = await _execute(client.table(table).insert(row), f"insert {table}")
    logger.info("[STORE] inserted row into %s", table)
    rows = resp.data or []
    return rows[0] if rows else None


async def upload_file(
    config: Settings,
    bucket: str,
    path: str,
    data: bytes,
    content_type: Optional[str] = None,
) -> str:
    client = await get_client(config)
    options = {"content-type": content_type or "application/octet-stream"}
    try:
        resp = await client.storage.from_(bucket).upload(path, data, options)
    except StorageException as e:
        logger.error("[STORE] upload to %s failed: %s", bucket, e)
        raise StoreError(f"File upload failed ({bucket})") from e
    except httpx.HTTPError as e:
        logger.error("[STORE] upload to %s failed: %s", bucket, e)
        raise StoreError("Storage unreachable") from e
    logger.info("[STORE] uploaded %d bytes to %s/%s", len(data), bucket, resp.path)
    return resp.path


async def update_rows(
    config: Settings,
    table: str,
    match: Dict[str, Any],
    values: Dict[str, Any],
) -> None:
    if not match:
        raise StoreError("Refusing to update without a filter")
    client = await get_client(config)
    query = client.table(table).update(values)
    for col, val in match.items():
        query = query.eq(col, val)
    await _execute(query, f"update {table}")
    logger.info("[STORE] updated %s where %s", table, match)


async def get_user_id(config: Settings, token: Optional[str]) -> Optional[str]:
    """
    Resolves a user access token to the user's id. Returns None for a
    missing or rejected token; other failures raise StoreError.
    """
    if not token:
        return None
    client = await get_client(config)
    try:
        resp = await client.auth.get_user(token)
    except AuthApiError as e:
        logger.info("[STORE] token rejected: %s", e)
        return None
    except httpx.HTTPError as e:
        raise StoreError("Auth service unreachable") from e
    if resp is None or resp.user is None:
        return None
    return resp.user.id
