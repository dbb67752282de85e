"""Redis client holding the JWT revocation list.

Logout writes ``jwt:revoked:<jti>`` with the token's remaining lifetime as
its TTL; every authenticated request checks for that key.
"""

from __future__ import annotations

from typing import Optional

import redis.asyncio as redis

from quad_server.core.config import get_settings

REVOKED_PREFIX = "jwt:revoked:"

_client: Optional[redis.Redis] = None


def revoked_key(jti: str) -> str:
    return f"{REVOKED_PREFIX}{jti}"


async def get_redis() -> redis.Redis:
    """The process-wide client, created on first use."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=settings.redis_timeout_seconds,
        )
    return _client


async def close_redis() -> None:
    global _client
    if _client is None:
        return
    await _client.aclose()
    _client = None
