# =============================================================================
# lib/handoff.py - Transient Form Hand-off Buffer
# =============================================================================
# Short-lived JSON storage in Redis for data that has to survive a redirect:
# - a quote typed in before signing up ("pending-quote-request")
# - the role chosen on the get-started page
# - half-finished transporter applications
# - persisted client state (auth / marketplace stores)
#
# Values are plain JSON with a TTL. There is no schema versioning and no
# integrity check: whatever was stored is handed back as-is.
#
# Usage:
#   from lib.handoff import HandoffBuffer
#   HandoffBuffer.put("pending-quote-request", user_id, {"origin_location": "Austin"})
#   data = HandoffBuffer.pop("pending-quote-request", user_id)
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any

import redis

from app.config import settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "shippaws:handoff"

# Well-known slots
PENDING_QUOTE_REQUEST = "pending-quote-request"
ANONYMOUS_STASH = "anonymous-stash"
TRANSPORTER_ONBOARD_DATA = "shippaws-onboard-data"
AUTH_STATE = "ship-paws-auth"
MARKETPLACE_STATE = "ship-paws-marketplace"


class HandoffBuffer:
    """
    Redis-backed key-value buffer for form hand-offs.

    Singleton client, class-method API (same shape as SupabaseClient).
    Every value lives under "<prefix>:<slot>:<owner>" where owner is a
    user id or an anonymous hand-off id.
    """

    _instance: redis.Redis | None = None

    @classmethod
    def get_client(cls) -> redis.Redis:
        """Get or create the singleton Redis client."""
        if cls._instance is None:
            cls._instance = redis.from_url(settings.REDIS_URL, decode_responses=True)
            logger.info("Hand-off buffer connected to Redis")
        return cls._instance

    @staticmethod
    def key(slot: str, owner: str) -> str:
        return f"{KEY_PREFIX}:{slot}:{owner}"

    @classmethod
    def put(
        cls,
        slot: str,
        owner: str,
        value: dict[str, Any],
        ttl_seconds: int | None = None,
    ) -> None:
        """Store a JSON-serializable dict, replacing anything already there."""
        client = cls.get_client()
        ttl = ttl_seconds or settings.HANDOFF_TTL_SECONDS
        client.setex(cls.key(slot, owner), ttl, json.dumps(value, default=str))
        logger.debug(f"Stored hand-off {slot} for {owner}")

    @classmethod
    def get(cls, slot: str, owner: str) -> dict[str, Any] | None:
        """Read a stored value without removing it. None if absent or unreadable."""
        raw = cls.get_client().get(cls.key(slot, owner))
        return cls._decode(slot, owner, raw)

    @classmethod
    def pop(cls, slot: str, owner: str) -> dict[str, Any] | None:
        """Read and remove a stored value in one round trip."""
        pipe = cls.get_client().pipeline()
        pipe.get(cls.key(slot, owner))
        pipe.delete(cls.key(slot, owner))
        raw, _ = pipe.execute()
        return cls._decode(slot, owner, raw)

    @classmethod
    def exists(cls, slot: str, owner: str) -> bool:
        return bool(cls.get_client().exists(cls.key(slot, owner)))

    @classmethod
    def delete(cls, slot: str, owner: str) -> None:
        cls.get_client().delete(cls.key(slot, owner))

    @staticmethod
    def _decode(slot: str, owner: str, raw: str | None) -> dict[str, Any] | None:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            # Corrupt values are treated as missing, like a bad localStorage entry
            logger.warning(f"Discarding unreadable hand-off {slot} for {owner}: {e}")
            return None
