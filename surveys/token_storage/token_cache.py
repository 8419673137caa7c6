"""
In-memory token cache.

Holds one principal's cached access/refresh tokens. Subclasses that persist
the cache override `flush` to write the serialized state back.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

CACHE_FORMAT_VERSION = 1

TokenCacheKey = Tuple[str, str, str, Optional[str]]


@dataclass
class TokenCacheItem:
    authority: str
    client_id: str
    resource: str
    access_token: str
    unique_id: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_on: Optional[datetime] = None

    @property
    def key(self) -> TokenCacheKey:
        return (self.authority, self.resource, self.client_id, self.unique_id)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["expires_on"] = self.expires_on.isoformat() if self.expires_on else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TokenCacheItem":
        expires_on = data.get("expires_on")
        return cls(
            authority=data["authority"],
            client_id=data["client_id"],
            resource=data["resource"],
            access_token=data["access_token"],
            unique_id=data.get("unique_id"),
            refresh_token=data.get("refresh_token"),
            expires_on=datetime.fromisoformat(expires_on) if expires_on else None,
        )


class TokenCache:
    def __init__(self, state: Optional[bytes] = None):
        self._items: Dict[TokenCacheKey, TokenCacheItem] = {}
        self.has_state_changed = False
        if state:
            self.deserialize(state)

    @property
    def count(self) -> int:
        return len(self._items)

    def items(self) -> List[TokenCacheItem]:
        return list(self._items.values())

    def add_item(self, item: TokenCacheItem) -> None:
        """Store ``item``, replacing any entry with the same key."""
        self._items[item.key] = item
        self.has_state_changed = True

    def get_item(
        self,
        resource: str,
        client_id: Optional[str] = None,
        unique_id: Optional[str] = None,
    ) -> Optional[TokenCacheItem]:
        for item in self._items.values():
            if item.resource != resource:
                continue
            if client_id is not None and item.client_id != client_id:
                continue
            if unique_id is not None and item.unique_id != unique_id:
                continue
            return item
        return None

    def remove_item(self, item: TokenCacheItem) -> bool:
        if self._items.pop(item.key, None) is None:
            return False
        self.has_state_changed = True
        return True

    def clear(self) -> None:
        """Discard every cached token."""
        removed = len(self._items)
        self._items.clear()
        self.has_state_changed = True
        logger.debug("token_cache_cleared: removed=%d", removed)

    def serialize(self) -> bytes:
        payload = {
            "version": CACHE_FORMAT_VERSION,
            "items": [item.to_dict() for item in self._items.values()],
        }
        return json.dumps(payload).encode("utf-8")

    def deserialize(self, state: Optional[bytes]) -> None:
        """Replace the cache contents with ``state`` (None or empty clears it).

        Raises ValueError on malformed state or an unknown format version; the
        cache is left empty in that case.
        """
        self._items.clear()
        self.has_state_changed = False
        if not state:
            return
        try:
            payload = json.loads(state.decode("utf-8"))
        except ValueError as e:
            raise ValueError(f"Malformed token cache state: {e}") from e
        if not isinstance(payload, dict):
            raise ValueError("Malformed token cache state: expected a JSON object")
        version = payload.get("version")
        if version != CACHE_FORMAT_VERSION:
            raise ValueError(f"Unsupported token cache format version: {version}")
        entries = payload.get("items") or []
        if not isinstance(entries, list):
            raise ValueError("Malformed token cache state: items must be a list")
        items: Dict[TokenCacheKey, TokenCacheItem] = {}
        for data in entries:
            if not isinstance(data, dict):
                raise ValueError("Malformed token cache state: each item must be an object")
            try:
                item = TokenCacheItem.from_dict(data)
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Malformed token cache item: {e!r}") from e
            items[item.key] = item
        self._items.update(items)

    async def flush(self) -> None:
        """Write pending changes to the backing store; nothing to do in memory."""
        self.has_state_changed = False
