"""
Session Registry

One InventoryState per signed-in session, created on sign-in and cleared at
sign-out or once the session has expired. A token that survives a process
restart is reopened lazily on its first use.
"""

import asyncio
from datetime import datetime
from typing import Dict, Optional

import structlog

from inventory_soft.database.models import utcnow
from inventory_soft.state.container import InventoryState
from inventory_soft.store.record_store import RecordStore

logger = structlog.get_logger(__name__)


class SessionRegistry:
    """
    Maps session tokens to their inventory state.

    ``expires_at`` is the session's naive UTC expiry; states past it are
    dropped the next time a session is opened.

    Example:
        registry = SessionRegistry(store)
        state = await registry.open(session.token, session.owner_id, session.expires_at)
        ...
        registry.close(session.token)
    """

    def __init__(self, store: RecordStore):
        self._store = store
        self._states: Dict[str, InventoryState] = {}
        self._expiry: Dict[str, datetime] = {}
        self._lock = asyncio.Lock()

    async def open(
        self,
        token: str,
        owner_id: str,
        expires_at: Optional[datetime] = None,
    ) -> InventoryState:
        """Create and load the state for a new session"""
        self.prune_expired()
        state = InventoryState(self._store, owner_id)
        await state.fetch_all()
        self._states[token] = state
        if expires_at is not None:
            self._expiry[token] = expires_at
        logger.debug("Session state opened", owner_id=owner_id, open_sessions=len(self._states))
        return state

    async def get(
        self,
        token: str,
        owner_id: str,
        expires_at: Optional[datetime] = None,
    ) -> InventoryState:
        """State of a session, loading it on first use"""
        state = self._states.get(token)
        if state is not None and state.owner_id == owner_id:
            return state
        async with self._lock:
            state = self._states.get(token)
            if state is None or state.owner_id != owner_id:
                state = await self.open(token, owner_id, expires_at)
        return state

    def close(self, token: str) -> None:
        self._expiry.pop(token, None)
        state = self._states.pop(token, None)
        if state is not None:
            state.clear()
            logger.debug("Session state closed", owner_id=state.owner_id, open_sessions=len(self._states))

    def prune_expired(self, now: Optional[datetime] = None) -> int:
        """Close every state whose session has expired; returns how many"""
        now = now or utcnow()
        expired = [token for token, expires_at in self._expiry.items() if expires_at <= now]
        for token in expired:
            self.close(token)
        if expired:
            logger.info("Expired session states dropped", count=len(expired))
        return len(expired)

    def close_all(self) -> None:
        for token in list(self._states):
            self.close(token)

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, token: str) -> bool:
        return token in self._states
