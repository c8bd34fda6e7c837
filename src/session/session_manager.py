from __future__ import annotations

import logging
from typing import List, Optional

from src.app.errors import SessionNotFoundError
from src.core.clock import now_ms
from src.core.ids import new_session_id
from src.db.repositories import SessionStore
from src.db.schemas import DEFAULT_TITLE, Message, Session, SessionSummary
from src.llms.prompt_registry import GREETING

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(self, store: SessionStore, greeting: str = GREETING):
        self.store = store
        self.greeting = greeting

    # ---------- Sessions ----------
    def _seed_session(self) -> Session:
        return Session(
            title=DEFAULT_TITLE,
            created_at=now_ms(),
            messages=[Message(role="assistant", content=self.greeting)],
            memory="",
            forced_mode=None,
        )

    async def create(self) -> str:
        chat_id = new_session_id()
        await self.store.put(chat_id, self._seed_session())
        logger.info("session created", extra={"fields": {"chat_id": chat_id}})
        return chat_id

    async def fetch(self, chat_id: str) -> Session:
        """
        Return an owned copy of the session; mutating it does not touch the store.
        """
        session = await self.store.get(chat_id)
        if session is None:
            raise SessionNotFoundError(f"Chat not found: {chat_id}")
        return session

    async def remove(self, chat_id: str) -> bool:
        return await self.store.delete(chat_id)

    async def list_summaries(self) -> List[SessionSummary]:
        summaries = await self.store.list_summaries()
        return sorted(summaries, key=lambda s: s.created_at, reverse=True)

    async def commit(self, chat_id: str, session: Session) -> None:
        await self.store.put(chat_id, session)

    # ---------- Administrative updates ----------
    async def rename(self, chat_id: str, title: str) -> Session:
        session = await self.fetch(chat_id)
        session.title = title
        await self.commit(chat_id, session)
        return session

    async def set_forced_mode(self, chat_id: str, mode: Optional[str]) -> Session:
        """
        Pin every later turn to `mode`; None restores keyword detection.
        """
        session = await self.fetch(chat_id)
        session.forced_mode = mode
        await self.commit(chat_id, session)
        return session
