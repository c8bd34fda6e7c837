import asyncio
from typing import Dict, List, Optional

import pytest

from src.db.json_store import JsonSessionStore
from src.db.schemas import Session, SessionSummary
from src.session.session_manager import SessionManager


class InMemoryStore:
    """Dict-backed store that records every write."""

    def __init__(self):
        self.docs: Dict[str, dict] = {}
        self.puts: List[str] = []
        self.deletes: List[str] = []

    async def get(self, chat_id: str) -> Optional[Session]:
        doc = self.docs.get(chat_id)
        return Session.model_validate(doc) if doc is not None else None

    async def put(self, chat_id: str, session: Session) -> None:
        self.puts.append(chat_id)
        self.docs[chat_id] = session.to_doc()

    async def delete(self, chat_id: str) -> bool:
        self.deletes.append(chat_id)
        return self.docs.pop(chat_id, None) is not None

    async def list_summaries(self) -> List[SessionSummary]:
        return [
            SessionSummary(chat_id=k, title=v["title"], created_at=v["createdAt"])
            for k, v in self.docs.items()
        ]


class FakeGenerator:
    def __init__(self, reply: str = "generated reply", delay: float = 0.0):
        self.reply = reply
        self.delay = delay
        self.calls = []

    async def generate(self, messages, *, temperature, max_tokens):
        self.calls.append({"messages": list(messages), "temperature": temperature, "max_tokens": max_tokens})
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.reply


class FailingGenerator:
    def __init__(self, exc: Exception = None):
        self.exc = exc or RuntimeError("upstream 503")
        self.calls = 0

    async def generate(self, messages, *, temperature, max_tokens):
        self.calls += 1
        raise self.exc


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def json_store(tmp_path):
    return JsonSessionStore(tmp_path / "chats.json")


@pytest.fixture
def manager(memory_store):
    return SessionManager(memory_store)
