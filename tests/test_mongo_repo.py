import asyncio

import mongomock
import pytest

from src.app.errors import StorageError
from src.db.repositories import MongoSessionRepo
from src.db.schemas import Message, Session


@pytest.fixture
def repo():
    client = mongomock.MongoClient()
    return MongoSessionRepo(client["almas_chat"]["chat_sessions"])


def _session(title: str = "New Chat", created_at: int = 1) -> Session:
    return Session(title=title, created_at=created_at, messages=[Message(role="assistant", content="hi")])


def test_put_then_get(repo: MongoSessionRepo):
    asyncio.run(repo.put("c1", _session(title="T", created_at=5)))

    loaded = asyncio.run(repo.get("c1"))
    assert loaded.title == "T"
    assert loaded.created_at == 5
    assert loaded.messages[0].role == "assistant"


def test_put_replaces_whole_record(repo: MongoSessionRepo):
    asyncio.run(repo.put("c1", _session(title="old")))
    asyncio.run(repo.put("c1", _session(title="new")))

    assert repo.sessions.count_documents({}) == 1
    assert asyncio.run(repo.get("c1")).title == "new"


def test_get_unknown_returns_none(repo: MongoSessionRepo):
    assert asyncio.run(repo.get("missing")) is None


def test_delete_and_list(repo: MongoSessionRepo):
    asyncio.run(repo.put("a", _session(title="A", created_at=1)))
    asyncio.run(repo.put("b", _session(title="B", created_at=2)))

    assert asyncio.run(repo.delete("a")) is True
    assert asyncio.run(repo.delete("a")) is False

    summaries = asyncio.run(repo.list_summaries())
    assert [(s.chat_id, s.title, s.created_at) for s in summaries] == [("b", "B", 2)]


def test_corrupt_record_raises_storage_error(repo: MongoSessionRepo):
    repo.sessions.insert_one({"_id": "bad", "title": "x"})

    with pytest.raises(StorageError):
        asyncio.run(repo.get("bad"))


def test_list_with_corrupt_record_raises_storage_error(repo: MongoSessionRepo):
    asyncio.run(repo.put("ok", _session()))
    repo.sessions.insert_one({"_id": "bad", "title": "x"})

    with pytest.raises(StorageError):
        asyncio.run(repo.list_summaries())
