from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from src.app.errors import StorageError
from src.app.settings import Settings
from src.db.json_store import JsonSessionStore
from src.db.mongo import connect_mongo, ensure_indexes
from src.db.schemas import Session, SessionSummary


class SessionStore(Protocol):
    async def get(self, chat_id: str) -> Optional[Session]: ...

    async def put(self, chat_id: str, session: Session) -> None: ...

    async def delete(self, chat_id: str) -> bool: ...

    async def list_summaries(self) -> List[SessionSummary]: ...


class MongoSessionRepo:
    """
    Per-key session store: one Mongo document per session, so each put is an
    atomic single-record replace and there is no shared document to race on.
    pymongo is synchronous; calls run in a worker thread.
    """

    def __init__(self, sessions: Collection):
        self.sessions = sessions

    async def _call(self, fn, *args, **kwargs) -> Any:
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except PyMongoError as e:
            raise StorageError(f"MongoDB operation failed: {e}") from e

    async def get(self, chat_id: str) -> Optional[Session]:
        doc = await self._call(self.sessions.find_one, {"_id": chat_id})
        if not doc:
            return None
        doc.pop("_id", None)
        try:
            return Session.model_validate(doc)
        except ValidationError as e:
            raise StorageError(f"Corrupt session record {chat_id}: {e}") from e

    async def put(self, chat_id: str, session: Session) -> None:
        doc: Dict[str, Any] = {"_id": chat_id, **session.to_doc()}
        await self._call(self.sessions.replace_one, {"_id": chat_id}, doc, upsert=True)

    async def delete(self, chat_id: str) -> bool:
        res = await self._call(self.sessions.delete_one, {"_id": chat_id})
        return res.deleted_count > 0

    async def list_summaries(self) -> List[SessionSummary]:
        def _fetch() -> List[Dict[str, Any]]:
            return list(self.sessions.find({}, {"title": 1, "createdAt": 1}))

        docs = await self._call(_fetch)
        out: List[SessionSummary] = []
        for d in docs:
            try:
                out.append(SessionSummary(chat_id=d["_id"], title=d["title"], created_at=d["createdAt"]))
            except (KeyError, TypeError, ValidationError) as e:
                raise StorageError(f"Corrupt session record {d.get('_id')}: {e}") from e
        return out


def build_store(settings: Settings) -> SessionStore:
    if settings.store_backend == "mongo":
        handles = connect_mongo(settings.mongo_uri or "", settings.mongo_db)
        ensure_indexes(handles)
        return MongoSessionRepo(handles["sessions"])
    return JsonSessionStore(settings.chats_file)
