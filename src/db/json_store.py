from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from src.app.errors import StorageError
from src.db.schemas import Session, SessionSummary

logger = logging.getLogger(__name__)


class JsonSessionStore:
    """
    Whole-document session store backed by a single JSON file.

    Every operation reads the full `{chat_id: session}` mapping, and every
    mutation writes the full mapping back. Mutations are serialized behind one
    asyncio.Lock so concurrent writers to different sessions cannot overwrite
    each other's changes. Writes go through a temp file + os.replace, so reads
    never observe a half-written document and do not need the lock. A missing
    file is created as an empty mapping on first access.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    # -------------------------
    # sync file helpers (run in a worker thread)
    # -------------------------
    def _read_sync(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not contain a JSON object")
        return data

    def _write_sync(self, data: Dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(f"{self.path.suffix}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    async def _ensure_document(self) -> None:
        if self.path.exists():
            return
        async with self._write_lock:
            if not self.path.exists():
                await self._write({})

    async def _read(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._read_sync)

    async def _write(self, data: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._write_sync, data)

    # -------------------------
    # store contract
    # -------------------------
    async def get(self, chat_id: str) -> Optional[Session]:
        await self._ensure_document()
        data = await self._read()
        raw = data.get(chat_id)
        if raw is None:
            return None
        try:
            return Session.model_validate(raw)
        except ValidationError as e:
            raise StorageError(f"Corrupt session record {chat_id}: {e}") from e

    async def put(self, chat_id: str, session: Session) -> None:
        async with self._write_lock:
            data = await self._read()
            data[chat_id] = session.to_doc()
            await self._write(data)

    async def delete(self, chat_id: str) -> bool:
        async with self._write_lock:
            data = await self._read()
            if chat_id not in data:
                return False
            del data[chat_id]
            await self._write(data)
        logger.info("session deleted", extra={"fields": {"chat_id": chat_id}})
        return True

    async def list_summaries(self) -> List[SessionSummary]:
        await self._ensure_document()
        data = await self._read()
        out: List[SessionSummary] = []
        for chat_id, raw in data.items():
            try:
                out.append(
                    SessionSummary(
                        chat_id=chat_id,
                        title=raw["title"],
                        created_at=raw["createdAt"],
                    )
                )
            except (KeyError, TypeError, ValidationError) as e:
                raise StorageError(f"Corrupt session record {chat_id}: {e}") from e
        return out
