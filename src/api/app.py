from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from src.api.runner import TurnRunner
from src.app.errors import (
    AppError,
    InvalidRequestError,
    SessionNotFoundError,
    StorageError,
)
from src.app.settings import Settings, load_settings
from src.db.repositories import SessionStore, build_store
from src.db.schemas import ModeName
from src.llms.generator import Generator, build_generator
from src.session.session_manager import SessionManager

logger = logging.getLogger("almas.api")

_STATUS_BY_ERROR = {
    InvalidRequestError: 400,
    SessionNotFoundError: 404,
    StorageError: 500,
}


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_id: Optional[str] = Field(default=None, alias="chatId")
    message: Optional[str] = None


class ChatUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    forced_mode: Optional[ModeName] = Field(default=None, alias="forcedMode")


def _error_body(exc: AppError) -> Dict[str, str]:
    if isinstance(exc, SessionNotFoundError):
        return {"error": "Chat not found"}
    if isinstance(exc, StorageError):
        return {"error": "Storage failure"}
    return {"error": str(exc) or "Invalid request"}


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[SessionStore] = None,
    generator: Optional[Generator] = None,
) -> FastAPI:
    settings = settings or load_settings()
    store = store if store is not None else build_store(settings)
    generator = generator if generator is not None else build_generator(settings)

    manager = SessionManager(store)
    runner = TurnRunner(manager, generator, context_window=settings.context_window)

    app = FastAPI(title="Almas Chat Backend", version="1.0.0")
    app.state.settings = settings
    app.state.manager = manager
    app.state.runner = runner

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError) -> JSONResponse:
        status = 500
        for err_cls, code in _STATUS_BY_ERROR.items():
            if isinstance(exc, err_cls):
                status = code
                break
        if status >= 500:
            logger.error("request failed: %s", exc, exc_info=exc)
        return JSONResponse(status_code=status, content=_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Almas AI backend is live"

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/chats")
    async def list_chats() -> List[Dict[str, Any]]:
        summaries = await manager.list_summaries()
        return [s.model_dump(by_alias=True) for s in summaries]

    @app.get("/api/chat/{chat_id}")
    async def get_chat(chat_id: str) -> Dict[str, Any]:
        session = await manager.fetch(chat_id)
        return session.to_doc()

    @app.patch("/api/chat/{chat_id}")
    async def update_chat(chat_id: str, body: ChatUpdate) -> Dict[str, Any]:
        fields = body.model_fields_set
        if not fields:
            raise InvalidRequestError("Nothing to update")
        if "title" in fields and not body.title:
            raise InvalidRequestError("title must be a non-empty string")

        if "title" in fields:
            session = await manager.rename(chat_id, body.title or "")
        if "forced_mode" in fields:
            session = await manager.set_forced_mode(chat_id, body.forced_mode)
        return session.to_doc()

    @app.delete("/api/chat/{chat_id}")
    async def delete_chat(chat_id: str) -> Dict[str, bool]:
        if not await manager.remove(chat_id):
            raise SessionNotFoundError(f"Chat not found: {chat_id}")
        return {"success": True}

    @app.post("/api/new-chat")
    async def new_chat() -> Dict[str, str]:
        chat_id = await manager.create()
        return {"chatId": chat_id}

    @app.post("/api/chat")
    async def chat(req: ChatRequest) -> Dict[str, str]:
        result = await runner.handle_turn(req.chat_id, req.message)
        return {"reply": result.reply, "modeUsed": result.mode_used}

    return app
