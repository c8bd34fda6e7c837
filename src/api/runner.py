from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from src.app.errors import InvalidRequestError
from src.graph.build_graph import build_graph
from src.graph.state import TurnState
from src.llms.generator import Generator
from src.session.context import DEFAULT_WINDOW
from src.session.session_manager import SessionManager
from src.session.turn_builder import append_user_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnResult:
    reply: str
    mode_used: str


class TurnRunner:
    """
    Per-message workflow:
    - validate input, fetch an owned copy of the session
    - append the user message
    - run the turn graph (classify -> context -> generate -> record)
    - commit the full session snapshot in one write
    """

    def __init__(
        self,
        manager: SessionManager,
        generator: Generator,
        *,
        context_window: int = DEFAULT_WINDOW,
    ):
        self.manager = manager
        self.graph = build_graph(generator, context_window=context_window).compile()

    async def handle_turn(self, chat_id: Optional[str], user_text: Optional[str]) -> TurnResult:
        if not chat_id or not user_text:
            raise InvalidRequestError("Invalid request")

        session = await self.manager.fetch(chat_id)
        append_user_message(session, user_text)

        initial: TurnState = {
            "chat_id": chat_id,
            "session": session,
            "user_text": user_text,
        }
        final = await self.graph.ainvoke(initial)

        await self.manager.commit(chat_id, final["session"])

        mode_used = final["profile"].name
        logger.info(
            "turn completed",
            extra={"fields": {
                "chat_id": chat_id,
                "mode": mode_used,
                "degraded": bool(final.get("upstream_error")),
                "messages": len(final["session"].messages),
            }},
        )
        return TurnResult(reply=final["reply"], mode_used=mode_used)
