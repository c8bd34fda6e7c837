from __future__ import annotations

from typing import List, Optional, TypedDict

from src.db.schemas import PromptMessage, Session
from src.graph.policies import ModeProfile


class TurnState(TypedDict, total=False):
    """
    LangGraph state for one turn. `session` is the orchestrator's owned copy,
    already carrying the new user message.
    """
    chat_id: str
    session: Session
    user_text: str
    profile: ModeProfile
    context: List[PromptMessage]
    reply: str
    upstream_error: Optional[str]
