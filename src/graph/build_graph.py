from __future__ import annotations

import logging
from typing import Any, Dict

from langgraph.graph import StateGraph, START, END

from src.graph.policies import classify
from src.graph.routers import route_after_generate
from src.graph.state import TurnState
from src.llms.generator import Generator
from src.llms.prompt_registry import FALLBACK_REPLY
from src.session.context import DEFAULT_WINDOW, build_context
from src.session.turn_builder import record_reply

logger = logging.getLogger(__name__)


def build_graph(generator: Generator, *, context_window: int = DEFAULT_WINDOW) -> "StateGraph":
    """
    Turn graph:
    - START -> classify -> build_context -> generate
    - generate -> (record OR fallback -> record)
    - record -> END
    Fetch and commit happen outside the graph.
    """

    def classify_node(state: TurnState) -> Dict[str, Any]:
        session = state["session"]
        return {"profile": classify(state["user_text"], session.forced_mode)}

    def build_context_node(state: TurnState) -> Dict[str, Any]:
        session = state["session"]
        context = build_context(state["profile"], session.memory, session.messages, context_window)
        return {"context": context}

    async def generate_node(state: TurnState) -> Dict[str, Any]:
        profile = state["profile"]
        try:
            reply = await generator.generate(
                state["context"],
                temperature=profile.temperature,
                max_tokens=profile.max_tokens,
            )
        except Exception as e:
            logger.warning(
                "generation failed, using fallback reply",
                extra={"fields": {"chat_id": state.get("chat_id"), "mode": profile.name, "error": str(e)}},
            )
            return {"upstream_error": str(e) or type(e).__name__}
        return {"reply": reply, "upstream_error": None}

    def fallback_node(state: TurnState) -> Dict[str, Any]:
        return {"reply": FALLBACK_REPLY}

    def record_node(state: TurnState) -> Dict[str, Any]:
        session = record_reply(state["session"], user_text=state["user_text"], reply=state["reply"])
        return {"session": session}

    g = StateGraph(TurnState)

    g.add_node("classify", classify_node)
    g.add_node("build_context", build_context_node)
    g.add_node("generate", generate_node)
    g.add_node("fallback", fallback_node)
    g.add_node("record", record_node)

    g.add_edge(START, "classify")
    g.add_edge("classify", "build_context")
    g.add_edge("build_context", "generate")
    g.add_conditional_edges(
        "generate",
        route_after_generate,
        {
            "fallback": "fallback",
            "record": "record",
        },
    )
    g.add_edge("fallback", "record")
    g.add_edge("record", END)

    return g
