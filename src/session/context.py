from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from src.db.schemas import Message, PromptMessage
from src.llms.prompt_registry import CONTEXT_TEMPLATE

if TYPE_CHECKING:
    from src.graph.policies import ModeProfile

DEFAULT_WINDOW = 12


def build_context(
    profile: ModeProfile,
    memory: str,
    transcript: Sequence[Message],
    window: int = DEFAULT_WINDOW,
) -> List[PromptMessage]:
    """
    Return the messages sent to the generator for one turn:
    one system instruction (preamble + memory), then the most recent
    `window` transcript messages, oldest first. Older messages are left out
    of the call but stay in the session.
    """
    if window < 1:
        raise ValueError(f"context window must be >= 1, got {window}")

    instruction = PromptMessage(
        role="system",
        content=CONTEXT_TEMPLATE.format(preamble=profile.preamble, memory=memory or "None"),
    )
    recent = list(transcript)[-window:]
    return [instruction] + [PromptMessage(role=m.role, content=m.content) for m in recent]
