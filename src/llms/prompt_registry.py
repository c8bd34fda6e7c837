from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Prompt:
    name: str
    template: str


ASSISTANT_NAME = "Almas"

GREETING = f"Hey 👋 I’m {ASSISTANT_NAME}. How can I help you today?"

FALLBACK_REPLY = "⚠️ I'm having trouble connecting right now."

# One instruction preamble per mode. Wording is product copy, not contract.
PROMPTS: Dict[str, Prompt] = {
    "chat": Prompt(
        name="chat",
        template=(
            f"You are {ASSISTANT_NAME}, a friendly AI created by Hussain. "
            "Be natural and conversational."
        ),
    ),
    "technical": Prompt(
        name="technical",
        template=(
            f"You are {ASSISTANT_NAME}, a senior software engineer. "
            "Give optimized, correct answers with code blocks."
        ),
    ),
    "concise": Prompt(
        name="concise",
        template=f"You are {ASSISTANT_NAME}. Give very short and clear answers.",
    ),
    "exam": Prompt(
        name="exam",
        template=(
            f"You are {ASSISTANT_NAME}. Answer in structured exam format "
            "with headings and bullet points."
        ),
    ),
}

CONTEXT_TEMPLATE = "{preamble}\nUser Memory:\n{memory}"


def get_prompt(name: str) -> str:
    if name not in PROMPTS:
        raise KeyError(f"Unknown prompt: {name}")
    return PROMPTS[name].template
