# src/graph/policies.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from src.llms.prompt_registry import get_prompt


@dataclass(frozen=True)
class ModeProfile:
    """
    Generation parameters + instruction preamble for one response mode.
    """
    name: str
    temperature: float
    max_tokens: int
    preamble: str


CHAT = ModeProfile(name="chat", temperature=0.8, max_tokens=500, preamble=get_prompt("chat"))
TECHNICAL = ModeProfile(name="technical", temperature=0.2, max_tokens=2000, preamble=get_prompt("technical"))
CONCISE = ModeProfile(name="concise", temperature=0.5, max_tokens=150, preamble=get_prompt("concise"))
EXAM = ModeProfile(name="exam", temperature=0.3, max_tokens=1200, preamble=get_prompt("exam"))

_MODE_REGISTRY: Dict[str, ModeProfile] = {
    p.name: p for p in (CHAT, TECHNICAL, CONCISE, EXAM)
}

TECH_KEYWORDS: Tuple[str, ...] = (
    "code", "bug", "error", "algorithm", "function",
    "javascript", "node", "react", "express", "api",
    "database", "sql", "c++", "java", "python",
)


def get_profile(name: str) -> ModeProfile:
    """
    Fetch a profile by name. Raises KeyError if missing.
    """
    return _MODE_REGISTRY[name]


def list_modes() -> List[str]:
    return sorted(_MODE_REGISTRY.keys())


def maybe_get_profile(name: Optional[str]) -> Optional[ModeProfile]:
    if not name:
        return None
    return _MODE_REGISTRY.get(name)


def detect_mode(message: str) -> str:
    """
    Keyword detection in fixed priority order: technical > concise > exam > chat.
    """
    lower = message.lower()
    if any(word in lower for word in TECH_KEYWORDS):
        return TECHNICAL.name
    if "short answer" in lower:
        return CONCISE.name
    if "exam" in lower or "define" in lower:
        return EXAM.name
    return CHAT.name


def classify(message: str, forced_mode: Optional[str] = None) -> ModeProfile:
    forced = maybe_get_profile(forced_mode)
    if forced is not None:
        return forced
    return get_profile(detect_mode(message))
