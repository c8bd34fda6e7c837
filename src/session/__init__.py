from __future__ import annotations

"""
Session layer:
- session lifecycle (create / fetch / remove / list / commit)
- context window construction
- per-turn transcript updates
"""

from src.session import context, session_manager, turn_builder

__all__ = [
    "context",
    "session_manager",
    "turn_builder",
]
