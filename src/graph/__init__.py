from __future__ import annotations

"""
Turn pipeline:
- mode policy
- LangGraph state, routers and graph builder
"""

from src.graph import build_graph, policies, routers, state

__all__ = [
    "build_graph",
    "policies",
    "routers",
    "state",
]
