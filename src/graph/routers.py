from __future__ import annotations
from typing import Any, Dict, Literal

Route = Literal["fallback", "record"]


def route_after_generate(state: Dict[str, Any]) -> Route:
    """Send failed generations to the fallback reply node."""
    if state.get("upstream_error"):
        return "fallback"
    return "record"
