from __future__ import annotations

"""
Providers (Cerebras)
"""

from src.llms.providers import cerebras_client

__all__ = [
    "cerebras_client",
]
