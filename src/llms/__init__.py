from __future__ import annotations

"""
LLM layer:
- prompt registry (mode preambles, greeting, fallback reply)
- generator protocol + Cerebras adapter
"""

from src.llms import generator, prompt_registry

__all__ = [
    "generator",
    "prompt_registry",
]
