from __future__ import annotations

"""
This module provides core functionality for the application.

It includes clock helpers and ID generation.
"""

from src.core import clock, ids

__all__ = [
    "clock",
    "ids",
]
