from __future__ import annotations

"""
Application-level utilities:
- settings
- logging
- error taxonomy (mapped to HTTP status codes in src.api.app)
"""

from src.app import errors, logging, settings

__all__ = [
    "errors",
    "logging",
    "settings",
]
