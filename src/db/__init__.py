from __future__ import annotations

"""
Database layer:
- Schemas
- JSON document store (default)
- Mongo connection + per-session repository
"""

from src.db import json_store, mongo, repositories, schemas

__all__ = [
    "json_store",
    "mongo",
    "repositories",
    "schemas",
]
