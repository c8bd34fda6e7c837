from __future__ import annotations
import secrets

def _tok(nbytes: int = 16) -> str:
    return secrets.token_urlsafe(nbytes)

def new_session_id() -> str:
    return f"chat_{_tok()}"
