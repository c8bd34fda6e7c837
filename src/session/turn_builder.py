from __future__ import annotations

from src.db.schemas import Message, Session


def append_user_message(session: Session, user_text: str) -> Session:
    session.messages.append(Message(role="user", content=user_text))
    return session


def record_reply(session: Session, *, user_text: str, reply: str) -> Session:
    """
    Close a turn on the in-memory copy: append the assistant reply and
    overwrite memory with this turn's raw user text.
    """
    session.messages.append(Message(role="assistant", content=reply))
    session.memory = user_text
    return session
