from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

Role = Literal["user", "assistant"]
PromptRole = Literal["system", "user", "assistant"]
ModeName = Literal["chat", "technical", "concise", "exam"]

DEFAULT_TITLE = "New Chat"


class Message(BaseModel):
    role: Role
    content: str


class PromptMessage(BaseModel):
    """
    One entry of the context sent to the generator (may carry the system role).
    """
    role: PromptRole
    content: str


class Session(BaseModel):
    """
    Persisted chat session. Serialized with camelCase keys (`by_alias=True`).
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str = DEFAULT_TITLE
    created_at: int = Field(alias="createdAt")
    messages: List[Message] = Field(default_factory=list)
    memory: str = ""
    # free text so the mode registry can grow; classify() ignores unknown ids
    forced_mode: Optional[str] = Field(default=None, alias="forcedMode")

    def to_doc(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class SessionSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chat_id: str = Field(alias="chatId")
    title: str
    created_at: int = Field(alias="createdAt")
